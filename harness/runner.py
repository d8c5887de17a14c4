"""
Scenario runner.

:class:`Harness` wires configuration, executor, load generator and
validator together so callers (the CLI, pytest, a CI job) only need a
scenario name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from harness.aggregator import ValidDataRule
from harness.config import Config
from harness.executor import RequestExecutor
from harness.load_generator import Executor, LoadGenerator
from harness.models import Snapshot, VerdictReport
from harness.scenarios import Scenario, get_scenario
from harness.thresholds import ThresholdPolicy, ThresholdValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScenarioResult:
    """What a finished scenario hands to reporting."""

    scenario_name: str
    snapshot: Snapshot
    verdict: VerdictReport

    @property
    def passed(self) -> bool:
        return self.verdict.passed


class Harness:
    """
    Run named scenarios against the configured listing endpoint.

    Args:
        config: A :class:`~harness.config.Config` class (or instance).
        executor: Overrides the HTTP executor, e.g. with a stub in tests.
        valid_data_rule: Overrides how successes split into valid/empty.
    """

    def __init__(
        self,
        config: type[Config] | Config,
        executor: Executor | None = None,
        valid_data_rule: ValidDataRule | None = None,
    ):
        self.config = config
        self.executor = executor or RequestExecutor(
            base_url=config.BASE_URL,
            endpoint=config.API_ENDPOINT,
            timeout=config.REQUEST_TIMEOUT,
        )
        self.validator = ThresholdValidator()
        self._valid_data_rule = valid_data_rule

    def run(
        self,
        scenario: Scenario | str,
        policy: ThresholdPolicy | None = None,
        **overrides,
    ) -> ScenarioResult:
        """
        Run one scenario and validate its snapshot.

        Args:
            scenario: A :class:`Scenario` or a registered scenario name.
            policy: Replaces the scenario's own thresholds when given.
            **overrides: Scenario fields to replace (``None`` is ignored).

        Returns:
            The snapshot and verdict for the run.
        """
        if isinstance(scenario, str):
            scenario = get_scenario(scenario)
        scenario = scenario.with_overrides(**overrides)

        run_timeout = scenario.run_timeout or self.config.RUN_TIMEOUT
        generator = LoadGenerator(
            self.executor,
            run_timeout=run_timeout,
            valid_data_rule=self._valid_data_rule,
        )

        logger.info("Running scenario %s against %s", scenario.name, self.config.BASE_URL)
        snapshot = generator.run(scenario.plan())
        verdict = self.validator.validate(snapshot, policy or scenario.policy())

        if verdict.passed:
            logger.info("Scenario %s passed", scenario.name)
        else:
            logger.warning(
                "Scenario %s failed %d check(s): %s",
                scenario.name,
                len(verdict.failed_checks),
                ", ".join(check.name for check in verdict.failed_checks),
            )
        return ScenarioResult(scenario_name=scenario.name, snapshot=snapshot, verdict=verdict)
