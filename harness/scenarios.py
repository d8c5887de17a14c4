"""
Named load scenarios.

Each :class:`Scenario` pairs a load shape (workers, requests, pages,
pauses) with the thresholds that shape is expected to meet.  The presets
below reproduce the performance checks the listing endpoint has always
been held to: a single slow-request guard, a sequential page walk, a
small concurrent burst, and a 100-request high-load run.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable

from harness.load_generator import (
    LoadPlan,
    SpecFactory,
    fixed_page,
    page_per_request,
    page_per_worker,
)
from harness.thresholds import ThresholdPolicy, default_policy, threshold


@dataclass(frozen=True)
class Scenario:
    """
    A load shape plus the limits it must satisfy.

    Attributes:
        name: Registry key, also used on the command line.
        description: One-line summary for ``list`` output.
        worker_count: Concurrent workers.
        requests_per_worker: Sequential requests per worker.
        size: ``size`` query parameter.
        spec_factory_builder: Turns ``size`` into a spec factory.
        jitter: Optional pause range between a worker's requests.
        run_timeout: Optional whole-run limit in seconds.
        policy_builder: Returns the scenario's threshold policy.
    """

    name: str
    description: str
    worker_count: int
    requests_per_worker: int
    size: int
    spec_factory_builder: Callable[[int], SpecFactory]
    policy_builder: Callable[[], ThresholdPolicy]
    jitter: tuple[float, float] | None = None
    run_timeout: float | None = None

    def plan(self) -> LoadPlan:
        return LoadPlan(
            worker_count=self.worker_count,
            requests_per_worker=self.requests_per_worker,
            spec_factory=self.spec_factory_builder(self.size),
            jitter=self.jitter,
        )

    def policy(self) -> ThresholdPolicy:
        return self.policy_builder()

    def with_overrides(self, **changes) -> Scenario:
        """Copy with ``None`` values ignored, so CLI flags can be passed through."""
        return replace(self, **{key: value for key, value in changes.items() if value is not None})


def _single_request_policy() -> ThresholdPolicy:
    return ThresholdPolicy(
        [
            threshold("max_latency", "max_latency_ms", "<", 6500),
            threshold("http_success_rate", "success_rate", ">=", 100),
            threshold("valid_data_rate", "valid_data_rate", ">=", 100),
        ]
    )


def _continuous_policy() -> ThresholdPolicy:
    return ThresholdPolicy(
        [
            threshold("average_latency", "average_latency_ms", "<", 300),
            threshold("max_latency", "max_latency_ms", "<", 1000),
            threshold("valid_data_rate", "valid_data_rate", ">=", 50),
        ]
    )


def _concurrent_policy() -> ThresholdPolicy:
    return ThresholdPolicy(
        [
            threshold("http_success_rate", "success_rate", ">=", 100),
            threshold("max_latency", "max_latency_ms", "<", 2000),
        ]
    )


SCENARIOS: dict[str, Scenario] = {
    "single_request": Scenario(
        name="single_request",
        description="One request for page 1 (size 5) must answer within 6.5s with data",
        worker_count=1,
        requests_per_worker=1,
        size=5,
        spec_factory_builder=lambda size: fixed_page(1, size),
        policy_builder=_single_request_policy,
    ),
    "continuous": Scenario(
        name="continuous",
        description="Ten sequential requests walking pages 1-10 with a 100ms pause",
        worker_count=1,
        requests_per_worker=10,
        size=1,
        spec_factory_builder=page_per_request,
        policy_builder=_continuous_policy,
        jitter=(0.1, 0.1),
    ),
    "concurrent": Scenario(
        name="concurrent",
        description="Five workers hitting page 1 (size 2) twice each within 10s",
        worker_count=5,
        requests_per_worker=2,
        size=2,
        spec_factory_builder=lambda size: fixed_page(1, size),
        policy_builder=_concurrent_policy,
        run_timeout=10.0,
    ),
    "high_load": Scenario(
        name="high_load",
        description="Twenty workers x five requests, one page each, 0-50ms jitter",
        worker_count=20,
        requests_per_worker=5,
        size=1,
        spec_factory_builder=page_per_worker,
        policy_builder=default_policy,
        jitter=(0.0, 0.05),
    ),
}


def get_scenario(name: str) -> Scenario:
    """
    Look up a scenario by name.

    Raises:
        KeyError: If *name* is not registered; the message lists the
            known names.
    """
    try:
        return SCENARIOS[name]
    except KeyError:
        known = ", ".join(sorted(SCENARIOS))
        raise KeyError(f"Unknown scenario '{name}'. Known scenarios: {known}") from None
