"""
Declarative pass/fail thresholds over a run snapshot.

A :class:`ThresholdPolicy` is an ordered set of named :class:`Check`
objects, each a ``Snapshot -> bool`` predicate plus a message template.
:class:`ThresholdValidator` evaluates every check (no short-circuiting)
and returns a :class:`~harness.models.VerdictReport` listing each result,
so a run that breaches three limits reports all three.

Policies can be built in code with :func:`threshold`, composed with
``+``, narrowed with :meth:`ThresholdPolicy.without`, or loaded from a
YAML file with :func:`load_policy`::

    checks:
      - name: http_success_rate
        metric: success_rate
        operator: ">="
        limit: 95

Key Concepts Demonstrated:
- Thresholds as data instead of assertions scattered across tests
- Complete reports: every check runs, even after an earlier failure
- YAML-driven gates that CI can tune without code changes
"""

from __future__ import annotations

import logging
import operator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable

import yaml

from harness.models import CheckResult, Snapshot, VerdictReport

logger = logging.getLogger(__name__)

# Metric name -> unit suffix used in messages.
METRIC_UNITS: dict[str, str] = {
    "total_requests": "",
    "success_count": "",
    "failure_count": "",
    "valid_data_count": "",
    "empty_data_count": "",
    "schema_error_count": "",
    "timeout_count": "",
    "not_issued_count": "",
    "success_rate": "%",
    "valid_data_rate": "%",
    "empty_data_rate": "%",
    "average_latency_ms": "ms",
    "min_latency_ms": "ms",
    "max_latency_ms": "ms",
    "throughput_per_second": " req/s",
}

OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    ">=": operator.ge,
    ">": operator.gt,
    "<=": operator.le,
    "<": operator.lt,
    "==": operator.eq,
}


@dataclass(frozen=True)
class Check:
    """
    One named pass/fail rule.

    Attributes:
        name: Unique name within a policy; used in reports.
        predicate: Returns True when the snapshot passes.
        message: Human-readable text; ``{actual}`` is replaced with the
            observed value.
        observe: Extracts the value shown in the report.  Optional for
            checks that are not about a single metric.
    """

    name: str
    predicate: Callable[[Snapshot], bool]
    message: str
    observe: Callable[[Snapshot], Any] | None = None


class ThresholdPolicy:
    """Ordered, name-unique collection of checks."""

    def __init__(self, checks: Iterable[Check] = ()):
        self._checks: tuple[Check, ...] = tuple(checks)
        seen: set[str] = set()
        for check in self._checks:
            if check.name in seen:
                raise ValueError(f"Duplicate check name in policy: {check.name}")
            seen.add(check.name)

    def __iter__(self):
        return iter(self._checks)

    def __len__(self) -> int:
        return len(self._checks)

    def __add__(self, other: ThresholdPolicy) -> ThresholdPolicy:
        return ThresholdPolicy(self._checks + tuple(other))

    def __repr__(self) -> str:
        return f"ThresholdPolicy({list(self.names)!r})"

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(check.name for check in self._checks)

    def without(self, *names: str) -> ThresholdPolicy:
        """Return a copy with the named checks removed."""
        return ThresholdPolicy(check for check in self._checks if check.name not in names)


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def threshold(name: str, metric: str, op: str, limit: float) -> Check:
    """
    Build a check comparing one snapshot metric against a limit.

    Args:
        name: Check name shown in reports.
        metric: A :class:`Snapshot` field or property from ``METRIC_UNITS``.
        op: One of ``>=``, ``>``, ``<=``, ``<``, ``==``.
        limit: Value the metric is compared against.

    Raises:
        ValueError: For an unknown metric or operator.
    """
    if metric not in METRIC_UNITS:
        raise ValueError(f"Unknown metric: {metric}")
    if op not in OPERATORS:
        raise ValueError(f"Unknown operator: {op}")

    limit = float(limit)
    compare = OPERATORS[op]
    unit = METRIC_UNITS[metric]

    def _observe(snapshot: Snapshot) -> Any:
        return getattr(snapshot, metric)

    return Check(
        name=name,
        predicate=lambda snapshot: compare(_observe(snapshot), limit),
        message=f"{metric} must be {op} {_format_value(limit)}{unit}, actual: {{actual}}{unit}",
        observe=_observe,
    )


def default_policy() -> ThresholdPolicy:
    """Limits for the twenty-worker high-load run."""
    return ThresholdPolicy(
        [
            threshold("http_success_rate", "success_rate", ">=", 95),
            threshold("valid_data_rate", "valid_data_rate", ">=", 30),
            threshold("average_latency", "average_latency_ms", "<", 1000),
            threshold("throughput", "throughput_per_second", ">", 10),
        ]
    )


def policy_from_mapping(data: Any) -> ThresholdPolicy:
    """
    Build a policy from already-parsed YAML/JSON data.

    Raises:
        ValueError: If ``checks`` is missing or an entry is malformed.
    """
    if not isinstance(data, dict) or not isinstance(data.get("checks"), list):
        raise ValueError("Thresholds file must define a 'checks' list")

    checks = []
    for index, entry in enumerate(data["checks"]):
        if not isinstance(entry, dict):
            raise ValueError(f"checks[{index}] must be a mapping")
        try:
            metric = str(entry["metric"])
            op = str(entry.get("operator", ">="))
            limit = float(entry["limit"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(
                f"checks[{index}] must define 'metric' and a numeric 'limit'"
            ) from exc
        checks.append(threshold(str(entry.get("name", metric)), metric, op, limit))
    return ThresholdPolicy(checks)


def load_policy(path: Path) -> ThresholdPolicy:
    """Read a YAML thresholds file into a :class:`ThresholdPolicy`."""
    with Path(path).open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    policy = policy_from_mapping(data)
    logger.info("Loaded %d threshold checks from %s", len(policy), path)
    return policy


class ThresholdValidator:
    """Evaluate a policy against a snapshot. Holds no state between calls."""

    def validate(self, snapshot: Snapshot, policy: ThresholdPolicy) -> VerdictReport:
        return VerdictReport(tuple(self._evaluate(check, snapshot) for check in policy))

    @staticmethod
    def _evaluate(check: Check, snapshot: Snapshot) -> CheckResult:
        try:
            actual = check.observe(snapshot) if check.observe else None
            passed = bool(check.predicate(snapshot))
        except Exception as exc:
            # A broken predicate is a failed check, not a crashed report.
            return CheckResult(
                name=check.name,
                passed=False,
                actual_value=None,
                message=f"{check.name} could not be evaluated: {type(exc).__name__}: {exc}",
            )

        message = check.message.replace("{actual}", _format_value(actual))
        return CheckResult(name=check.name, passed=passed, actual_value=actual, message=message)
