"""
Value objects shared by every harness component.

Nothing in this module holds shared mutable state: requests, outcomes,
snapshots and verdicts are frozen dataclasses that can be handed between
threads freely.  The only mutable aggregate lives inside
:class:`harness.aggregator.StatsAggregator`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

# Status code recorded when no HTTP response was received at all.
TRANSPORT_FAILURE_STATUS = 0


class ErrorKind(str, Enum):
    """Enumeration of the ways a single request can go wrong."""

    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    SCHEMA = "schema"
    INTERNAL = "internal"
    NOT_ISSUED = "not_issued"


@dataclass(frozen=True)
class RequestSpec:
    """Query parameters for one listing request."""

    page: int
    size: int

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if self.size < 1:
            raise ValueError(f"size must be >= 1, got {self.size}")

    def as_params(self) -> dict[str, int]:
        return {"page": self.page, "size": self.size}


@dataclass(frozen=True)
class RequestOutcome:
    """
    Classified result of one request attempt.

    Attributes:
        status_code: HTTP status, or ``TRANSPORT_FAILURE_STATUS`` when the
            request never produced a response.
        latency_ms: Wall-clock time from dispatch to response (or failure).
        item_count: Length of the ``items`` list; ``None`` when the field
            was absent or not a list.
        has_valid_schema: True only if every item had the expected shape.
        error: What went wrong, or ``None`` for a clean response.
        detail: Free-text explanation for logs and reports.
    """

    status_code: int
    latency_ms: int
    item_count: int | None = None
    has_valid_schema: bool = False
    error: ErrorKind | None = None
    detail: str | None = None

    def __post_init__(self) -> None:
        if self.latency_ms < 0:
            raise ValueError(f"latency_ms must be >= 0, got {self.latency_ms}")
        if self.item_count is not None and self.item_count < 0:
            raise ValueError(f"item_count must be >= 0, got {self.item_count}")

    @property
    def was_issued(self) -> bool:
        """False for requests the harness skipped, which have no latency."""
        return self.error is not ErrorKind.NOT_ISSUED

    @classmethod
    def not_issued(cls, reason: str) -> RequestOutcome:
        return cls(
            status_code=TRANSPORT_FAILURE_STATUS,
            latency_ms=0,
            error=ErrorKind.NOT_ISSUED,
            detail=reason,
        )

    @classmethod
    def internal_failure(cls, latency_ms: int, reason: str) -> RequestOutcome:
        return cls(
            status_code=TRANSPORT_FAILURE_STATUS,
            latency_ms=max(latency_ms, 0),
            error=ErrorKind.INTERNAL,
            detail=reason,
        )


def _percent(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return part * 100.0 / whole


@dataclass(frozen=True)
class Snapshot:
    """
    Immutable point-in-time copy of the aggregated counters.

    Produced once per run, after every worker has joined.  Rates are
    percentages in the ``0..100`` range.  ``error_counts`` is copied into a
    read-only mapping and left out of the hash.
    """

    total_requests: int = 0
    success_count: int = 0
    failure_count: int = 0
    empty_data_count: int = 0
    valid_data_count: int = 0
    schema_error_count: int = 0
    timeout_count: int = 0
    not_issued_count: int = 0
    latency_samples: int = 0
    sum_latency_ms: int = 0
    min_latency_ms: int = 0
    max_latency_ms: int = 0
    duration_seconds: float = 0.0
    error_counts: Mapping[str, int] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "error_counts", MappingProxyType(dict(self.error_counts)))

    @property
    def average_latency_ms(self) -> float:
        if self.latency_samples == 0:
            return 0.0
        return self.sum_latency_ms / self.latency_samples

    @property
    def success_rate(self) -> float:
        return _percent(self.success_count, self.total_requests)

    @property
    def valid_data_rate(self) -> float:
        return _percent(self.valid_data_count, self.total_requests)

    @property
    def empty_data_rate(self) -> float:
        return _percent(self.empty_data_count, self.total_requests)

    @property
    def throughput_per_second(self) -> float:
        if self.duration_seconds <= 0:
            return 0.0
        return self.total_requests / self.duration_seconds

    def as_dict(self) -> dict[str, Any]:
        """Export raw counters and derived metrics for printing or JSON."""
        return {
            "total_requests": self.total_requests,
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "valid_data_count": self.valid_data_count,
            "empty_data_count": self.empty_data_count,
            "schema_error_count": self.schema_error_count,
            "timeout_count": self.timeout_count,
            "not_issued_count": self.not_issued_count,
            "latency_samples": self.latency_samples,
            "sum_latency_ms": self.sum_latency_ms,
            "min_latency_ms": self.min_latency_ms,
            "max_latency_ms": self.max_latency_ms,
            "average_latency_ms": self.average_latency_ms,
            "duration_seconds": self.duration_seconds,
            "success_rate": self.success_rate,
            "valid_data_rate": self.valid_data_rate,
            "empty_data_rate": self.empty_data_rate,
            "throughput_per_second": self.throughput_per_second,
            "error_counts": dict(self.error_counts),
        }


@dataclass(frozen=True)
class CheckResult:
    """Outcome of evaluating one threshold check against a snapshot."""

    name: str
    passed: bool
    actual_value: Any
    message: str


@dataclass(frozen=True)
class VerdictReport:
    """Every check result of one validation, in policy order."""

    results: tuple[CheckResult, ...] = ()

    @property
    def passed(self) -> bool:
        return not self.failed_checks

    @property
    def failed_checks(self) -> tuple[CheckResult, ...]:
        return tuple(result for result in self.results if not result.passed)
