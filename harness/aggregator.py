"""
Thread-safe accumulation of request outcomes.

Workers call :meth:`StatsAggregator.record` concurrently; the orchestrator
calls :meth:`StatsAggregator.snapshot` once every worker has joined.  Both
take the same short lock, so no update is lost and a snapshot never sees
half of an outcome.  Raw counters are private.
"""

from __future__ import annotations

import threading
from typing import Callable

from harness.models import ErrorKind, RequestOutcome, Snapshot

# Decides whether a successful response counts as "valid data" or "empty data".
ValidDataRule = Callable[[RequestOutcome], bool]


def items_present_and_valid(outcome: RequestOutcome) -> bool:
    """A page is valid data when it holds at least one well-formed item."""
    return bool(outcome.item_count) and outcome.has_valid_schema


def schema_valid(outcome: RequestOutcome) -> bool:
    """A page is valid data whenever its shape is right, even if empty."""
    return outcome.item_count is not None and outcome.has_valid_schema


# Errors that still leave the response in the success bucket.
_SUCCESS_ERRORS = (None, ErrorKind.SCHEMA)


def is_success(outcome: RequestOutcome) -> bool:
    return outcome.status_code == 200 and outcome.error in _SUCCESS_ERRORS


class StatsAggregator:
    """
    Accumulate outcomes into running totals.

    Args:
        valid_data_rule: Splits successes into valid and empty data.
            Defaults to :func:`items_present_and_valid`.
    """

    def __init__(self, valid_data_rule: ValidDataRule | None = None):
        self._valid_data_rule = valid_data_rule or items_present_and_valid
        self._lock = threading.Lock()
        self._total = 0
        self._success = 0
        self._failure = 0
        self._valid_data = 0
        self._empty_data = 0
        self._schema_errors = 0
        self._timeouts = 0
        self._not_issued = 0
        self._latency_samples = 0
        self._sum_latency_ms = 0
        self._min_latency_ms: int | None = None
        self._max_latency_ms: int | None = None
        self._error_counts: dict[str, int] = {}

    def record(self, outcome: RequestOutcome) -> None:
        """Count one outcome. Safe to call from any number of threads."""
        success = is_success(outcome)
        # Evaluated outside the lock; the rule only reads the outcome.
        valid = success and self._valid_data_rule(outcome)

        with self._lock:
            self._total += 1
            if success:
                self._success += 1
                if valid:
                    self._valid_data += 1
                else:
                    self._empty_data += 1
            else:
                self._failure += 1

            if outcome.error is not None:
                key = outcome.error.value
                self._error_counts[key] = self._error_counts.get(key, 0) + 1
                if outcome.error is ErrorKind.SCHEMA:
                    self._schema_errors += 1
                elif outcome.error is ErrorKind.TIMEOUT:
                    self._timeouts += 1
                elif outcome.error is ErrorKind.NOT_ISSUED:
                    self._not_issued += 1

            if outcome.was_issued:
                latency = outcome.latency_ms
                self._latency_samples += 1
                self._sum_latency_ms += latency
                if self._min_latency_ms is None or latency < self._min_latency_ms:
                    self._min_latency_ms = latency
                if self._max_latency_ms is None or latency > self._max_latency_ms:
                    self._max_latency_ms = latency

    def snapshot(self, duration_seconds: float) -> Snapshot:
        """
        Copy the current totals into an immutable :class:`Snapshot`.

        Args:
            duration_seconds: Wall-clock length of the run, used for
                throughput.

        Returns:
            A consistent snapshot taken under the lock.
        """
        with self._lock:
            return Snapshot(
                total_requests=self._total,
                success_count=self._success,
                failure_count=self._failure,
                empty_data_count=self._empty_data,
                valid_data_count=self._valid_data,
                schema_error_count=self._schema_errors,
                timeout_count=self._timeouts,
                not_issued_count=self._not_issued,
                latency_samples=self._latency_samples,
                sum_latency_ms=self._sum_latency_ms,
                min_latency_ms=self._min_latency_ms or 0,
                max_latency_ms=self._max_latency_ms or 0,
                duration_seconds=duration_seconds,
                error_counts=dict(self._error_counts),
            )
