"""
Concurrent load generation.

:class:`LoadGenerator` runs a :class:`LoadPlan`: ``worker_count`` threads,
each issuing ``requests_per_worker`` requests one after another, all
feeding a single :class:`~harness.aggregator.StatsAggregator`.  The call
blocks until every worker has joined and then returns the sealed
:class:`~harness.models.Snapshot`.

Key Concepts Demonstrated:
- ``ThreadPoolExecutor`` as a task group with an explicit join barrier
- Interruptible jitter via ``threading.Event.wait`` instead of ``sleep``
- Run deadline that caps in-flight timeouts and skips unstarted requests
- Fault isolation: one worker's exception becomes a counted failure
"""

from __future__ import annotations

import logging
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Callable, Protocol

from harness.aggregator import StatsAggregator, ValidDataRule
from harness.config import get_config
from harness.models import RequestOutcome, RequestSpec, Snapshot

logger = logging.getLogger(__name__)

# (worker_index, request_index) -> RequestSpec; both indexes start at 0.
SpecFactory = Callable[[int, int], RequestSpec]


class Executor(Protocol):
    def execute(self, spec: RequestSpec, timeout: float | None = None) -> RequestOutcome: ...


def page_per_worker(size: int) -> SpecFactory:
    """Give each worker its own page (worker 0 reads page 1) with a fixed size."""

    def _factory(worker_index: int, _request_index: int) -> RequestSpec:
        return RequestSpec(page=worker_index + 1, size=size)

    return _factory


def page_per_request(size: int) -> SpecFactory:
    """Walk successive pages within one worker (request 0 reads page 1)."""

    def _factory(_worker_index: int, request_index: int) -> RequestSpec:
        return RequestSpec(page=request_index + 1, size=size)

    return _factory


def fixed_page(page: int, size: int) -> SpecFactory:
    """Every request asks for the same page."""
    spec = RequestSpec(page=page, size=size)
    return lambda _worker_index, _request_index: spec


def default_spec_factory() -> SpecFactory:
    """Page per worker at the configured ``DEFAULT_PAGE_SIZE``."""
    return page_per_worker(get_config().DEFAULT_PAGE_SIZE)


@dataclass(frozen=True)
class LoadPlan:
    """
    Shape of one load run, validated before any thread is started.

    Attributes:
        worker_count: Number of concurrent workers (>= 1).
        requests_per_worker: Sequential requests per worker (>= 1).
        spec_factory: Builds the request for each ``(worker, request)``;
            defaults to :func:`default_spec_factory`.
        jitter: Optional ``(min_seconds, max_seconds)`` pause between a
            worker's own requests.
    """

    worker_count: int
    requests_per_worker: int
    spec_factory: SpecFactory = field(default_factory=default_spec_factory)
    jitter: tuple[float, float] | None = None

    def __post_init__(self) -> None:
        if self.worker_count < 1:
            raise ValueError(f"worker_count must be >= 1, got {self.worker_count}")
        if self.requests_per_worker < 1:
            raise ValueError(
                f"requests_per_worker must be >= 1, got {self.requests_per_worker}"
            )
        if self.jitter is not None:
            low, high = self.jitter
            if low < 0 or high < low:
                raise ValueError(f"jitter must satisfy 0 <= min <= max, got {self.jitter}")

    @property
    def total_requests(self) -> int:
        return self.worker_count * self.requests_per_worker


class LoadGenerator:
    """
    Orchestrate concurrent workers against one executor.

    Args:
        executor: Anything with ``execute(spec, timeout=None)``; shared by
            every worker.
        run_timeout: Seconds the whole run may take.  Requests still
            waiting to start after that are recorded as ``not_issued``;
            requests already in flight have their timeout capped so they
            resolve to an outcome.
        valid_data_rule: Forwarded to the run's aggregator.
        seed: Seed for the jitter generator, for repeatable runs.
    """

    def __init__(
        self,
        executor: Executor,
        *,
        run_timeout: float | None = None,
        valid_data_rule: ValidDataRule | None = None,
        seed: int | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        if run_timeout is not None and run_timeout <= 0:
            raise ValueError(f"run_timeout must be > 0, got {run_timeout}")
        self._executor = executor
        self._run_timeout = run_timeout
        self._valid_data_rule = valid_data_rule
        self._rng = random.Random(seed)
        self._clock = clock
        self._stop = threading.Event()

    def cancel(self) -> None:
        """
        Stop starting new requests and wake any worker paused on jitter.

        Applies to the run in progress, or to the next run if none is active.
        """
        self._stop.set()

    def run(self, plan: LoadPlan) -> Snapshot:
        """
        Execute *plan* and return the snapshot taken after all workers join.

        Raises:
            RuntimeError: If the snapshot does not account for exactly
                ``plan.total_requests`` outcomes.
        """
        aggregator = StatsAggregator(self._valid_data_rule)
        logger.info(
            "Starting load run: %d workers x %d requests",
            plan.worker_count,
            plan.requests_per_worker,
        )

        try:
            with ThreadPoolExecutor(
                max_workers=plan.worker_count, thread_name_prefix="load-worker"
            ) as pool:
                started = self._clock()
                deadline = None if self._run_timeout is None else started + self._run_timeout
                futures = [
                    pool.submit(self._worker, worker_index, plan, aggregator, deadline)
                    for worker_index in range(plan.worker_count)
                ]
                wait(futures)
                duration = self._clock() - started
        finally:
            # A cancel() issued before or during this run applies to this run only.
            self._stop.clear()

        snapshot = aggregator.snapshot(duration)
        if snapshot.total_requests != plan.total_requests:
            raise RuntimeError(
                f"Recorded {snapshot.total_requests} outcomes, expected {plan.total_requests}"
            )

        logger.info(
            "Load run finished: %d requests in %.2fs (%d failures)",
            snapshot.total_requests,
            snapshot.duration_seconds,
            snapshot.failure_count,
        )
        return snapshot

    def _remaining(self, deadline: float | None) -> float | None:
        if deadline is None:
            return None
        return deadline - self._clock()

    def _pause(self, jitter: tuple[float, float], deadline: float | None) -> None:
        """Sleep for a random jitter, never past the run deadline or a cancel()."""
        if self._stop.is_set():
            return
        pause = self._rng.uniform(*jitter)
        remaining = self._remaining(deadline)
        if remaining is not None:
            pause = min(pause, remaining)
        if pause > 0:
            self._stop.wait(pause)

    def _worker(
        self,
        worker_index: int,
        plan: LoadPlan,
        aggregator: StatsAggregator,
        deadline: float | None,
    ) -> None:
        recorded = 0
        try:
            for request_index in range(plan.requests_per_worker):
                outcome = self._attempt(worker_index, request_index, plan, deadline)
                aggregator.record(outcome)
                recorded += 1
                logger.debug(
                    "worker=%d request=%d status=%s latency=%dms items=%s error=%s",
                    worker_index,
                    request_index,
                    outcome.status_code,
                    outcome.latency_ms,
                    outcome.item_count,
                    outcome.error.value if outcome.error else None,
                )

                last = request_index == plan.requests_per_worker - 1
                if plan.jitter is not None and not last:
                    self._pause(plan.jitter, deadline)
        except Exception:
            # Keep totals exact even if something outside _attempt breaks.
            logger.exception("Worker %d failed; recording remaining requests", worker_index)
            for _ in range(plan.requests_per_worker - recorded):
                aggregator.record(RequestOutcome.not_issued(f"worker {worker_index} aborted"))

    def _attempt(
        self,
        worker_index: int,
        request_index: int,
        plan: LoadPlan,
        deadline: float | None,
    ) -> RequestOutcome:
        if self._stop.is_set():
            return RequestOutcome.not_issued("run cancelled")

        remaining = self._remaining(deadline)
        if remaining is not None and remaining <= 0:
            return RequestOutcome.not_issued("run deadline exceeded")

        started = self._clock()
        try:
            spec = plan.spec_factory(worker_index, request_index)
            return self._executor.execute(spec, timeout=remaining)
        except Exception as exc:
            logger.exception(
                "Request %d of worker %d raised; counting it as a failure",
                request_index,
                worker_index,
            )
            elapsed_ms = int((self._clock() - started) * 1000)
            return RequestOutcome.internal_failure(elapsed_ms, f"{type(exc).__name__}: {exc}")
