"""
Single-request execution against the paginated listing endpoint.

:class:`RequestExecutor` sends one ``GET`` per call, times it, and turns
whatever happens (a clean page, an HTTP error, a dropped connection, a
malformed body) into a :class:`~harness.models.RequestOutcome`.  It never
lets a transport or protocol problem escape as an exception; load
generation depends on every request resolving to a value it can count.

Key Concepts Demonstrated:
- Outcome-as-data instead of assertions inside worker threads
- Exception-to-classification mapping for ``requests`` failures
- Strict JSON shape checks (``bool`` is not an ``int`` here)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import urljoin

import requests

from harness.models import TRANSPORT_FAILURE_STATUS, ErrorKind, RequestOutcome, RequestSpec

logger = logging.getLogger(__name__)

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


@dataclass(frozen=True)
class ListingInspection:
    """Result of checking a response body for a well-formed ``items`` list."""

    item_count: int | None
    valid: bool
    problem: str | None = None


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _item_problem(index: int, item: Any) -> str | None:
    """Describe the first thing wrong with one listing item, if anything."""
    if not isinstance(item, dict):
        return f"items[{index}] is not an object"
    for key in ("id", "name", "price"):
        if key not in item:
            return f"items[{index}] missing {key} field"
    if not _is_int(item["id"]):
        return f"items[{index}].id is not an integer"
    if not isinstance(item["name"], str):
        return f"items[{index}].name is not a string"
    if not _is_number(item["price"]):
        return f"items[{index}].price is not a number"
    return None


def inspect_listing(body: Any) -> ListingInspection:
    """
    Check a decoded response body against the listing contract.

    An empty ``items`` list is a valid page with zero entries; a missing
    or non-list ``items`` field is reported with ``item_count=None`` so
    callers can tell "no data" apart from "no field".

    Args:
        body: The decoded JSON body (any type).

    Returns:
        A :class:`ListingInspection` with the item count and the first
        problem found, if any.
    """
    if not isinstance(body, dict):
        return ListingInspection(item_count=None, valid=False, problem="body is not a JSON object")

    items = body.get("items")
    if items is None:
        return ListingInspection(item_count=None, valid=False, problem="items field missing")
    if not isinstance(items, list):
        return ListingInspection(item_count=None, valid=False, problem="items is not a list")

    for index, item in enumerate(items):
        problem = _item_problem(index, item)
        if problem is not None:
            return ListingInspection(item_count=len(items), valid=False, problem=problem)

    return ListingInspection(item_count=len(items), valid=True)


def _decode_json(response: Any) -> Any:
    """Return the decoded body, or ``None`` if it is not JSON."""
    try:
        return response.json()
    except ValueError:
        return None


class RequestExecutor:
    """
    Issue listing requests and classify the results.

    The executor only holds read-only configuration, so one instance is
    shared by every worker thread.  Each call goes through the
    module-level ``requests.request`` rather than a shared ``Session``.

    Attributes:
        url: Absolute URL of the listing endpoint.
        timeout: Default per-request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        endpoint: str = "/api/products",
        timeout: float = 10.0,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.url = urljoin(base_url.rstrip("/") + "/", endpoint.lstrip("/"))
        self.timeout = timeout
        self._clock = clock

    def _elapsed_ms(self, started: float) -> int:
        return max(int((self._clock() - started) * 1000), 0)

    def execute(self, spec: RequestSpec, timeout: float | None = None) -> RequestOutcome:
        """
        Send one request and return its classified outcome.

        Args:
            spec: Page and size to request.
            timeout: Optional cap on the configured timeout, used when a
                run deadline leaves less time than usual.

        Returns:
            A :class:`RequestOutcome`; this method does not raise for
            network or protocol failures.
        """
        effective_timeout = self.timeout if timeout is None else min(self.timeout, timeout)
        started = self._clock()
        try:
            response = requests.request(
                method="GET",
                url=self.url,
                params=spec.as_params(),
                headers=JSON_HEADERS,
                timeout=effective_timeout,
            )
        except requests.Timeout as exc:
            return RequestOutcome(
                status_code=TRANSPORT_FAILURE_STATUS,
                latency_ms=self._elapsed_ms(started),
                error=ErrorKind.TIMEOUT,
                detail=f"timed out after {effective_timeout}s: {exc}",
            )
        except requests.RequestException as exc:
            return RequestOutcome(
                status_code=TRANSPORT_FAILURE_STATUS,
                latency_ms=self._elapsed_ms(started),
                error=ErrorKind.TRANSPORT,
                detail=f"{type(exc).__name__}: {exc}",
            )

        latency_ms = self._elapsed_ms(started)
        status_code = response.status_code
        if not 200 <= status_code < 300:
            return RequestOutcome(
                status_code=status_code,
                latency_ms=latency_ms,
                error=ErrorKind.HTTP_STATUS,
                detail=f"Expected 2xx, got {status_code}",
            )

        inspection = inspect_listing(_decode_json(response))
        if not inspection.valid:
            logger.debug("Schema problem on %s page=%s: %s", self.url, spec.page, inspection.problem)
        return RequestOutcome(
            status_code=status_code,
            latency_ms=latency_ms,
            item_count=inspection.item_count,
            has_valid_schema=inspection.valid,
            error=None if inspection.valid else ErrorKind.SCHEMA,
            detail=inspection.problem,
        )
