"""
Shared pytest fixtures for the listing load harness test suite.

Most harness behaviour can be verified without a network: stub executors
return scripted :class:`~harness.models.RequestOutcome` values so that
aggregation, load generation and threshold validation are tested in
isolation.  Fixtures follow the Arrange-Act-Assert (AAA) pattern and hand
every test fresh objects.

Key Concepts Demonstrated:
- Outcome fixtures for every bucket the aggregator distinguishes
- Faker-driven test data for listing payloads
- Factory fixtures for snapshots with just the fields a test cares about
"""

from __future__ import annotations

import os
from typing import Any, Callable

import pytest
from faker import Faker

# Set testing environment before importing the harness
os.environ["HARNESS_ENV"] = "testing"

from harness.models import TRANSPORT_FAILURE_STATUS, ErrorKind, RequestOutcome, Snapshot

fake = Faker()


# -----------------------------------------------------------------------------
# Outcome / Payload Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def product_factory() -> Callable[..., dict[str, Any]]:
    """
    Factory fixture for listing items with the expected shape.

    Example:
        def test_something(product_factory):
            item = product_factory(price=9.5)
    """

    def _create_product(**overrides: Any) -> dict[str, Any]:
        product = {
            "id": fake.pyint(min_value=1, max_value=10_000),
            "name": fake.word(),
            "price": fake.pyfloat(left_digits=3, right_digits=2, positive=True),
        }
        product.update(overrides)
        return product

    return _create_product


@pytest.fixture
def valid_outcome() -> RequestOutcome:
    """A 200 response with one well-formed item."""
    return RequestOutcome(status_code=200, latency_ms=20, item_count=1, has_valid_schema=True)


@pytest.fixture
def empty_outcome() -> RequestOutcome:
    """A 200 response with an empty ``items`` list."""
    return RequestOutcome(status_code=200, latency_ms=15, item_count=0, has_valid_schema=True)


@pytest.fixture
def timeout_outcome() -> RequestOutcome:
    """A request that never got a response."""
    return RequestOutcome(
        status_code=TRANSPORT_FAILURE_STATUS,
        latency_ms=1000,
        error=ErrorKind.TIMEOUT,
        detail="timed out",
    )


@pytest.fixture
def server_error_outcome() -> RequestOutcome:
    """A 500 from the listing service."""
    return RequestOutcome(status_code=500, latency_ms=30, error=ErrorKind.HTTP_STATUS)


@pytest.fixture
def snapshot_factory() -> Callable[..., Snapshot]:
    """
    Build consistent snapshots from a few headline numbers.

    ``total`` requests of which ``failures`` failed and ``empty`` were
    empty successes; the rest are valid.  Latency defaults to 100ms per
    request and duration to 1 second.
    """

    def _create_snapshot(
        total: int = 100,
        failures: int = 0,
        empty: int = 0,
        latency_ms: int = 100,
        duration_seconds: float = 1.0,
    ) -> Snapshot:
        success = total - failures
        return Snapshot(
            total_requests=total,
            success_count=success,
            failure_count=failures,
            empty_data_count=empty,
            valid_data_count=success - empty,
            latency_samples=total,
            sum_latency_ms=latency_ms * total,
            min_latency_ms=latency_ms,
            max_latency_ms=latency_ms,
            duration_seconds=duration_seconds,
        )

    return _create_snapshot
