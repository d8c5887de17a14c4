"""
Listing Load Harness configuration.

Defines environment-specific configuration classes for the harness.  Each
class captures where the paginated listing endpoint lives and how patient
the harness should be with it (per-request and whole-run timeouts).  The
``get_config`` factory selects the right class based on the
``HARNESS_ENV`` environment variable (or an explicit key).

Key Concepts Demonstrated:
- Class-based configuration with inheritance for DRY defaults
- Environment-variable overrides so CI can retarget the harness
- Separate testing configuration with short timeouts and a fake host
"""

from __future__ import annotations

import os
from pathlib import Path

def _optional_float(name: str, default: str | None) -> float | None:
    """Read a float env var where an empty string means "no limit"."""
    raw = os.environ.get(name, default)
    if raw is None or raw.strip() == "":
        return None
    return float(raw)


def _page_range(name: str, default: str) -> tuple[int, int]:
    """Parse a ``first-last`` page range such as ``1-10``."""
    raw = os.environ.get(name, default)
    first, _, last = raw.partition("-")
    return int(first), int(last or first)


class Config:
    """
    Base (shared) configuration for the harness.

    All environment-specific classes inherit from ``Config`` so that
    common defaults only need to be stated once.
    """

    # Root URL of the service under test.
    BASE_URL: str = os.environ.get("HARNESS_BASE_URL", "http://localhost:5000")

    # Path of the paginated listing endpoint on that service.
    API_ENDPOINT: str = os.environ.get("HARNESS_API_ENDPOINT", "/api/products")

    # ``size`` sent when a scenario does not choose one itself.
    DEFAULT_PAGE_SIZE: int = int(os.environ.get("HARNESS_PAGE_SIZE", "1"))

    # Pages known to hold data on the target service.
    DEFAULT_PAGE_RANGE: tuple[int, int] = _page_range("HARNESS_PAGE_RANGE", "1-10")

    # Seconds a single request may take before it counts as a timeout.
    REQUEST_TIMEOUT: float = float(os.environ.get("HARNESS_REQUEST_TIMEOUT", "10"))

    # Seconds a whole run may take; empty means unbounded.
    RUN_TIMEOUT: float | None = _optional_float("HARNESS_RUN_TIMEOUT", "")

    # YAML policy applied to every CLI run unless --thresholds is given;
    # unset means each scenario keeps its own limits.
    THRESHOLDS_FILE: Path | None = (
        Path(os.environ["HARNESS_THRESHOLDS_FILE"])
        if os.environ.get("HARNESS_THRESHOLDS_FILE")
        else None
    )


class DevelopmentConfig(Config):
    """Local runs against a service on the developer's machine."""

    DEBUG: bool = True
    TESTING: bool = False


class TestingConfig(Config):
    """
    Test-suite overrides.

    Points at a non-routable host so unit tests never leak real traffic,
    and keeps timeouts short so simulated slow backends finish quickly.
    """

    DEBUG: bool = True
    TESTING: bool = True
    BASE_URL: str = os.environ.get("TEST_HARNESS_BASE_URL", "http://catalog.test")
    REQUEST_TIMEOUT: float = float(os.environ.get("TEST_HARNESS_REQUEST_TIMEOUT", "1"))
    RUN_TIMEOUT: float | None = _optional_float("TEST_HARNESS_RUN_TIMEOUT", "30")


class ProductionConfig(Config):
    """
    Runs against a deployed environment.

    Everything except the debug flags is expected to come from the CI
    job's environment variables.
    """

    DEBUG: bool = False
    TESTING: bool = False


# Lookup table mapping environment name strings to their config classes.
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Return the configuration class for the given environment.

    Args:
        env: One of ``"development"``, ``"testing"``, or
            ``"production"``.  When *None*, the ``HARNESS_ENV``
            environment variable is consulted, falling back to
            ``"development"`` if unset.

    Returns:
        The ``Config`` subclass matching the requested environment,
        or ``DevelopmentConfig`` if the key is unrecognised.
    """
    if env is None:
        env = os.environ.get("HARNESS_ENV", "development")
    return config.get(env, config["default"])
