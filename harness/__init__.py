"""
Listing load harness.

Concurrent load generation, thread-safe statistics and declarative
threshold validation for a paginated JSON listing endpoint.  Use
:func:`create_harness` to get a ready-to-run :class:`~harness.runner.Harness`
for an environment, mirroring an application factory.
"""

from __future__ import annotations

import logging

from harness.config import get_config
from harness.runner import Harness

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(threadName)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_harness(config_name: str | None = None, base_url: str | None = None) -> Harness:
    """
    Construct a harness for the given environment.

    Args:
        config_name: Optional environment key ("development", "testing",
            "production").  When *None*, ``HARNESS_ENV`` is consulted.
        base_url: Optional override for the configured ``BASE_URL``.

    Returns:
        A :class:`~harness.runner.Harness` using the HTTP executor.
    """
    config_class = get_config(config_name)
    if base_url:
        config_class = type(config_class.__name__, (config_class,), {"BASE_URL": base_url})

    logger.info("Creating harness with config: %s", config_class.__name__)

    return Harness(config_class)
