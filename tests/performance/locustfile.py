# ruff: noqa: E402
"""
Locust entrypoint for performance tests.

This is the file that the ``locust`` CLI discovers and loads.  It
imports every concrete user class and wires up a custom ``init`` event
listener that maps ``--tags`` values to user classes, so Locust only
spawns the classes the operator actually requested.

Usage examples::

    # Run both scenarios together:
    locust -f tests/performance/locustfile.py --host http://localhost:5000

    # Reproduce the harness high_load shape with 20 users, headless,
    # and gate the CSV output:
    locust -f tests/performance/locustfile.py --tags burst --headless \
        -u 20 -r 20 -t 30s --csv perf --host http://localhost:5000
    python tests/performance/check_thresholds.py --stats perf_stats.csv

Key Concepts Demonstrated:
- Locust ``events.init`` hook for dynamic user-class filtering
- Clean separation between the entrypoint (this file) and scenario
  definitions (the ``scenarios`` sub-package)
- ``sys.path`` manipulation so imports resolve regardless of the
  working directory Locust is launched from
"""

from __future__ import annotations

import sys
from pathlib import Path

from locust import events

# Locust may be invoked from any directory; the project root must be on
# ``sys.path`` for ``tests.performance`` imports to resolve.
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tests.performance.scenarios.browse import BrowseUser
from tests.performance.scenarios.burst import BurstUser

__all__ = ["BrowseUser", "BurstUser"]

# Maps CLI ``--tags`` values to concrete user classes.
TAG_TO_USER_CLASS = {
    "browse": BrowseUser,
    "burst": BurstUser,
}


@events.init.add_listener
def _filter_user_classes_by_tag(environment, **_kwargs):
    """
    Select user classes explicitly so ``--tags`` does not spawn empty classes.

    Locust's built-in tag filtering hides individual ``@task`` methods
    but still instantiates every user class.  This listener replaces
    ``environment.user_classes`` so only the requested profiles spawn.
    """
    parsed_options = environment.parsed_options
    selected_tags = set(getattr(parsed_options, "tags", None) or [])
    if not selected_tags:
        return

    selected_classes = [
        user_class
        for tag, user_class in TAG_TO_USER_CLASS.items()
        if tag in selected_tags
    ]
    if selected_classes:
        environment.user_classes = selected_classes
