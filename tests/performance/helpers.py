"""
Helper utilities for Locust performance scenarios.

Keeps query building and response checking in one place so every user
class validates listing pages the same way the in-process harness does.

Key Concepts Demonstrated:
- Reusing :func:`harness.executor.inspect_listing` inside Locust's
  ``catch_response`` protocol
- Randomised page selection to spread load across the catalogue
"""

from __future__ import annotations

import random
from typing import Any

from locust.clients import HttpSession

from harness.config import Config
from harness.executor import JSON_HEADERS, inspect_listing


def _safe_json(response: Any) -> Any:
    """
    Return the decoded response body, or ``None`` if it is not JSON.

    Locust responses may contain non-JSON bodies (e.g. on 5xx errors or
    proxy timeouts); returning ``None`` lets the listing inspection
    report the problem instead of aborting the virtual user.
    """
    try:
        return response.json()
    except ValueError:
        return None


def random_page(page_range: tuple[int, int] | None = None) -> int:
    """Pick a page uniformly from *page_range* (inclusive)."""
    low, high = page_range or Config.DEFAULT_PAGE_RANGE
    return random.randint(low, high)


def fetch_listing_page(
    client: HttpSession,
    *,
    page: int,
    size: int,
    endpoint: str = Config.API_ENDPOINT,
    name: str | None = None,
) -> int | None:
    """
    GET one listing page and validate the body.

    A non-2xx status or a malformed ``items`` list marks the Locust
    request as failed.  An empty page is a success: it is a correct
    answer for a page past the end of the catalogue.

    Args:
        client: The Locust HTTP session.
        page: ``page`` query parameter.
        size: ``size`` query parameter.
        endpoint: Path of the listing endpoint.
        name: Statistics bucket; defaults to ``"<endpoint> [GET]"`` so
            all pages aggregate into one row.

    Returns:
        The number of items on the page, or ``None`` if the request
        failed.
    """
    with client.get(
        endpoint,
        params={"page": page, "size": size},
        headers=JSON_HEADERS,
        name=name or f"{endpoint} [GET]",
        catch_response=True,
    ) as response:
        if not 200 <= response.status_code < 300:
            response.failure(f"Expected 2xx, got {response.status_code}")
            return None

        inspection = inspect_listing(_safe_json(response))
        if not inspection.valid:
            response.failure(inspection.problem)
            return None

        if inspection.item_count > size:
            response.failure(f"Page holds {inspection.item_count} items, size was {size}")
            return None

        response.success()
        return inspection.item_count
