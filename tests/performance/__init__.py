"""
Performance testing package (Locust-based).

Contains Locust user classes, helper utilities, and a CI threshold
checker for the paginated listing endpoint.  The in-process harness
(``python -m harness``) covers fixed-size runs with exact per-request
classification; these Locust scenarios cover open-ended, ramped load
from many processes, and feed their CSV output back through the same
threshold validator.

Key Concepts Demonstrated:
- Weighted task distribution between data pages and past-the-end pages
- Response-body validation inside ``catch_response`` using the
  harness's own listing inspection
- Tagged scenarios so CI can run subsets via ``--tags``
- CSV-based threshold gates for automated pass/fail decisions
"""
