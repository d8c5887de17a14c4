"""
Locust scenario user classes.

Each module in this package defines one Locust ``HttpUser`` subclass
that models a specific traffic pattern against the listing endpoint:

- :mod:`.browse`: shoppers paging through the catalogue with think time
- :mod:`.burst`: tight-loop clients pinned to one page each, mirroring
  the harness's ``high_load`` scenario

Both inherit from :class:`~tests.performance.scenarios.base.ListingUser`.
"""
