"""
Test suite for the listing load harness.

This package contains:
- unit/: in-process tests with scripted executors and patched HTTP
- integration/: the real executor against a live Flask stub server
- performance/: Locust scenarios and the CSV threshold gate
"""
