"""
Unit test package for the listing load harness.

Tests here never open a socket: HTTP is monkeypatched and workers are
driven by scripted executors from :mod:`tests.doubles`.
"""
