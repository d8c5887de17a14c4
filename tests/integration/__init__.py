"""
Integration test package for the listing load harness.

Tests here run the real HTTP executor, load generator and validator
against the stub listing service from :mod:`tests.stub_api`, served on a
background thread.
"""
