"""
Live-server fixtures for integration tests.

Starts the Flask stub listing service on a background thread so the real
:class:`~harness.executor.RequestExecutor` can make genuine HTTP requests.
The server binds to an ephemeral port and is shut down at the end of the
session.

Key Concepts Demonstrated:
- Live server fixture on a background thread
- Per-test reset of the stub's failure knobs for isolation
"""

from __future__ import annotations

import threading
from collections.abc import Generator

import pytest
from werkzeug.serving import make_server

from tests.stub_api import create_stub_app


@pytest.fixture(scope="session")
def stub_app():
    """Create the stub listing application for the session."""
    return create_stub_app()


@pytest.fixture(scope="session")
def live_server(stub_app) -> Generator[str, None, None]:
    """
    Serve the stub app on 127.0.0.1 and yield its base URL.

    ``threaded=True`` lets concurrent harness workers be answered in
    parallel, as a real service would.
    """
    server = make_server("127.0.0.1", 0, stub_app, threaded=True)
    server_thread = threading.Thread(target=server.serve_forever, daemon=True)
    server_thread.start()

    yield f"http://127.0.0.1:{server.server_port}"

    server.shutdown()
    server_thread.join(timeout=5)


@pytest.fixture(autouse=True)
def reset_stub(stub_app):
    """Restore a healthy stub before every test."""
    stub_app.config.update(
        STUB_DELAY_SECONDS=0.0,
        STUB_FAIL_PAGES=set(),
        STUB_MALFORMED_PAGES=set(),
    )
    yield
