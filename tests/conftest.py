"""Shared pytest fixtures for affinity-suggestions tests."""

import importlib.util
import json
import logging
import threading
from http.server import HTTPServer
from pathlib import Path

import httpx
import pytest

from affinity_suggestions.client import SuggestionClient

BASE_URL = "http://affinity.test/api/"
SCRIPTS_DIR = Path(__file__).resolve().parent.parent / "scripts"


@pytest.fixture
def sent_requests():
    """Requests captured by the stub transport, in order."""
    return []


@pytest.fixture
def make_client(sent_requests):
    """Build a SuggestionClient whose transport answers with `handler`.

    `handler` receives the httpx.Request and returns an httpx.Response (or
    raises, to simulate a transport failure). Every request is recorded in
    `sent_requests` with its decoded JSON body.
    """
    clients = []

    def _make(handler):
        def _record(request: httpx.Request) -> httpx.Response:
            sent_requests.append(
                {
                    "method": request.method,
                    "path": request.url.path,
                    "headers": request.headers,
                    "json": json.loads(request.content) if request.content else None,
                }
            )
            return handler(request)

        http_client = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(_record))
        clients.append(http_client)
        return SuggestionClient(
            http_client=http_client,
            logger=logging.getLogger("tests.affinity"),
        )

    yield _make

    for http_client in clients:
        http_client.close()


@pytest.fixture(scope="session")
def fake_affinity_module():
    """Import scripts/fake_affinity.py as a module."""
    spec = importlib.util.spec_from_file_location(
        "fake_affinity", SCRIPTS_DIR / "fake_affinity.py"
    )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def fake_affinity_server(fake_affinity_module):
    """Run the fake affinity API on a free port; yields its base URL."""
    handler = fake_affinity_module.FakeAffinityHandler
    handler.api_key = "test-key"
    handler.quiet = True
    fake_affinity_module.RECORDED_DECISIONS.clear()

    server = HTTPServer(("127.0.0.1", 0), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    host, port = server.server_address
    yield f"http://{host}:{port}"

    server.shutdown()
    server.server_close()
    thread.join(timeout=5)
