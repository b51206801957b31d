"""Shared fixtures: settings, credential session, mock backend and transports."""

import httpx
import pytest

from lexitax.auth.session import SessionManager
from lexitax.auth.token_store import MemoryTokenStore
from lexitax.config import LexiTaxSettings, set_settings
from lexitax.server.app import create_app
from lexitax.server.store import BackendStore

TEST_BASE_URL = "http://testserver/api"
STRONG_PASSWORD = "Birr2016Tax"


@pytest.fixture(autouse=True)
def reset_global_settings():
    """Keep the cached global settings from leaking between tests."""
    set_settings(None)
    yield
    set_settings(None)


@pytest.fixture
def settings():
    """Test settings pointing at the mock backend."""
    return LexiTaxSettings(
        base_url=TEST_BASE_URL,
        timeout=5,
        token_store_path=None,
        use_mock_responses=True,
    )


@pytest.fixture
def session():
    """Session manager over an in-memory store."""
    return SessionManager(MemoryTokenStore())


@pytest.fixture
def backend_store():
    """Empty mock backend state."""
    return BackendStore()


@pytest.fixture
def app(backend_store):
    """Mock backend application."""
    return create_app(store=backend_store)


@pytest.fixture
def asgi_transport(app):
    """Transport routing client requests into the mock backend."""
    return httpx.ASGITransport(app=app)


class RecordingHandler:
    """MockTransport handler that records requests and replies with a fixed response."""

    def __init__(self, status_code: int = 200, json=None, content: bytes | None = None, error=None):
        self.status_code = status_code
        self.json = json
        self.content = content
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json)


@pytest.fixture
def recording_handler():
    """Factory for recording handlers and their transports."""

    def _make(**kwargs) -> tuple[RecordingHandler, httpx.MockTransport]:
        handler = RecordingHandler(**kwargs)
        return handler, httpx.MockTransport(handler)

    return _make
