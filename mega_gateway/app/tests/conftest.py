"""
Shared fixtures for gateway tests.

Every test runs against a fresh Settings built from environment variables
set here, so get_settings() never reads a developer's .env file values.
"""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient
from httpx import Response

from mega_gateway.app.auth.session import create_session_jwt
from mega_gateway.app.config import get_settings
from mega_gateway.app.main import create_app

TEST_INTERNAL_HOST = "http://mega-internal:8000"
TEST_JWT_SECRET = "test-session-secret-1234567890123456"


@pytest.fixture(autouse=True)
def gateway_env(monkeypatch):
    """Configure the gateway through the environment and reset the cache"""
    monkeypatch.setenv("MEGA_INTERNAL_HOST", TEST_INTERNAL_HOST)
    monkeypatch.setenv("SESSION_JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    for name in (
        "MEGA_INTERNAL_TIMEOUT_SECONDS",
        "SESSION_JWT_ALGORITHM",
        "SESSION_JWT_ISSUER",
        "SESSION_COOKIE_NAME",
        "ALLOWED_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(gateway_env):
    return get_settings()


@pytest.fixture
def mock_backend_client():
    """Mock internal API client; tests configure .post per case"""
    return AsyncMock()


@pytest.fixture
def app(gateway_env, mock_backend_client):
    """Gateway app with the mock client installed in app state"""
    app = create_app()
    app.state.app_state.backend_client = mock_backend_client
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def session_token(settings):
    return create_session_jwt(
        {"sub": "user-123", "email": "dev@example.com", "name": "Test User"},
        settings=settings,
    )


@pytest.fixture
def auth_headers(session_token):
    """Session cookie as the browser sends it"""
    return {"Cookie": f"session={session_token}"}


@pytest.fixture
def backend_response():
    """Factory for Mocks shaped like an httpx.Response"""
    def make(json_body=None, status_code=200, text=""):
        response = Mock(spec=Response)
        response.status_code = status_code
        response.is_success = 200 <= status_code < 300
        response.text = text
        if json_body is None:
            response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
        else:
            response.json.return_value = json_body
        return response

    return make
