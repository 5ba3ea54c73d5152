# tests/conftest.py
from collections.abc import Generator
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

import agentcart.api.dependencies as _deps
from agentcart.core.config import Settings, get_settings
from agentcart.core.security import limiter
from agentcart.main import app


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        api_keys={"test-key-alice": "tenant_alice", "test-key-bob": "tenant_bob"},
        product_search_url="",
    )


@pytest.fixture
def client(test_settings: Settings) -> Generator[TestClient, None, None]:
    # Reset the session-registry singleton and the rate-limit counters so each
    # test starts with empty caches and histories for every tenant.
    _deps._session_registry = None
    limiter.reset()
    app.dependency_overrides[get_settings] = lambda: test_settings
    try:
        with patch("agentcart.core.config.get_settings", return_value=test_settings), TestClient(
            app
        ) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
        _deps._session_registry = None


@pytest.fixture
def alice_headers() -> dict:
    return {"X-API-Key": "test-key-alice"}


@pytest.fixture
def bob_headers() -> dict:
    return {"X-API-Key": "test-key-bob"}
