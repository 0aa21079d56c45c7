"""Shared test fixtures."""

import httpx
import pytest

from greenprompt.config import Settings

_KEY_VARS = ("GEMINI_API_KEY", "GREENPROMPT_GEMINI_API_KEY")


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for var in _KEY_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def make_settings():
    def factory(**overrides) -> Settings:
        return Settings(_env_file=None, **overrides)

    return factory


@pytest.fixture
def gemini_body():
    def factory(text: str) -> dict:
        return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}

    return factory


@pytest.fixture
def mock_client():
    """Build an httpx client whose requests are answered by ``handler``."""
    clients = []

    def factory(handler) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()
