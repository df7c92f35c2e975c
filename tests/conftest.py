"""Pytest configuration and shared fixtures."""

import os
from pathlib import Path

import httpx
import pytest

os.environ.setdefault("LOG_FORMAT", "readable")

from deeplx_pool.core.config import Settings
from deeplx_pool.core.telemetry import reset_metrics
from deeplx_pool.services.base_provider import BaseScanProvider
from deeplx_pool.services.endpoint_store import EndpointStore

_SETTINGS_ENV = (
    "HUNTER_API_KEY",
    "QUAKE_API_KEY",
    "360_API_KEY",
    "SCAN_PROVIDER",
    "URL_FILE",
    "LOG_LEVEL",
    "PORT",
)


class FakeScanProvider(BaseScanProvider):
    """Scan provider returning canned results (or raising) without any network."""

    name = "fake"

    def __init__(self, results=None, error: Exception | None = None) -> None:
        self.results = list(results or [])
        self.error = error
        self.calls = 0

    async def scan(self) -> list[str]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.results)

    async def aclose(self) -> None:
        return None


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    reset_metrics()


@pytest.fixture
def url_file(tmp_path: Path) -> Path:
    return tmp_path / "url.txt"


@pytest.fixture
def settings(url_file: Path) -> Settings:
    return Settings(url_file=str(url_file), probe_concurrency=5, _env_file=None)


@pytest.fixture
def store(url_file: Path) -> EndpointStore:
    return EndpointStore(url_file)


@pytest.fixture
def no_network(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    """Fail loudly if anything tries to send an HTTP request."""
    attempted: list[str] = []

    async def _send(self, request: httpx.Request, *args, **kwargs):
        attempted.append(str(request.url))
        raise AssertionError(f"unexpected network call to {request.url}")

    monkeypatch.setattr(httpx.AsyncClient, "send", _send)
    return attempted


def mock_client(handler) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by `handler(request) -> httpx.Response`."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def fake_provider():
    """Factory for FakeScanProvider instances."""
    return FakeScanProvider


@pytest.fixture
def make_client():
    """Factory for MockTransport-backed AsyncClients."""
    return mock_client
