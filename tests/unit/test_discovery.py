"""Unit tests for the startup discovery path."""

from pathlib import Path

import pytest

from deeplx_pool.core.config import Settings
from deeplx_pool.core.errors import NoEndpointSourceError, ScanProviderError
from deeplx_pool.core.telemetry import get_metrics
from deeplx_pool.services import discovery
from deeplx_pool.services.discovery import load_candidates, refresh_pool
from deeplx_pool.services.endpoint_store import EndpointStore


@pytest.mark.asyncio
async def test_empty_store_without_provider_is_fatal_and_offline(
    store: EndpointStore,
    settings: Settings,
    no_network: list[str],
) -> None:
    with pytest.raises(NoEndpointSourceError) as exc_info:
        await refresh_pool(store, None, settings)
    assert "url.txt" in exc_info.value.message
    assert no_network == []


@pytest.mark.asyncio
async def test_empty_store_and_empty_scan_is_fatal(store: EndpointStore, fake_provider) -> None:
    provider = fake_provider([])
    with pytest.raises(NoEndpointSourceError):
        await load_candidates(store, provider)
    assert provider.calls == 1


@pytest.mark.asyncio
async def test_empty_store_and_failed_scan_is_fatal(store: EndpointStore, fake_provider) -> None:
    provider = fake_provider(error=ScanProviderError("fake", "quota exceeded"))
    with pytest.raises(NoEndpointSourceError):
        await load_candidates(store, provider)
    assert get_metrics()["scan_failures_total"] == 1


@pytest.mark.asyncio
async def test_empty_store_falls_back_to_scan(store: EndpointStore, url_file: Path, fake_provider) -> None:
    provider = fake_provider(["1.1.1.1:1188", "1.1.1.1:1188", "http://2.2.2.2/translate"])
    candidates = await load_candidates(store, provider)
    assert candidates == ["http://1.1.1.1:1188/translate", "http://2.2.2.2/translate"]
    assert store.load() == candidates


@pytest.mark.asyncio
async def test_file_candidates_skip_scan_and_are_rewritten(
    store: EndpointStore,
    url_file: Path,
    fake_provider,
) -> None:
    url_file.write_text("example.com\nhttp://example.com/translate\n example.com \n")
    provider = fake_provider(["should-not-be-used"])
    candidates = await load_candidates(store, provider)
    assert candidates == ["http://example.com/translate"]
    assert provider.calls == 0
    assert url_file.read_text() == "http://example.com/translate"


@pytest.mark.asyncio
async def test_refresh_pool_keeps_only_live(
    store: EndpointStore,
    url_file: Path,
    settings: Settings,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    url_file.write_text("a:1\nb:2\nc:3\n")

    async def fake_validate(urls, _settings):
        return [u for u in urls if not u.startswith("http://b")]

    monkeypatch.setattr(discovery, "validate_endpoints", fake_validate)
    live = await refresh_pool(store, None, settings)
    assert live == ["http://a:1/translate", "http://c:3/translate"]
    assert store.snapshot() == live
    # The file keeps every canonical candidate, not just the live ones
    assert store.load() == ["http://a:1/translate", "http://b:2/translate", "http://c:3/translate"]


@pytest.mark.asyncio
async def test_unwrapped_provider_error_degrades_to_no_candidates(fake_provider) -> None:
    provider = fake_provider(error=AttributeError("'str' object has no attribute 'get'"))
    assert await discovery.scan_candidates(provider) == []
    assert get_metrics()["scan_failures_total"] == 1


@pytest.mark.asyncio
async def test_empty_store_and_crashing_scan_is_fatal(store: EndpointStore, fake_provider) -> None:
    provider = fake_provider(error=ValueError("invalid literal for int()"))
    with pytest.raises(NoEndpointSourceError):
        await load_candidates(store, provider)


@pytest.mark.asyncio
async def test_undecodable_line_is_kept_as_garbage(store: EndpointStore, url_file: Path) -> None:
    url_file.write_bytes(b"1.2.3.4:1188\n\xff\xfehost:1\n")
    candidates = await load_candidates(store, None)
    assert candidates[0] == "http://1.2.3.4:1188/translate"
    assert len(candidates) == 2
    assert "\ufffd" in candidates[1]
