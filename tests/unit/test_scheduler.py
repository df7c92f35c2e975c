"""Unit tests for the periodic rescan scheduler."""

import asyncio
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from deeplx_pool.core.errors import ScanProviderError
from deeplx_pool.core.telemetry import get_metrics
from deeplx_pool.services.endpoint_store import EndpointStore
from deeplx_pool.services.scheduler import RescanScheduler


@pytest.mark.asyncio
async def test_no_provider_arms_no_timer(store: EndpointStore) -> None:
    restart = MagicMock()
    scheduler = RescanScheduler(None, store, restart, interval_seconds=0.01)
    assert scheduler.start() is None
    await asyncio.sleep(0.03)
    restart.assert_not_called()


@pytest.mark.asyncio
async def test_cycle_merges_persists_then_restarts(store: EndpointStore, fake_provider) -> None:
    store.replace_pool(["http://live:1/translate"])
    provider = fake_provider(["new:2", "live:1", " new:2 "])
    order: list[str] = []
    restart = MagicMock(side_effect=lambda: order.append(f"restart:{store.load()}"))
    scheduler = RescanScheduler(provider, store, restart)

    assert await scheduler.run_cycle() is True
    assert store.load() == ["http://live:1/translate", "http://new:2/translate"]
    assert order == ["restart:['http://live:1/translate', 'http://new:2/translate']"]
    assert get_metrics()["restarts_requested_total"] == 1


@pytest.mark.asyncio
async def test_empty_scan_keeps_state_and_does_not_restart(
    store: EndpointStore,
    url_file: Path,
    fake_provider,
) -> None:
    url_file.write_text("http://old/translate")
    restart = MagicMock()
    scheduler = RescanScheduler(fake_provider([]), store, restart)
    assert await scheduler.run_cycle() is False
    assert url_file.read_text() == "http://old/translate"
    restart.assert_not_called()


@pytest.mark.asyncio
async def test_failed_scan_is_contained(store: EndpointStore, fake_provider) -> None:
    restart = MagicMock()
    provider = fake_provider(error=ScanProviderError("fake", "timeout"))
    scheduler = RescanScheduler(provider, store, restart)
    assert await scheduler.run_cycle() is False
    restart.assert_not_called()
    assert get_metrics()["scan_failures_total"] == 1


@pytest.mark.asyncio
async def test_persist_failure_does_not_restart(tmp_path: Path, fake_provider) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("")
    store = EndpointStore(blocker / "url.txt")
    restart = MagicMock()
    scheduler = RescanScheduler(fake_provider(["a:1"]), store, restart)
    assert await scheduler.run_cycle() is False
    restart.assert_not_called()


@pytest.mark.asyncio
async def test_timer_fires_once_and_stops_after_restart(store: EndpointStore, fake_provider) -> None:
    provider = fake_provider(["a:1"])
    restart = MagicMock()
    scheduler = RescanScheduler(provider, store, restart, interval_seconds=0.01)
    task = scheduler.start()
    assert task is not None
    await asyncio.wait_for(task, timeout=1)
    restart.assert_called_once()
    assert provider.calls == 1


@pytest.mark.asyncio
async def test_stop_cancels_pending_timer(store: EndpointStore, fake_provider) -> None:
    provider = fake_provider(["a:1"])
    scheduler = RescanScheduler(provider, store, MagicMock(), interval_seconds=3600)
    task = scheduler.start()
    await scheduler.stop()
    assert task.cancelled()
    assert provider.calls == 0


@pytest.mark.asyncio
async def test_unexpected_scan_crash_is_contained(store: EndpointStore, fake_provider) -> None:
    restart = MagicMock()
    scheduler = RescanScheduler(fake_provider(error=KeyError("total")), store, restart)
    assert await scheduler.run_cycle() is False
    restart.assert_not_called()
    assert get_metrics()["scan_failures_total"] == 1


@pytest.mark.asyncio
async def test_failing_cycle_keeps_timer_armed(
    store: EndpointStore,
    fake_provider,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    restart = MagicMock()
    scheduler = RescanScheduler(fake_provider(["a:1"]), store, restart, interval_seconds=0.01)
    real_cycle = scheduler.run_cycle
    attempts: list[int] = []

    async def flaky_cycle() -> bool:
        attempts.append(1)
        if len(attempts) == 1:
            raise RuntimeError("boom")
        return await real_cycle()

    monkeypatch.setattr(scheduler, "run_cycle", flaky_cycle)
    task = scheduler.start()
    await asyncio.wait_for(task, timeout=1)
    assert len(attempts) == 2
    restart.assert_called_once()


@pytest.mark.asyncio
async def test_stop_after_task_failed_does_not_raise(store: EndpointStore, fake_provider) -> None:
    scheduler = RescanScheduler(fake_provider(["a:1"]), store, MagicMock())

    async def crash() -> None:
        raise RuntimeError("boom")

    scheduler._task = asyncio.create_task(crash())
    with pytest.raises(RuntimeError):
        await scheduler._task
    await scheduler.stop()
    assert scheduler._task is None


@pytest.mark.asyncio
async def test_run_cycle_without_provider_is_a_noop(store: EndpointStore) -> None:
    restart = MagicMock()
    scheduler = RescanScheduler(None, store, restart)
    assert await scheduler.run_cycle() is False
    restart.assert_not_called()
