"""Periodic rescan: scan -> normalize -> merge -> persist -> request restart."""

import asyncio
from typing import Callable, Optional

from deeplx_pool.core.logging import structured_log
from deeplx_pool.core.telemetry import record_restart_requested
from deeplx_pool.services.base_provider import BaseScanProvider
from deeplx_pool.services.discovery import scan_candidates
from deeplx_pool.services.endpoint_store import EndpointStore
from deeplx_pool.services.urls import dedupe_urls, normalize_urls

DEFAULT_INTERVAL_SECONDS = 48 * 3600


class RescanScheduler:
    """Single timer task. A successful cycle ends with a restart request, so cycles never overlap."""

    def __init__(
        self,
        provider: Optional[BaseScanProvider],
        store: EndpointStore,
        request_restart: Callable[[], None],
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    ) -> None:
        self.provider = provider
        self.store = store
        self.request_restart = request_restart
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task[None]] = None

    def start(self) -> Optional[asyncio.Task[None]]:
        """Arm the timer. Without a provider nothing is armed and None is returned."""
        if self.provider is None:
            structured_log("INFO", "Rescan disabled: no scan provider", operation="rescan.start")
            return None
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run(), name="rescan-scheduler")
            structured_log(
                "INFO",
                "Rescan scheduled",
                operation="rescan.start",
                metadata={"interval_seconds": self.interval_seconds, "provider": self.provider.name},
            )
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        if task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                if await self.run_cycle():
                    return
            except Exception as e:
                structured_log(
                    "ERROR",
                    f"Rescan cycle failed: {e}",
                    operation="rescan.cycle",
                    error={"type": type(e).__name__, "message": str(e)},
                )

    async def run_cycle(self) -> bool:
        """One full cycle. Returns True when a restart was requested."""
        if self.provider is None:
            structured_log("WARNING", "Rescan skipped: no scan provider", operation="rescan.cycle")
            return False
        scanned = await scan_candidates(self.provider)
        if not scanned:
            structured_log(
                "WARNING",
                "Rescan found no candidates; keeping current endpoint list",
                operation="rescan.cycle",
            )
            return False
        merged = dedupe_urls([*self.store.snapshot(), *normalize_urls(scanned)])
        if not self.store.save(merged):
            # Keep serving the current pool; try again next period
            return False
        structured_log(
            "INFO",
            "Rescan persisted; requesting restart",
            operation="rescan.cycle",
            metadata={"scanned": len(scanned), "persisted": len(merged)},
        )
        record_restart_requested()
        self.request_restart()
        return True
