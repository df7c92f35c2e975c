"""uvicorn-backed HTTP listener whose shutdown is driven by the lifecycle controller."""

import asyncio
from contextlib import contextmanager
from typing import Any, Generator, Optional

import uvicorn

from deeplx_pool.core.logging import structured_log


class _ManagedServer(uvicorn.Server):
    """uvicorn server that leaves OS signals to the lifecycle controller."""

    @contextmanager
    def capture_signals(self) -> Generator[None, None, None]:
        yield

    def install_signal_handlers(self) -> None:
        return


class UvicornListener:
    def __init__(self, app: Any, host: str = "0.0.0.0", port: int = 1188, log_level: str = "info") -> None:
        config = uvicorn.Config(app, host=host, port=port, log_level=log_level.lower(), lifespan="on")
        self.server = _ManagedServer(config)
        self._task: Optional[asyncio.Task[None]] = None

    def start(self) -> asyncio.Task[None]:
        if self._task is None:
            self._task = asyncio.create_task(self.server.serve(), name="uvicorn")
            structured_log(
                "INFO",
                "Listener started",
                operation="listener.start",
                metadata={"host": self.server.config.host, "port": self.server.config.port},
            )
        return self._task

    async def shutdown(self) -> None:
        """Stop accepting and wait for in-flight requests."""
        self.server.should_exit = True
        if self._task is not None:
            await asyncio.shield(self._task)

    async def force_close(self) -> None:
        self.server.force_exit = True
        if self._task is None or self._task.done():
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
