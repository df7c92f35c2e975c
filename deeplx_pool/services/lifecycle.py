"""Signal-driven lifecycle: Running -> Draining -> Exited | Restarting."""

import asyncio
import os
import signal
import sys
from enum import Enum
from typing import Callable, Optional, Protocol

from deeplx_pool.core.logging import structured_log

DEFAULT_GRACE_SECONDS = 5.0


class LifecycleSignal(str, Enum):
    TERMINATE = "terminate"
    RELOAD = "reload"


class LifecycleState(str, Enum):
    RUNNING = "running"
    DRAINING = "draining"
    RESTARTING = "restarting"
    EXITED = "exited"


class Listener(Protocol):
    """What the controller needs from the network listener."""

    async def shutdown(self) -> None: ...

    async def force_close(self) -> None: ...


def signal_actions() -> dict[int, LifecycleSignal]:
    """OS signals handled on this platform. SIGHUP reloads; the rest terminate."""
    actions: dict[int, LifecycleSignal] = {}
    for name, action in (
        ("SIGHUP", LifecycleSignal.RELOAD),
        ("SIGINT", LifecycleSignal.TERMINATE),
        ("SIGTERM", LifecycleSignal.TERMINATE),
        ("SIGQUIT", LifecycleSignal.TERMINATE),
    ):
        signum = getattr(signal, name, None)
        if signum is not None:
            actions[signum] = action
    return actions


def reexec() -> None:
    """Replace this process image with a fresh interpreter running the same command line."""
    sys.stdout.flush()
    sys.stderr.flush()
    os.execv(sys.executable, [sys.executable, *sys.orig_argv[1:]])


class LifecycleController:
    def __init__(
        self,
        listener: Listener,
        grace_seconds: float = DEFAULT_GRACE_SECONDS,
        restart: Callable[[], None] = reexec,
    ) -> None:
        self.listener = listener
        self.grace_seconds = grace_seconds
        self.restart = restart
        self.state = LifecycleState.RUNNING
        self._requested: Optional[LifecycleSignal] = None
        self._event = asyncio.Event()
        self._installed: list[int] = []

    @property
    def requested(self) -> Optional[LifecycleSignal]:
        return self._requested

    def notify(self, action: LifecycleSignal) -> None:
        """Record a lifecycle request. Only the first one counts."""
        if self._requested is not None:
            structured_log(
                "INFO",
                f"Ignoring {action.value}: {self._requested.value} already in progress",
                operation="lifecycle.notify",
            )
            return
        self._requested = action
        self._event.set()

    def request_restart(self) -> None:
        self.notify(LifecycleSignal.RELOAD)

    def request_shutdown(self) -> None:
        self.notify(LifecycleSignal.TERMINATE)

    def install_signal_handlers(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        loop = loop or asyncio.get_running_loop()
        for signum, action in signal_actions().items():
            loop.add_signal_handler(signum, self._on_signal, signum, action)
            self._installed.append(signum)

    def remove_signal_handlers(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        loop = loop or asyncio.get_running_loop()
        for signum in self._installed:
            loop.remove_signal_handler(signum)
        self._installed.clear()

    def _on_signal(self, signum: int, action: LifecycleSignal) -> None:
        structured_log(
            "WARNING",
            f"Received signal {signal.Signals(signum).name}",
            operation="lifecycle.signal",
            metadata={"action": action.value},
        )
        self.notify(action)

    async def drain(self) -> None:
        """Give the listener `grace_seconds` to finish; force-close it otherwise."""
        self.state = LifecycleState.DRAINING
        try:
            await asyncio.wait_for(self.listener.shutdown(), timeout=self.grace_seconds)
            return
        except asyncio.TimeoutError:
            structured_log(
                "WARNING",
                f"Listener did not drain within {self.grace_seconds}s; forcing close",
                operation="lifecycle.drain",
            )
        except Exception as e:
            structured_log(
                "WARNING",
                f"Listener shutdown failed: {e}",
                operation="lifecycle.drain",
                error={"type": type(e).__name__, "message": str(e)},
            )
        await self.listener.force_close()

    async def run(self) -> LifecycleState:
        """Block until a lifecycle request arrives, drain, then exit or restart."""
        await self._event.wait()
        action = self._requested
        await self.drain()
        structured_log(
            "INFO",
            "Service stopped",
            operation="lifecycle.run",
            metadata={"pid": os.getpid(), "action": action.value if action else None},
        )
        if action is LifecycleSignal.RELOAD:
            self.state = LifecycleState.RESTARTING
            self.restart()
        else:
            self.state = LifecycleState.EXITED
        return self.state
