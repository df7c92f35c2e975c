"""deeplx-pool entry point.

Usage::

    deeplx-pool [--hunter_api_key KEY] [--360_api_key KEY] [--provider hunter|quake]
                [--url-file PATH] [--host HOST] [--port PORT] [--log-level LEVEL]

Flags win over environment variables (HUNTER_API_KEY, 360_API_KEY / QUAKE_API_KEY),
which win over .env.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from deeplx_pool.core.config import Settings
from deeplx_pool.core.errors import PoolError
from deeplx_pool.core.logging import configure_logging, structured_log
from deeplx_pool.main import create_app
from deeplx_pool.services.discovery import refresh_pool
from deeplx_pool.services.endpoint_store import EndpointStore
from deeplx_pool.services.lifecycle import LifecycleController, LifecycleState
from deeplx_pool.services.listener import UvicornListener
from deeplx_pool.services.provider_factory import select_scan_provider
from deeplx_pool.services.scheduler import RescanScheduler


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deeplx-pool",
        description="Discover, validate and serve a pool of DeepLX translation endpoints",
    )
    parser.add_argument("--hunter_api_key", metavar="KEY", default=None, help="Hunter API key")
    parser.add_argument("--360_api_key", dest="quake_api_key", metavar="KEY", default=None, help="360 Quake API key")
    parser.add_argument(
        "--provider",
        dest="scan_provider",
        choices=("hunter", "quake"),
        default=None,
        help="Force a scan provider instead of the first configured key",
    )
    parser.add_argument("--url-file", dest="url_file", metavar="PATH", default=None, help="Endpoint list (default: url.txt)")
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument("--log-level", dest="log_level", default=None)
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Only non-empty flags override; empty ones fall through to the environment."""
    overrides: dict[str, Any] = {k: v for k, v in vars(args).items() if v not in (None, "")}
    return Settings(**overrides)


async def serve(settings: Settings) -> LifecycleState:
    """Build the pool, start serving, and block until the lifecycle controller finishes."""
    store = EndpointStore(settings.url_file)
    provider = select_scan_provider(settings)
    try:
        await refresh_pool(store, provider, settings)

        listener = UvicornListener(
            create_app(store, settings),
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level,
        )
        controller = LifecycleController(listener, grace_seconds=settings.shutdown_grace_seconds)
        controller.install_signal_handlers()
        scheduler = RescanScheduler(
            provider,
            store,
            controller.request_restart,
            interval_seconds=settings.rescan_interval_seconds,
        )

        def _on_listener_done(_task: asyncio.Task[None]) -> None:
            # Listener died on its own (e.g. bind failure): wind down instead of hanging
            if controller.requested is None:
                controller.request_shutdown()

        listener.start().add_done_callback(_on_listener_done)
        scheduler.start()
        try:
            return await controller.run()
        finally:
            await scheduler.stop()
            controller.remove_signal_handlers()
    finally:
        if provider is not None:
            await provider.aclose()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = settings_from_args(args)
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        return 2
    configure_logging(settings.log_level)

    try:
        state = asyncio.run(serve(settings))
    except PoolError as e:
        structured_log(
            "CRITICAL",
            e.message,
            operation="startup",
            error={"type": e.error_code, "message": e.message, "details": e.details},
        )
        return 1
    structured_log("INFO", f"Exiting ({state.value})", operation="shutdown")
    return 0


if __name__ == "__main__":
    sys.exit(main())
