"""Liveness probing of candidate endpoints with a fixed translation fixture."""

import asyncio
from typing import Awaitable, Callable, Sequence

import httpx
from pydantic import ValidationError

from deeplx_pool.core.config import Settings
from deeplx_pool.core.logging import structured_log
from deeplx_pool.core.telemetry import record_probe, timed
from deeplx_pool.models.schemas import PROBE_EXPECTED, PROBE_REQUEST, TranslateResponse

DEFAULT_CONCURRENCY = 30
DEFAULT_TIMEOUT_SECONDS = 2.0

CheckFn = Callable[[str], Awaitable[bool]]


async def check_endpoint(client: httpx.AsyncClient, url: str) -> bool:
    """
    POST the probe fixture to `url`.
    Live only when the reply parses and its `data` is exactly the expected translation.
    """
    try:
        resp = await client.post(url, json=PROBE_REQUEST.model_dump())
        resp.raise_for_status()
        result = TranslateResponse.model_validate(resp.json())
    except (httpx.HTTPError, ValueError, ValidationError) as e:
        structured_log(
            "DEBUG",
            "Probe failed",
            operation="probe.check",
            endpoint=url,
            error={"type": type(e).__name__, "message": str(e)},
        )
        return False
    live = result.data == PROBE_EXPECTED
    if not live:
        structured_log(
            "DEBUG",
            "Probe returned unexpected translation",
            operation="probe.check",
            endpoint=url,
            metadata={"status_code": resp.status_code, "data": result.data[:100]},
        )
    return live


async def probe_endpoints(
    urls: Sequence[str],
    check: CheckFn,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> list[str]:
    """
    Run `check` over every URL with at most `concurrency` probes in flight.
    Returns the live URLs in input order, only after every probe has finished.
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def probe_single(url: str) -> bool:
        async with semaphore:
            try:
                live = await check(url)
            except Exception as e:
                structured_log(
                    "DEBUG",
                    "Probe raised",
                    operation="probe.check",
                    endpoint=url,
                    error={"type": type(e).__name__, "message": str(e)},
                )
                live = False
        record_probe(live)
        return live

    results = await asyncio.gather(*(probe_single(u) for u in urls))
    return [url for url, live in zip(urls, results) if live]


async def validate_endpoints(urls: Sequence[str], settings: Settings) -> list[str]:
    """Probe `urls` with a shared client built from settings."""
    limits = httpx.Limits(max_connections=settings.probe_concurrency)
    with timed("probe.validate", {"candidates": len(urls)}) as meta:
        async with httpx.AsyncClient(timeout=settings.probe_timeout_seconds, limits=limits) as client:

            async def check(url: str) -> bool:
                return await check_endpoint(client, url)

            live = await probe_endpoints(urls, check, concurrency=settings.probe_concurrency)
        meta["live"] = len(live)
    return live
