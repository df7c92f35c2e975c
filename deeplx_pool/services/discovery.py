"""Startup discovery: file or scan -> canonical candidates -> probe -> live pool."""

from typing import Optional

from deeplx_pool.core.config import Settings
from deeplx_pool.core.errors import NoEndpointSourceError, ScanProviderError
from deeplx_pool.core.logging import structured_log
from deeplx_pool.core.telemetry import record_scan_failure
from deeplx_pool.services.base_provider import BaseScanProvider
from deeplx_pool.services.endpoint_store import EndpointStore
from deeplx_pool.services.prober import validate_endpoints
from deeplx_pool.services.urls import normalize_urls


async def scan_candidates(provider: BaseScanProvider) -> list[str]:
    """Run one scan. A failed call degrades to no candidates (logged, counted)."""
    try:
        return await provider.scan()
    except ScanProviderError as e:
        record_scan_failure()
        structured_log(
            "WARNING",
            e.message,
            operation=f"scan.{provider.name}",
            error={"type": e.error_code, "message": e.message, "details": e.details},
        )
        return []
    except Exception as e:
        # Third-party providers may fail in ways they do not wrap; still only "no candidates"
        record_scan_failure()
        structured_log(
            "WARNING",
            f"{provider.name} scan failed unexpectedly: {e}",
            operation=f"scan.{provider.name}",
            error={"type": type(e).__name__, "message": str(e)},
        )
        return []


async def load_candidates(
    store: EndpointStore,
    provider: Optional[BaseScanProvider],
) -> list[str]:
    """
    Canonical, deduplicated candidates from the endpoint file, falling back to a scan
    when the file is empty. Raises NoEndpointSourceError when neither yields anything.
    """
    raws = store.load()
    if not raws:
        if provider is None:
            raise NoEndpointSourceError(str(store.path))
        structured_log(
            "WARNING",
            f"{store.path} is empty; scanning with {provider.name}",
            operation="discovery.load",
        )
        raws = await scan_candidates(provider)
        if not raws:
            raise NoEndpointSourceError(
                str(store.path),
                message=f"{store.path} is empty and the {provider.name} scan returned nothing",
            )
    candidates = normalize_urls(raws)
    store.save(candidates)
    return candidates


async def refresh_pool(
    store: EndpointStore,
    provider: Optional[BaseScanProvider],
    settings: Settings,
) -> list[str]:
    """Load candidates, probe them all, then swap the live pool in one step."""
    candidates = await load_candidates(store, provider)
    live = await validate_endpoints(candidates, settings)
    store.replace_pool(live)
    structured_log(
        "INFO" if live else "WARNING",
        f"available urls count: {len(live)}",
        operation="discovery.refresh",
        metadata={"candidates": len(candidates), "live": len(live)},
    )
    return live
