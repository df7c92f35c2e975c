from typing import Optional

import httpx

from deeplx_pool.core.config import Settings
from deeplx_pool.core.errors import ConfigurationError
from deeplx_pool.core.logging import structured_log
from deeplx_pool.services.base_provider import BaseScanProvider

_providers: dict[str, type[BaseScanProvider]] = {}

# Used when no provider is forced: first one with a key wins
PROVIDER_PRIORITY = ("hunter", "quake")


def register_provider(name: str, provider_cls: type[BaseScanProvider]) -> None:
    _providers[name.lower()] = provider_cls


def get_provider(name: str) -> type[BaseScanProvider]:
    provider_cls = _providers.get(name.lower())
    if not provider_cls:
        raise ValueError(f"Provider {name} not found. Available: {list(_providers.keys())}")
    return provider_cls


def _api_key_for(settings: Settings, name: str) -> str:
    return {"hunter": settings.hunter_api_key, "quake": settings.quake_api_key}.get(name, "")


def _query_for(settings: Settings, name: str) -> str:
    return {"hunter": settings.hunter_query, "quake": settings.quake_query}.get(name, "")


def select_scan_provider(
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[BaseScanProvider]:
    """
    Build the single active scan provider, or None when no key is configured.
    An explicit `scan_provider` setting wins over key-based priority.
    """
    if settings.scan_provider:
        name = settings.scan_provider
        if not _api_key_for(settings, name):
            raise ConfigurationError(
                f"scan_provider={name} but no API key is configured for it",
                details={"scan_provider": name},
            )
    else:
        name = next((n for n in PROVIDER_PRIORITY if _api_key_for(settings, n)), "")
    if not name:
        structured_log("INFO", "No scan provider API key configured; discovery disabled", operation="scan.select")
        return None

    try:
        provider_cls = get_provider(name)
    except ValueError as e:
        raise ConfigurationError(str(e), details={"scan_provider": name}) from e
    provider = provider_cls(
        client or httpx.AsyncClient(timeout=settings.scan_timeout_seconds),
        _api_key_for(settings, name),
        query=_query_for(settings, name),
        page_size=settings.scan_page_size,
        max_pages=settings.scan_max_pages,
    )
    structured_log("INFO", f"Using {name} scan provider", operation="scan.select")
    return provider
