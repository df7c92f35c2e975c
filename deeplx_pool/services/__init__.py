"""Services: URL canonicalization, scan providers, probing, storage, scheduling, lifecycle."""

from deeplx_pool.services.urls import dedupe_urls, normalize_url, normalize_urls
from deeplx_pool.services.provider_factory import get_provider, select_scan_provider
import deeplx_pool.services.hunter  # noqa: F401  Trigger registration
import deeplx_pool.services.quake  # noqa: F401  Trigger registration

__all__ = [
    "dedupe_urls",
    "normalize_url",
    "normalize_urls",
    "get_provider",
    "select_scan_provider",
]
