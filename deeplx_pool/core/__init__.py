"""Core configuration, logging, errors, and telemetry."""

from deeplx_pool.core.config import Settings, get_settings
from deeplx_pool.core.errors import (
    ConfigurationError,
    EndpointStoreError,
    NoEndpointSourceError,
    NoUpstreamAvailableError,
    PoolError,
    ScanProviderError,
    UpstreamError,
)
from deeplx_pool.core.logging import configure_logging, structured_log
from deeplx_pool.core.telemetry import get_metrics, timed

__all__ = [
    "Settings",
    "get_settings",
    "ConfigurationError",
    "EndpointStoreError",
    "NoEndpointSourceError",
    "NoUpstreamAvailableError",
    "PoolError",
    "ScanProviderError",
    "UpstreamError",
    "configure_logging",
    "structured_log",
    "get_metrics",
    "timed",
]
