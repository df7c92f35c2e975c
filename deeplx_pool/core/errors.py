"""Custom exceptions for the endpoint pool service."""

from typing import Any, Optional


class PoolError(Exception):
    """Base exception for endpoint pool errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class ConfigurationError(PoolError):
    """Raised when settings are inconsistent (e.g. forced provider without a key)."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, status_code=500, details=details)


class NoEndpointSourceError(PoolError):
    """Raised at startup when the endpoint file is empty and scanning cannot fill it."""

    def __init__(self, url_file: str, message: Optional[str] = None) -> None:
        super().__init__(
            message or f"{url_file} is empty and no scan provider is configured",
            status_code=503,
            details={"url_file": url_file},
        )


class ScanProviderError(PoolError):
    """Raised when a scan provider call fails (transport, auth, quota, bad payload)."""

    def __init__(
        self,
        provider: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=f"{provider} scan failed: {message}",
            status_code=502,
            details={"provider": provider, **(details or {})},
        )
        self.provider = provider


class NoUpstreamAvailableError(PoolError):
    """Raised when a translate request arrives while the pool is empty."""

    def __init__(self) -> None:
        super().__init__("No live translation endpoint available", status_code=503)


class UpstreamError(PoolError):
    """Raised when forwarding to a pool endpoint fails."""

    def __init__(self, endpoint: str, message: str) -> None:
        super().__init__(
            f"Upstream request failed: {message}",
            status_code=502,
            details={"endpoint": endpoint},
        )


class EndpointStoreError(PoolError):
    """Raised when the endpoint file exists but cannot be read."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(
            f"Cannot read endpoint file {path}: {message}",
            status_code=500,
            details={"url_file": path},
        )
