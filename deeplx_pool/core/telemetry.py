"""In-memory counters and timing helpers for operational visibility."""

import time
from contextlib import contextmanager
from typing import Any, Generator, Optional

from deeplx_pool.core.logging import structured_log

_metrics: dict[str, int] = {
    "probes_total": 0,
    "probes_live_total": 0,
    "scan_failures_total": 0,
    "store_write_failures_total": 0,
    "upstream_errors_total": 0,
    "restarts_requested_total": 0,
    "pool_size": 0,
}


def _incr(name: str, by: int = 1) -> None:
    _metrics[name] = _metrics.get(name, 0) + by


def record_probe(live: bool) -> None:
    """Count one finished probe."""
    _incr("probes_total")
    if live:
        _incr("probes_live_total")


def record_scan_failure() -> None:
    _incr("scan_failures_total")


def record_store_write_failure() -> None:
    _incr("store_write_failures_total")


def record_upstream_error() -> None:
    _incr("upstream_errors_total")


def record_restart_requested() -> None:
    _incr("restarts_requested_total")


def set_pool_size(size: int) -> None:
    _metrics["pool_size"] = size


def get_metrics() -> dict[str, Any]:
    """Return current metrics snapshot (for /metrics or tests)."""
    return dict(_metrics)


def reset_metrics() -> None:
    for key in _metrics:
        _metrics[key] = 0


@contextmanager
def timed(operation: str, metadata: Optional[dict[str, Any]] = None) -> Generator[dict[str, Any], None, None]:
    """Log how long the wrapped block took. Callers may add keys to the yielded dict."""
    extra: dict[str, Any] = dict(metadata or {})
    start = time.monotonic()
    try:
        yield extra
    finally:
        structured_log(
            "INFO",
            f"{operation} finished",
            operation=operation,
            duration_ms=(time.monotonic() - start) * 1000,
            metadata=extra,
        )
