"""Structured JSON logging with API-key redaction."""

import json
import logging
import os
import re
import sys
from datetime import UTC, datetime
from typing import Any, Optional

# Patterns to redact from log output
SECRET_PATTERNS = (
    re.compile(r"(api[_-]key|token|secret|password)\s*[:=]\s*['\"]?[\w-]{16,}['\"]?", re.I),
    re.compile(r"(X-QuakeToken)\s*[:=]\s*['\"]?[\w-]+['\"]?", re.I),
)

_SECRET_KEYS = ("api_key", "api-key", "token", "secret", "password", "authorization")


def _redact(message: str) -> str:
    def repl(m: re.Match[str]) -> str:
        if m.lastindex and m.lastindex >= 1:
            return f"{m.group(1)}=***REDACTED***"
        return "***REDACTED***"

    for pat in SECRET_PATTERNS:
        message = pat.sub(repl, message)
    return message


def _redact_dict(obj: Any) -> Any:
    if isinstance(obj, dict):
        redacted = {}
        for k, v in obj.items():
            key_lower = str(k).lower()
            if any(s in key_lower for s in _SECRET_KEYS):
                redacted[k] = "***REDACTED***"
            else:
                redacted[k] = _redact_dict(v)
        return redacted
    if isinstance(obj, list):
        return [_redact_dict(i) for i in obj]
    if isinstance(obj, str):
        return _redact(obj)
    return obj


def structured_log(
    level: str,
    message: str,
    *,
    operation: Optional[str] = None,
    endpoint: Optional[str] = None,
    duration_ms: Optional[int | float] = None,
    metadata: Optional[dict[str, Any]] = None,
    error: Optional[dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Emit a structured log entry."""
    log = logging.getLogger(logger.name if logger else "deeplx_pool")
    payload: dict[str, Any] = {
        "severity": level.upper(),
        "message": _redact(message),
        "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
    }
    if operation:
        payload["operation"] = operation
    if endpoint:
        payload["endpoint"] = endpoint
    if duration_ms is not None:
        payload["duration_ms"] = round(duration_ms, 2)
    if metadata:
        payload["metadata"] = _redact_dict(metadata)
    if error:
        payload["error"] = _redact_dict(error)

    msg = json.dumps(payload, ensure_ascii=False) if _use_json() else _format_readable(payload)
    getattr(log, level.lower(), log.info)(msg)


def _use_json() -> bool:
    """JSON unless LOG_FORMAT=readable (local terminals)."""
    return os.getenv("LOG_FORMAT", "json").lower() == "json"


def _format_readable(payload: dict[str, Any]) -> str:
    parts = [f"[{payload.get('severity', 'INFO')}]", payload.get("message", "")]
    if payload.get("operation"):
        parts.append(f"operation={payload['operation']}")
    if payload.get("endpoint"):
        parts.append(f"endpoint={payload['endpoint']}")
    if payload.get("duration_ms") is not None:
        parts.append(f"duration_ms={payload['duration_ms']}")
    if payload.get("metadata"):
        parts.append(" ".join(f"{k}={v}" for k, v in payload["metadata"].items()))
    if payload.get("error"):
        parts.append(f"error={payload['error'].get('message', '')}")
    return " ".join(parts)


def configure_logging(log_level: str = "INFO") -> None:
    """Configure root logger with JSON or readable format."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        if _use_json():
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    # Per-request access lines from httpx are noise next to thousands of probes
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if message.startswith("{"):
            # Already rendered by structured_log
            return message
        payload: dict[str, Any] = {
            "severity": record.levelname,
            "message": _redact(message),
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat().replace("+00:00", "Z"),
            "logger": record.name,
        }
        if getattr(record, "operation", None):
            payload["operation"] = record.operation
        if getattr(record, "metadata", None):
            payload["metadata"] = _redact_dict(record.metadata)
        if record.exc_info:
            payload["error"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else "",
                "message": str(record.exc_info[1]) if record.exc_info[1] else "",
                "stack_trace": self.formatException(record.exc_info) if record.exc_info[2] else "",
            }
        return json.dumps(payload, ensure_ascii=False)
