"""Pydantic models for the DeepLX wire format and pool API."""

from deeplx_pool.models.schemas import (
    PROBE_EXPECTED,
    PROBE_REQUEST,
    EndpointListResponse,
    ErrorResponse,
    TranslateRequest,
    TranslateResponse,
)

__all__ = [
    "PROBE_EXPECTED",
    "PROBE_REQUEST",
    "EndpointListResponse",
    "ErrorResponse",
    "TranslateRequest",
    "TranslateResponse",
]
