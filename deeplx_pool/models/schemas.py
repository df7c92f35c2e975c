"""Pydantic models for the DeepLX wire format and the pool API."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# --- DeepLX wire format ---
class TranslateRequest(BaseModel):
    """POST /translate body understood by DeepLX-compatible servers."""

    model_config = ConfigDict(extra="allow")

    text: str = Field(..., description="Text to translate")
    source_lang: str = Field(default="auto", description="Source language code, e.g. EN")
    target_lang: str = Field(..., description="Target language code, e.g. ZH")


class TranslateResponse(BaseModel):
    """DeepLX /translate response; only `data` matters for liveness."""

    model_config = ConfigDict(extra="ignore")

    code: Optional[int] = None
    id: Optional[int] = None
    data: str = ""
    alternatives: Optional[list[str]] = None
    source_lang: Optional[str] = None
    target_lang: Optional[str] = None
    method: Optional[str] = None


# Probe fixture: an endpoint is live only if it answers this exactly.
PROBE_REQUEST = TranslateRequest(text="I love you", source_lang="EN", target_lang="ZH")
PROBE_EXPECTED = "我爱你"


# --- Pool API ---
class EndpointListResponse(BaseModel):
    """GET /v1/endpoints response."""

    count: int = Field(..., ge=0)
    endpoints: list[str]


class ErrorResponse(BaseModel):
    error: str
    message: str
    details: dict = Field(default_factory=dict)
