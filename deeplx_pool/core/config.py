"""Application settings loaded from CLI overrides, environment and .env with validation."""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
ScanProviderName = Literal["", "hunter", "quake"]


class Settings(BaseSettings):
    """Endpoint pool settings. Init kwargs (CLI flags) win over environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Scan providers
    hunter_api_key: str = Field(default="", description="Qianxin Hunter API key")
    quake_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("quake_api_key", "360_api_key"),
        description="360 Quake API key (env QUAKE_API_KEY or 360_API_KEY)",
    )
    scan_provider: ScanProviderName = Field(
        default="",
        description="Force a scan provider; empty = first configured key (hunter, then quake)",
    )
    hunter_query: str = Field(
        default='web.body="DeepL Free API"',
        description="Hunter search syntax used to find candidate servers",
    )
    quake_query: str = Field(
        default='response:"DeepL Free API"',
        description="Quake search syntax used to find candidate servers",
    )
    scan_page_size: int = Field(default=100, ge=1, le=500)
    scan_max_pages: int = Field(default=1, ge=1, le=50)
    scan_timeout_seconds: float = Field(
        default=15.0,
        ge=15.0,
        le=300.0,
        description="HTTP timeout for scan provider calls",
    )

    # Endpoint store
    url_file: str = Field(
        default="url.txt",
        min_length=1,
        description="Plain-text endpoint list, one URL per line",
    )

    # Probing
    probe_timeout_seconds: float = Field(default=2.0, gt=0, le=30.0)
    probe_concurrency: int = Field(
        default=30,
        ge=1,
        le=500,
        description="Maximum number of probes in flight at once",
    )

    # Lifecycle
    rescan_interval_seconds: float = Field(
        default=48 * 3600,
        gt=0,
        description="Period of the scan -> persist -> restart cycle",
    )
    shutdown_grace_seconds: float = Field(
        default=5.0,
        gt=0,
        le=120.0,
        description="How long the listener may drain before it is force-closed",
    )

    # Serving
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=1188, ge=1, le=65535)
    upstream_timeout_seconds: float = Field(default=10.0, gt=0, le=120.0)

    # Logging
    log_level: LogLevel = Field(default="INFO")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        u = (v or "INFO").upper()
        if u not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return u

    @field_validator("scan_provider", mode="before")
    @classmethod
    def validate_scan_provider(cls, v: str) -> str:
        return (v or "").strip().lower()

    @field_validator("hunter_api_key", "quake_api_key", mode="before")
    @classmethod
    def strip_key(cls, v: str) -> str:
        return (v or "").strip()


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
