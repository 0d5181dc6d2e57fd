"""
Configuration Management for RentLog

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
RentLog talks to no external services, so the only knobs are how
data files are named, written and audited on the local machine.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


HOST_PROFILES = ("auto", "handle", "fallback")


class RentLogSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from RENTLOG_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="RENTLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Data file naming
    default_file_prefix: str = Field(
        default="rentlog-data",
        min_length=1,
        description="Prefix of generated data file names (prefix-YYYY-MM-DD.json)"
    )
    json_indent: int = Field(
        default=2,
        ge=1,
        le=8,
        description="Indentation used when writing the data file"
    )

    # Display
    currency_symbol: str = Field(
        default="₹",
        description="Currency symbol shown next to amounts"
    )

    # Host profile
    host_profile: str = Field(
        default="auto",
        description="Which file capability to use: auto, handle or fallback"
    )
    downloads_dir: str = Field(
        default=".",
        description="Directory that receives downloads in the fallback profile"
    )

    # Logging and audit
    log_level: str = Field(
        default="INFO",
        description="Minimum level for the structured log"
    )
    audit_log_path: Optional[str] = Field(
        default=None,
        description="Optional JSON-lines file that receives audit events"
    )

    # Host I/O
    write_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for a local write interrupted by a transient error"
    )

    @field_validator('host_profile')
    @classmethod
    def validate_host_profile(cls, v: str) -> str:
        """Only allow known profiles."""
        v = v.strip().lower()
        if v not in HOST_PROFILES:
            raise ValueError(f"Unknown host profile: {v}. Allowed: {HOST_PROFILES}")
        return v

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def downloads_path(self) -> Path:
        """Get the downloads directory as a Path."""
        return Path(self.downloads_dir).expanduser()


@lru_cache()
def get_settings() -> RentLogSettings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return RentLogSettings()
