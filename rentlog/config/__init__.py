"""Configuration package."""

from rentlog.config.settings import (
    HOST_PROFILES,
    RentLogSettings,
    get_settings,
)

__all__ = [
    "HOST_PROFILES",
    "RentLogSettings",
    "get_settings",
]
