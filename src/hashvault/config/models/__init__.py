"""Configuration models for HashVault."""

from __future__ import annotations

from .app_settings import LoggingSettings
from .hash_settings import HashSettings
from .settings import Settings

__all__ = [
    "HashSettings",
    "LoggingSettings",
    "Settings",
]
