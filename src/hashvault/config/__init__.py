"""HashVault Configuration Module

This module provides unified access to configuration models and settings
loading for the HashVault application.
"""

from __future__ import annotations

from .loader import default_config_paths, load_settings
from .models import HashSettings, LoggingSettings, Settings

__all__ = [
    "HashSettings",
    "LoggingSettings",
    "Settings",
    "default_config_paths",
    "load_settings",
]
