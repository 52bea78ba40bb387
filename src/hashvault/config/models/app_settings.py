"""Logging configuration model."""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field, field_validator


class LoggingSettings(BaseModel):
    """Logging configuration.

    This class manages the log level, the optional JSON log file and
    whether console output goes through rich.
    """

    level: str = Field(default="WARNING", description="Logging level")
    file: str | None = Field(default=None, description="Optional JSON-lines log file path")
    rich_console: bool = Field(default=True, description="Use rich for console logging")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate the level against the standard logging level names."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            msg = f"Unknown log level '{v}'"
            raise ValueError(msg)
        return level


__all__ = ["LoggingSettings"]
