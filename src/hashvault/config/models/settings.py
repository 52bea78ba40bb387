"""Top-level settings object combining the hashing and logging sections."""

from __future__ import annotations

import logging
from pathlib import Path

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from hashvault.config.models.app_settings import LoggingSettings
from hashvault.config.models.hash_settings import HashSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """All HashVault settings.

    Sections passed to the constructor (e.g. read from a TOML file) take
    precedence over ``HASHVAULT_`` environment variables. Nested fields use
    ``__``: ``HASHVAULT_HASHING__NUM_WORKERS=8``.
    """

    model_config = SettingsConfigDict(
        env_prefix="HASHVAULT_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    hashing: HashSettings = Field(default_factory=HashSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Read ``file_path``; environment variables fill what it leaves out.

        Raises:
            FileNotFoundError: If the file does not exist
            toml.TomlDecodeError: If the file is not valid TOML
        """
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        sections = toml.load(path)
        logger.debug("Read settings from %s", path)
        return cls(**sections)

    def to_toml_file(self, file_path: str | Path) -> None:
        """Write every section to ``file_path``, creating parent directories."""
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            toml.dump(self.model_dump(exclude_none=True), handle)
