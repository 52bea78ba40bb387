"""Settings loader.

Finds the configuration file, loads it into Settings and turns loading
failures into ApplicationError.
"""

from __future__ import annotations

import logging
from pathlib import Path

import toml
from pydantic import ValidationError

from hashvault.config.models.settings import Settings
from hashvault.shared.constants import FileSystem
from hashvault.shared.errors import ApplicationError, ErrorCode, ErrorContext

logger = logging.getLogger(__name__)


def default_config_paths() -> list[Path]:
    """Return the locations searched when no config path is given."""
    return [
        Path(FileSystem.CONFIG_DIRECTORY) / FileSystem.CONFIG_FILE_NAME,
        Path(FileSystem.CONFIG_FILE_NAME),
        Path.home() / FileSystem.HOME_DIR / FileSystem.HOME_CONFIG_FILE_NAME,
    ]


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from TOML configuration file or environment.

    Args:
        config_path: Optional path to TOML configuration file. If None, tries
            the default locations, then environment variables and defaults.

    Returns:
        Settings instance loaded from the specified source

    Raises:
        ApplicationError: If an explicit file is missing, a file cannot be
            parsed or values fail validation
    """
    if config_path:
        return _load_from_file(Path(config_path))

    for candidate in default_config_paths():
        if candidate.exists():
            return _load_from_file(candidate)

    try:
        return Settings()
    except ValidationError as e:
        raise ApplicationError(
            code=ErrorCode.INVALID_CONFIG,
            message=f"Invalid configuration in environment: {e}",
            context=ErrorContext(operation="load_settings"),
            original_error=e,
        ) from e


def _load_from_file(config_path: Path) -> Settings:
    context = ErrorContext(
        file_path=str(config_path),
        operation="load_settings",
    )
    try:
        settings = Settings.from_toml_file(config_path)
    except FileNotFoundError as e:
        raise ApplicationError(
            code=ErrorCode.CONFIGURATION_ERROR,
            message=f"Configuration file not found: {config_path}",
            context=context,
            original_error=e,
        ) from e
    except (toml.TomlDecodeError, OSError) as e:
        raise ApplicationError(
            code=ErrorCode.CONFIGURATION_ERROR,
            message=f"Cannot read configuration file {config_path}: {e}",
            context=context,
            original_error=e,
        ) from e
    except ValidationError as e:
        raise ApplicationError(
            code=ErrorCode.INVALID_CONFIG,
            message=f"Invalid configuration in {config_path}: {e}",
            context=context,
            original_error=e,
        ) from e

    logger.info("Using configuration file %s", config_path)
    return settings
