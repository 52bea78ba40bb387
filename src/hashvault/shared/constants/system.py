"""Application, file system, pipeline and timeout constants."""

from __future__ import annotations

KIBIBYTE = 1024


class Application:
    """Name and version reported by ``--version``."""

    NAME = "HashVault"
    VERSION = "0.1.0"
    DESCRIPTION = "Incremental content-hash inventory for large file trees"


class FileSystem:
    """Paths, file names and encodings."""

    MEGABYTE = KIBIBYTE * KIBIBYTE

    # ~/.hashvault/config.toml, ./config/hashvault.toml
    HOME_DIR = ".hashvault"
    CONFIG_DIRECTORY = "config"
    CONFIG_FILE_NAME = "hashvault.toml"
    HOME_CONFIG_FILE_NAME = "config.toml"

    # reports round-trip undecodable file name bytes
    REPORT_ENCODING = "utf-8"
    REPORT_ERRORS = "surrogateescape"


class ProcessingConfig:
    """Defaults and limits for the hash pipeline."""

    MAX_PROCESSING_WORKERS = 4
    MAX_WORKERS_LIMIT = 64
    DEFAULT_QUEUE_SIZE = 1000

    DEFAULT_HASH_ALGORITHM = "sha1"
    DEFAULT_CHUNK_SIZE = KIBIBYTE * KIBIBYTE

    # files between two progress status lines
    DEFAULT_PROGRESS_EVERY = 1000


class Timeout:
    """Seconds."""

    PIPELINE_SENTINEL = 30.0
    PIPELINE_QUEUE = 1.0
    PIPELINE_SHUTDOWN = 5.0


class Pipeline:
    # end-of-input marker, compared by identity
    SENTINEL = object()
