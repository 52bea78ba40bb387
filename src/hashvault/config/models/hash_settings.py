"""Hashing pipeline configuration model.

This module contains the configuration model for a scan run: what the
scanner walks, whether contents are hashed, and how the worker pool and
queues are sized.
"""

from __future__ import annotations

import hashlib

from pydantic import BaseModel, Field, field_validator

from hashvault.shared.constants import ProcessingConfig


class HashSettings(BaseModel):
    """Configuration for scanning and hashing."""

    compute_hashes: bool = Field(
        default=False,
        description="Read file contents and compute hashes (False inventories size only)",
    )
    follow_links: bool = Field(
        default=False,
        description="Follow symbolic links while walking the tree",
    )
    max_entries: int = Field(
        default=0,
        ge=0,
        description="Maximum number of files to scan (0 = unlimited)",
    )
    progress_every: int = Field(
        default=ProcessingConfig.DEFAULT_PROGRESS_EVERY,
        ge=0,
        description="Print a progress status every N files (0 = never)",
    )
    num_workers: int = Field(
        default=ProcessingConfig.MAX_PROCESSING_WORKERS,
        ge=1,
        le=ProcessingConfig.MAX_WORKERS_LIMIT,
        description="Number of hash worker threads",
    )
    max_queue_size: int = Field(
        default=ProcessingConfig.DEFAULT_QUEUE_SIZE,
        ge=1,
        description="Capacity of the result queue between workers and collector",
    )
    hash_algorithm: str = Field(
        default=ProcessingConfig.DEFAULT_HASH_ALGORITHM,
        description="hashlib algorithm name",
    )
    chunk_size: int = Field(
        default=ProcessingConfig.DEFAULT_CHUNK_SIZE,
        gt=0,
        description="Read size in bytes while streaming a file",
    )

    @field_validator("hash_algorithm")
    @classmethod
    def validate_hash_algorithm(cls, v: str) -> str:
        """Validate that hashlib provides the algorithm."""
        name = v.strip().lower()
        if name not in hashlib.algorithms_available:
            available = ", ".join(sorted(hashlib.algorithms_guaranteed))
            msg = f"Unknown hash algorithm '{v}'. Guaranteed algorithms: {available}"
            raise ValueError(msg)
        return name
