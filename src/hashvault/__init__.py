"""
HashVault - Incremental Content-Hash Inventory

Walks a file tree, hashes file contents in parallel and writes one record
per file. A previous report can be loaded so unchanged files are not read
again.
"""

__version__ = "0.1.0"

from .core.pipeline import run_pipeline

__all__ = [
    "run_pipeline",
]
