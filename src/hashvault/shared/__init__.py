"""HashVault Shared Module.

This package contains the record models, constants, error handling and
logging helpers used across HashVault.
"""

__all__ = ["constants", "errors", "file_records", "logging"]
