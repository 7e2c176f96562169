"""
Persistence adapters.

Two interchangeable stores expose the same per-collection contract: the JSON
flat-file store (default) and the SQL store (when DATABASE_URL is set).
Services depend on that contract rather than on files or sessions.
"""
from __future__ import annotations

from studylog.core.config import Settings

from .json_storage import StorageError
from .store import EntityStore


def build_store(settings: Settings):
    """Return the store selected by the current settings."""
    if settings.storage_backend == "sql":
        from .sql_repository import SQLEntityStore

        return SQLEntityStore()
    return EntityStore(settings.data_dir)


__all__ = ["EntityStore", "StorageError", "build_store"]
