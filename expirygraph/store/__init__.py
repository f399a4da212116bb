"""Food entry persistence: SQLite per-record store with a JSON blob fallback."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .base import FoodStore, StoreError
from .blob import LEGACY_STORAGE_KEY, JsonBlobStore, KeyValueFile
from .schema import ensure_schema
from .sqlite import SQLiteFoodStore

if TYPE_CHECKING:
    from ..config import TrackerConfig
    from ..models import FoodEntry

logger = logging.getLogger(__name__)

__all__ = [
    "FoodStore",
    "StoreError",
    "SQLiteFoodStore",
    "JsonBlobStore",
    "KeyValueFile",
    "LEGACY_STORAGE_KEY",
    "ensure_schema",
    "open_store",
    "load_entries",
    "migrate_legacy",
]


def open_store(config: TrackerConfig) -> tuple[FoodStore, JsonBlobStore]:
    """Open the primary store and the blob fallback.

    Returns:
        ``(primary, fallback)``. When the SQLite database cannot be opened
        the blob store is returned as both.
    """
    fallback = JsonBlobStore(config.storage.legacy_path)
    try:
        primary = SQLiteFoodStore(config.storage.db_path).open()
    except StoreError:
        logger.warning(
            "SQLite store unavailable, using %s", fallback.name, exc_info=True
        )
        return fallback, fallback
    logger.info("Using SQLite store at %s", config.storage.db_path)
    return primary, fallback


def migrate_legacy(structured: FoodStore, legacy: JsonBlobStore) -> int:
    """Move blob entries into an empty structured store, then clear the blob.

    Returns:
        Number of entries migrated.
    """
    if structured.load_all():
        return 0
    entries = legacy.load_all()
    if not entries:
        return 0
    structured.replace_all(entries)
    legacy.clear()
    logger.info("Migrated %d entries from the blob store", len(entries))
    return len(entries)


def load_entries(primary: FoodStore, fallback: JsonBlobStore) -> list[FoodEntry]:
    """Load the entry list, migrating the blob on first structured read."""
    if primary is fallback:
        return fallback.load_all()

    try:
        stored = primary.load_all()
        if stored:
            return stored
        if migrate_legacy(primary, fallback):
            return primary.load_all()
        return []
    except StoreError:
        logger.warning("Reading %s failed, loading blob store", primary.name, exc_info=True)
        return fallback.load_all()
