"""Single-blob fallback storage in a JSON key-value file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ..models import sanitize_records
from .base import FoodStore, StoreError

if TYPE_CHECKING:
    from ..models import FoodEntry

logger = logging.getLogger(__name__)

LEGACY_STORAGE_KEY = "expiry_graph_tracker_items_v1"


class KeyValueFile:
    """A flat string-to-string map persisted as one JSON object."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, str]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable storage file %s", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(data, ensure_ascii=False), encoding="utf-8"
            )
        except OSError as e:
            raise StoreError(f"Cannot write {self._path}: {e}") from e

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class JsonBlobStore(FoodStore):
    """Stores the whole entry list as one serialized JSON value."""

    name = "blob"

    def __init__(
        self,
        path: str | Path = "~/.config/expirygraph/storage.json",
        key: str = LEGACY_STORAGE_KEY,
    ) -> None:
        self._kv = KeyValueFile(path)
        self._key = key

    def load_all(self) -> list[FoodEntry]:
        raw = self._kv.get(self._key)
        if not raw:
            return []
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.warning("Discarding malformed blob under %s", self._key)
            return []
        return sanitize_records(parsed)

    def replace_all(self, entries: list[FoodEntry]) -> None:
        self._kv.set(
            self._key,
            json.dumps([e.to_record() for e in entries], ensure_ascii=False),
        )

    def clear(self) -> None:
        """Drop the blob key entirely."""
        self._kv.remove(self._key)
