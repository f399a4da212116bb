"""Per-record food storage in SQLite."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING

from ..models import sanitize_records
from .base import FoodStore, StoreError
from .schema import ensure_schema

if TYPE_CHECKING:
    from ..models import FoodEntry


class SQLiteFoodStore(FoodStore):
    """Manages the foods table, one row per entry keyed by id."""

    name = "sqlite"

    def __init__(self, db_path: str | Path = "~/.config/expirygraph/foods.db") -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def open(self) -> SQLiteFoodStore:
        """Open the database eagerly so an unusable path fails here.

        Raises:
            StoreError: If the database cannot be created or opened.
        """
        self._get_conn()
        return self

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                self._conn = ensure_schema(self._db_path)
            except (sqlite3.Error, OSError) as e:
                raise StoreError(f"Cannot open {self._db_path}: {e}") from e
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def load_all(self) -> list[FoodEntry]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT id, food_name, expiry_code, expiry_iso FROM foods ORDER BY rowid"
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Cannot read foods: {e}") from e
        return sanitize_records([dict(r) for r in rows])

    def replace_all(self, entries: list[FoodEntry]) -> None:
        """Clear the table and insert ``entries`` in one transaction."""
        conn = self._get_conn()
        records = [e.to_record() for e in entries]
        try:
            with conn:
                conn.execute("DELETE FROM foods")
                conn.executemany(
                    """INSERT INTO foods (id, food_name, expiry_code, expiry_iso)
                       VALUES (:id, :food_name, :expiry_code, :expiry_iso)""",
                    records,
                )
        except sqlite3.Error as e:
            raise StoreError(f"Cannot write foods: {e}") from e
