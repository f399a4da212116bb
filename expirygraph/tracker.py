"""Owned list of tracked foods.

Every mutation builds a new list, persists it, then notifies the renderer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Callable

from .models import FoodEntry
from .status import EXPIRED, ExpiryStatus, classify
from .store import load_entries

if TYPE_CHECKING:
    from .store import FoodStore
    from .vision import FoodSuggestion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntryRow:
    """A food entry decorated for display."""

    entry: FoodEntry
    status: ExpiryStatus
    formatted_date: str

    @property
    def id(self) -> str:
        return self.entry.id

    @property
    def food_name(self) -> str:
        return self.entry.food_name

    @property
    def expiry(self) -> datetime:
        return self.entry.expiry

    def to_dict(self) -> dict:
        return {
            **self.entry.to_record(),
            "formatted_date": self.formatted_date,
            "status": {
                "type": self.status.type,
                "days_left": self.status.days_left,
                "short": self.status.short,
                "text": self.status.text,
            },
        }


@dataclass(frozen=True)
class TrackerStats:
    total: int
    expired: int
    safe: int


def format_date(value: datetime) -> str:
    """Format like "Mar 5, 2024"."""
    return f"{value:%b} {value.day}, {value.year}"


def build_rows(entries, now: datetime | None = None) -> list[EntryRow]:
    """Classify every entry against one ``now`` and sort by expiry."""
    now = now or datetime.now()
    rows = [
        EntryRow(entry=e, status=classify(e.expiry, now), formatted_date=format_date(e.expiry))
        for e in entries
    ]
    rows.sort(key=lambda r: r.expiry)
    return rows


def summarize(rows: list[EntryRow]) -> TrackerStats:
    expired = sum(1 for r in rows if r.status.type == EXPIRED)
    return TrackerStats(total=len(rows), expired=expired, safe=len(rows) - expired)


class FoodTracker:
    """Holds the current entries and saves every change to one store.

    ``fallback`` is only read from: ``load`` migrates or recovers blob
    entries through it.
    """

    def __init__(
        self,
        store: FoodStore,
        fallback: FoodStore | None = None,
        on_change: Callable[[list[FoodEntry]], None] | None = None,
    ) -> None:
        self._store = store
        self._fallback = fallback
        self._on_change = on_change
        self._entries: list[FoodEntry] = []

    @property
    def entries(self) -> tuple[FoodEntry, ...]:
        return tuple(self._entries)

    def load(self) -> list[FoodEntry]:
        if self._fallback is not None:
            self._entries = load_entries(self._store, self._fallback)
        else:
            self._entries = self._store.load_all()
        logger.info("Loaded %d entries", len(self._entries))
        return list(self._entries)

    def add(self, food_name: str, expiry_code: str) -> FoodEntry:
        """Add a new entry.

        Raises:
            EmptyFoodName: If the name is blank.
            InvalidExpiryCode: If the code cannot be parsed. The list is
                left unchanged.
        """
        entry = FoodEntry.create(food_name, expiry_code)
        self._commit([*self._entries, entry])
        return entry

    def accept_suggestion(self, suggestion: FoodSuggestion, expiry_code: str) -> FoodEntry:
        """Add a scanned suggestion under the given expiry code."""
        return self.add(suggestion.name, expiry_code)

    def remove(self, entry_id: str) -> bool:
        remaining = [e for e in self._entries if e.id != entry_id]
        if len(remaining) == len(self._entries):
            return False
        self._commit(remaining)
        return True

    def clear(self) -> int:
        count = len(self._entries)
        if not count:
            return 0
        self._commit([])
        return count

    def find(self, id_prefix: str) -> FoodEntry | None:
        """Return the entry whose id starts with ``id_prefix`` if unique."""
        matches = [e for e in self._entries if e.id.startswith(id_prefix)]
        return matches[0] if len(matches) == 1 else None

    def rows(self, now: datetime | None = None) -> list[EntryRow]:
        return build_rows(self._entries, now)

    def close(self) -> None:
        self._store.close()
        if self._fallback is not None and self._fallback is not self._store:
            self._fallback.close()

    def _commit(self, entries: list[FoodEntry]) -> None:
        """Save ``entries`` and make them current.

        Raises:
            StoreError: If the store rejects the write. The current list is
                left unchanged.
        """
        self._store.replace_all(entries)
        self._entries = entries
        if self._on_change is not None:
            self._on_change(list(self._entries))
