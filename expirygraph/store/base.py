"""Storage interface shared by the SQLite store and the JSON blob fallback."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models import FoodEntry


class StoreError(RuntimeError):
    """The backing store could not be read or written."""


class FoodStore(ABC):
    """Persists the full list of food entries."""

    name: str = "store"

    @abstractmethod
    def load_all(self) -> list[FoodEntry]:
        """Return every stored entry."""
        ...

    @abstractmethod
    def replace_all(self, entries: list[FoodEntry]) -> None:
        """Replace the stored list with ``entries``."""
        ...

    def close(self) -> None:
        pass
