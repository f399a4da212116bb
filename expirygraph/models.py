"""Food entry records and their validation errors."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from .parser import ACCEPTED_FORMATS, parse_expiry_code

_RECORD_FIELDS = ("id", "food_name", "expiry_code", "expiry_iso")


class EntryError(ValueError):
    """A food entry could not be created from user input."""


class EmptyFoodName(EntryError):
    def __init__(self) -> None:
        super().__init__("Please enter a food name.")


class InvalidExpiryCode(EntryError):
    def __init__(self, code: str) -> None:
        self.code = code
        formats = ", ".join(ACCEPTED_FORMATS[:-1]) + f", or {ACCEPTED_FORMATS[-1]}"
        super().__init__(f'Could not read "{code}". Use {formats}.')


@dataclass(frozen=True)
class FoodEntry:
    """A tracked food item.

    ``expiry`` is always the day-end instant derived from ``expiry_code``.
    """

    id: str
    food_name: str
    expiry_code: str
    expiry: datetime

    @classmethod
    def create(cls, food_name: str, expiry_code: str, entry_id: str | None = None) -> FoodEntry:
        """Validate user input and build a new entry.

        Raises:
            EmptyFoodName: If the name is blank.
            InvalidExpiryCode: If the code matches no accepted format.
        """
        name = (food_name or "").strip()
        code = (expiry_code or "").strip()
        if not name:
            raise EmptyFoodName()
        expiry = parse_expiry_code(code)
        if expiry is None:
            raise InvalidExpiryCode(code)
        return cls(
            id=entry_id or uuid.uuid4().hex,
            food_name=name,
            expiry_code=code,
            expiry=expiry,
        )

    def to_record(self) -> dict[str, str]:
        return {
            "id": self.id,
            "food_name": self.food_name,
            "expiry_code": self.expiry_code,
            "expiry_iso": self.expiry.isoformat(timespec="milliseconds"),
        }

    @classmethod
    def from_record(cls, record: dict) -> FoodEntry:
        expiry = datetime.fromisoformat(record["expiry_iso"])
        if expiry.tzinfo is not None:
            # Stored as an absolute instant; compare in local wall-clock time.
            expiry = expiry.astimezone().replace(tzinfo=None)
        return cls(
            id=record["id"],
            food_name=record["food_name"],
            expiry_code=record["expiry_code"],
            expiry=expiry,
        )


def sanitize_records(raw) -> list[FoodEntry]:
    """Keep only well-formed stored records.

    Anything that is not a list yields an empty list. Records missing a
    string field, or whose ``expiry_iso`` is not a valid timestamp, are
    dropped.
    """
    if not isinstance(raw, list):
        return []
    entries: list[FoodEntry] = []
    for record in raw:
        if not isinstance(record, dict):
            continue
        if not all(isinstance(record.get(f), str) for f in _RECORD_FIELDS):
            continue
        try:
            entries.append(FoodEntry.from_record(record))
        except ValueError:
            continue
    return entries
