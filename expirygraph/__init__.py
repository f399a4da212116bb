"""Food expiry tracking with a timeline view and AI-assisted scanning."""

from .config import TrackerConfig, load_config
from .models import EmptyFoodName, EntryError, FoodEntry, InvalidExpiryCode
from .parser import ACCEPTED_FORMATS, end_of_day, end_of_month, parse_expiry_code
from .status import ExpiryStatus, classify
from .store import FoodStore, JsonBlobStore, SQLiteFoodStore, StoreError, open_store
from .tracker import EntryRow, FoodTracker, TrackerStats, build_rows, summarize
from .vision import FoodSuggestion, ScanError, VisionBackend, create_backend

__all__ = [
    "parse_expiry_code",
    "end_of_day",
    "end_of_month",
    "ACCEPTED_FORMATS",
    "classify",
    "ExpiryStatus",
    "FoodEntry",
    "EntryError",
    "EmptyFoodName",
    "InvalidExpiryCode",
    "FoodTracker",
    "EntryRow",
    "TrackerStats",
    "build_rows",
    "summarize",
    "FoodStore",
    "SQLiteFoodStore",
    "JsonBlobStore",
    "StoreError",
    "open_store",
    "FoodSuggestion",
    "VisionBackend",
    "ScanError",
    "create_backend",
    "TrackerConfig",
    "load_config",
]
