"""Vision backend base class, data types, and factory."""

from __future__ import annotations

import json
import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import TrackerConfig

logger = logging.getLogger(__name__)

PROMPT = (
    "List visible food items from this fridge image. "
    'Return JSON only in this shape: {"items":[{"name":"milk","confidence":0.92}]}'
)


class ScanError(RuntimeError):
    """The vision model could not produce suggestions."""


@dataclass(frozen=True)
class FoodSuggestion:
    name: str
    confidence: float  # 0.0 to 1.0

    @property
    def percent(self) -> int:
        return round(self.confidence * 100)


class VisionBackend(ABC):
    """Abstract base for suggesting food names from images."""

    @abstractmethod
    async def suggest_foods(self, image_paths: list[str]) -> list[FoodSuggestion]:
        """Suggest food names visible in one or more images.

        Duplicates across images should be merged.
        """
        ...


def _confidence(value) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number):
        return 0.0
    return min(max(number, 0.0), 1.0)


def parse_suggestions(text: str) -> list[FoodSuggestion]:
    """Parse the ``{"items": [...]}`` JSON a model returned.

    Malformed output yields an empty list rather than an error.
    """
    cleaned = (text or "").strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)

    try:
        parsed = json.loads(cleaned) if cleaned else {}
    except ValueError:
        logger.warning("Model returned non-JSON output, ignoring it")
        return []

    items = parsed.get("items") if isinstance(parsed, dict) else None
    if not isinstance(items, list):
        return []

    seen: dict[str, FoodSuggestion] = {}
    for item in items:
        if not isinstance(item, dict) or not isinstance(item.get("name"), str):
            continue
        name = item["name"].strip()
        if not name:
            continue
        suggestion = FoodSuggestion(name=name, confidence=_confidence(item.get("confidence")))
        # Keep higher confidence
        if name not in seen or suggestion.confidence > seen[name].confidence:
            seen[name] = suggestion
    return list(seen.values())


def filter_suggestions(
    suggestions: list[FoodSuggestion], min_confidence: float = 0.0
) -> list[FoodSuggestion]:
    """Drop low-confidence suggestions and sort the rest, most likely first."""
    kept = [s for s in suggestions if s.confidence >= min_confidence]
    return sorted(kept, key=lambda s: s.confidence, reverse=True)


def create_backend(config: TrackerConfig) -> VisionBackend:
    """Create a vision backend based on configuration."""
    backend_name = config.vision.backend

    match backend_name:
        case "claude":
            from .claude import ClaudeVisionBackend

            return ClaudeVisionBackend(
                api_key=config.vision.claude.api_key,
                model=config.vision.claude.model,
            )
        case "gemini":
            from .gemini import GeminiVisionBackend

            return GeminiVisionBackend(
                api_key=config.vision.gemini.api_key,
                model=config.vision.gemini.model,
            )
        case _:
            raise ValueError(
                f"Unknown vision backend: {backend_name!r} "
                f"(choose claude or gemini)"
            )
