"""Gemini API vision backend for food name suggestions."""

from __future__ import annotations

import mimetypes
from pathlib import Path

from . import PROMPT, FoodSuggestion, ScanError, VisionBackend, parse_suggestions


class GeminiVisionBackend(VisionBackend):
    """Suggest food names using Google Gemini's vision capability."""

    def __init__(self, api_key: str = "", model: str = "gemini-2.0-flash") -> None:
        self._api_key = api_key
        self._model = model

    async def suggest_foods(self, image_paths: list[str]) -> list[FoodSuggestion]:
        if not self._api_key:
            raise ValueError(
                "Gemini API key is not set. "
                "Check the config file or the GEMINI_API_KEY environment variable."
            )

        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: pip install google-generativeai"
            ) from None

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model)

        parts: list = []
        for path in image_paths:
            data = Path(path).read_bytes()
            mime_type = mimetypes.guess_type(path)[0] or "image/jpeg"
            parts.append({"mime_type": mime_type, "data": data})
        parts.append(PROMPT)

        try:
            response = await model.generate_content_async(parts)
        except Exception as e:
            raise ScanError(f"Gemini request failed: {e}") from e
        return parse_suggestions(response.text)
