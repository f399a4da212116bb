"""Claude API vision backend for food name suggestions."""

from __future__ import annotations

import base64
import mimetypes
from pathlib import Path

from . import PROMPT, FoodSuggestion, ScanError, VisionBackend, parse_suggestions


class ClaudeVisionBackend(VisionBackend):
    """Suggest food names using Claude's vision capability."""

    def __init__(self, api_key: str = "", model: str = "claude-sonnet-4-5-20250929") -> None:
        self._api_key = api_key
        self._model = model

    async def suggest_foods(self, image_paths: list[str]) -> list[FoodSuggestion]:
        if not self._api_key:
            raise ValueError(
                "Anthropic API key is not set. "
                "Check the config file or the ANTHROPIC_API_KEY environment variable."
            )

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install anthropic"
            ) from None

        content: list[dict] = []
        for path in image_paths:
            data = Path(path).read_bytes()
            media_type = mimetypes.guess_type(path)[0] or "image/jpeg"
            content.append(
                {
                    "type": "image",
                    "source": {
                        "type": "base64",
                        "media_type": media_type,
                        "data": base64.standard_b64encode(data).decode(),
                    },
                }
            )
        content.append({"type": "text", "text": PROMPT})

        client = anthropic.AsyncAnthropic(api_key=self._api_key)
        try:
            response = await client.messages.create(
                model=self._model,
                max_tokens=1024,
                messages=[{"role": "user", "content": content}],
            )
        except Exception as e:
            raise ScanError(f"Claude request failed: {e}") from e

        text = response.content[0].text if response.content else ""
        return parse_suggestions(text)
