"""Tests for vision backends (mocked API calls)."""

import json
import sys
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from expirygraph.config import load_config
from expirygraph.vision import (
    FoodSuggestion,
    ScanError,
    create_backend,
    filter_suggestions,
    parse_suggestions,
)
from expirygraph.vision.claude import ClaudeVisionBackend
from expirygraph.vision.gemini import GeminiVisionBackend


class TestFoodSuggestion:
    def test_percent_rounds(self):
        assert FoodSuggestion(name="milk", confidence=0.926).percent == 93
        assert FoodSuggestion(name="milk", confidence=0.0).percent == 0


class TestCreateBackend:
    def test_create_claude_backend(self):
        config = load_config()
        backend = create_backend(config)
        assert isinstance(backend, ClaudeVisionBackend)

    def test_create_gemini_backend(self):
        config = load_config()
        config.vision.backend = "gemini"
        backend = create_backend(config)
        assert isinstance(backend, GeminiVisionBackend)

    def test_create_unknown_backend(self):
        config = load_config()
        config.vision.backend = "unknown"
        with pytest.raises(ValueError, match="Unknown vision backend"):
            create_backend(config)


class TestParseSuggestions:
    def test_parse_items(self):
        text = json.dumps({"items": [
            {"name": "milk", "confidence": 0.92},
            {"name": "eggs", "confidence": 0.8},
        ]})
        result = parse_suggestions(text)
        assert result == [
            FoodSuggestion("milk", 0.92),
            FoodSuggestion("eggs", 0.8),
        ]

    def test_parse_with_markdown_fences(self):
        text = """```json
{"items": [{"name": "cheese", "confidence": 0.7}]}
```"""
        result = parse_suggestions(text)
        assert result == [FoodSuggestion("cheese", 0.7)]

    def test_malformed_json_yields_empty(self):
        assert parse_suggestions("I see some milk") == []
        assert parse_suggestions("") == []

    def test_missing_items_yields_empty(self):
        assert parse_suggestions(json.dumps({"foods": []})) == []
        assert parse_suggestions(json.dumps({"items": "milk"})) == []
        assert parse_suggestions(json.dumps([{"name": "milk"}])) == []

    def test_drops_items_without_string_name(self):
        text = json.dumps({"items": [
            {"name": 3, "confidence": 0.9},
            {"confidence": 0.9},
            "milk",
            {"name": "   ", "confidence": 0.9},
            {"name": " butter ", "confidence": 0.6},
        ]})
        assert parse_suggestions(text) == [FoodSuggestion("butter", 0.6)]

    def test_bad_confidence_becomes_zero(self):
        text = json.dumps({"items": [
            {"name": "a", "confidence": "high"},
            {"name": "b"},
            {"name": "c", "confidence": None},
            {"name": "d", "confidence": "0.5"},
        ]})
        result = {s.name: s.confidence for s in parse_suggestions(text)}
        assert result == {"a": 0.0, "b": 0.0, "c": 0.0, "d": 0.5}

    def test_confidence_clamped(self):
        text = json.dumps({"items": [
            {"name": "a", "confidence": 1.7},
            {"name": "b", "confidence": -0.2},
        ]})
        result = {s.name: s.confidence for s in parse_suggestions(text)}
        assert result == {"a": 1.0, "b": 0.0}

    def test_deduplicates_by_name(self):
        text = json.dumps({"items": [
            {"name": "milk", "confidence": 0.6},
            {"name": "milk", "confidence": 0.9},
            {"name": "milk", "confidence": 0.4},
        ]})
        assert parse_suggestions(text) == [FoodSuggestion("milk", 0.9)]


class TestFilterSuggestions:
    def test_sorts_and_filters(self):
        suggestions = [
            FoodSuggestion("a", 0.3),
            FoodSuggestion("b", 0.9),
            FoodSuggestion("c", 0.6),
        ]
        assert [s.name for s in filter_suggestions(suggestions)] == ["b", "c", "a"]
        assert [s.name for s in filter_suggestions(suggestions, 0.5)] == ["b", "c"]


class TestClaudeVisionBackend:
    @pytest.mark.asyncio
    async def test_requires_api_key(self):
        backend = ClaudeVisionBackend(api_key="")
        with pytest.raises(ValueError, match="API key"):
            await backend.suggest_foods(["/tmp/test.jpg"])

    @pytest.mark.asyncio
    async def test_suggest_foods_mocked(self, tmp_path):
        img = tmp_path / "fridge.png"
        img.write_bytes(b"\x89PNG fake")

        mock_response = MagicMock()
        mock_response.content = [
            MagicMock(text=json.dumps({"items": [
                {"name": "milk", "confidence": 0.95},
                {"name": "lettuce", "confidence": 0.8},
            ]}))
        ]

        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(return_value=mock_response)

        mock_anthropic = MagicMock()
        mock_anthropic.AsyncAnthropic.return_value = mock_client

        with patch.dict(sys.modules, {"anthropic": mock_anthropic}):
            backend = ClaudeVisionBackend(api_key="test-key")
            result = await backend.suggest_foods([str(img)])

        assert [s.name for s in result] == ["milk", "lettuce"]
        kwargs = mock_client.messages.create.call_args.kwargs
        content = kwargs["messages"][0]["content"]
        assert content[0]["source"]["media_type"] == "image/png"
        assert "Return JSON only" in content[-1]["text"]

    @pytest.mark.asyncio
    async def test_api_failure_raises_scan_error(self, tmp_path):
        img = tmp_path / "fridge.jpg"
        img.write_bytes(b"\xff\xd8\xff\xe0fake-jpeg")

        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(side_effect=RuntimeError("overloaded"))
        mock_anthropic = MagicMock()
        mock_anthropic.AsyncAnthropic.return_value = mock_client

        with patch.dict(sys.modules, {"anthropic": mock_anthropic}):
            backend = ClaudeVisionBackend(api_key="test-key")
            with pytest.raises(ScanError, match="overloaded"):
                await backend.suggest_foods([str(img)])


class TestGeminiVisionBackend:
    @pytest.mark.asyncio
    async def test_requires_api_key(self):
        backend = GeminiVisionBackend(api_key="")
        with pytest.raises(ValueError, match="API key"):
            await backend.suggest_foods(["/tmp/test.jpg"])

    @pytest.mark.asyncio
    async def test_suggest_foods_mocked(self, tmp_path):
        img = tmp_path / "fridge.jpg"
        img.write_bytes(b"\xff\xd8\xff\xe0fake-jpeg")

        mock_model = MagicMock()
        mock_model.generate_content_async = AsyncMock(
            return_value=MagicMock(text='{"items": [{"name": "carrot", "confidence": 0.85}]}')
        )
        mock_genai = MagicMock()
        mock_genai.GenerativeModel.return_value = mock_model
        mock_google = MagicMock()
        mock_google.generativeai = mock_genai

        with patch.dict(
            sys.modules,
            {"google": mock_google, "google.generativeai": mock_genai},
        ):
            backend = GeminiVisionBackend(api_key="test-key")
            result = await backend.suggest_foods([str(img)])

        assert result == [FoodSuggestion("carrot", 0.85)]
        mock_genai.configure.assert_called_once_with(api_key="test-key")
