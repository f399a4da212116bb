"""TOML configuration loader for the expiry tracker."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class StorageConfig:
    db_path: str = "~/.config/expirygraph/foods.db"
    legacy_path: str = "~/.config/expirygraph/storage.json"


@dataclass
class ClaudeVisionConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"


@dataclass
class GeminiVisionConfig:
    api_key: str = ""
    model: str = "gemini-2.0-flash"


@dataclass
class VisionConfig:
    backend: str = "claude"
    min_confidence: float = 0.0
    claude: ClaudeVisionConfig = field(default_factory=ClaudeVisionConfig)
    gemini: GeminiVisionConfig = field(default_factory=GeminiVisionConfig)


@dataclass
class CameraConfig:
    index: int = 0
    save_dir: str = "/tmp/expirygraph"
    warmup_frames: int = 3


@dataclass
class DisplayConfig:
    graph_width: int = 40


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class TrackerConfig:
    storage: StorageConfig = field(default_factory=StorageConfig)
    vision: VisionConfig = field(default_factory=VisionConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | Path | None = None) -> TrackerConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    API keys can be overridden via environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path).expanduser()
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    sto = raw.get("storage", {})
    vis = raw.get("vision", {})
    cam = raw.get("camera", {})
    dsp = raw.get("display", {})
    log = raw.get("logging", {})

    claude_cfg = vis.get("claude", {})
    gemini_cfg = vis.get("gemini", {})

    # Resolve API keys: config file → environment variable
    claude_api_key = claude_cfg.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )
    gemini_api_key = gemini_cfg.get("api_key", "") or os.environ.get(
        "GEMINI_API_KEY", ""
    )

    return TrackerConfig(
        storage=StorageConfig(
            db_path=sto.get("db_path", "~/.config/expirygraph/foods.db"),
            legacy_path=sto.get(
                "legacy_path", "~/.config/expirygraph/storage.json"
            ),
        ),
        vision=VisionConfig(
            backend=vis.get("backend", "claude"),
            min_confidence=vis.get("min_confidence", 0.0),
            claude=ClaudeVisionConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-5-20250929"),
            ),
            gemini=GeminiVisionConfig(
                api_key=gemini_api_key,
                model=gemini_cfg.get("model", "gemini-2.0-flash"),
            ),
        ),
        camera=CameraConfig(
            index=cam.get("index", 0),
            save_dir=cam.get("save_dir", "/tmp/expirygraph"),
            warmup_frames=cam.get("warmup_frames", 3),
        ),
        display=DisplayConfig(
            graph_width=dsp.get("graph_width", 40),
        ),
        logging=LoggingConfig(
            level=str(log.get("level", "WARNING")).upper(),
        ),
    )
