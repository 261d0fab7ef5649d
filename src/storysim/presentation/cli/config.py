"""CLI configuration helpers for options persistence."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)

_DEFAULT_TEXT_WIDTH = 78
_MIN_TEXT_WIDTH = 40
_MAX_TEXT_WIDTH = 160

CliConfig = Dict[str, object]


def default_config() -> CliConfig:
    return {"text_width": _DEFAULT_TEXT_WIDTH, "show_scene_art": False}


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "StorySim"
        return Path.home() / "StorySim"
    return Path.home() / ".config" / "storysim"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def _normalize_text_width(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return _DEFAULT_TEXT_WIDTH
    return max(_MIN_TEXT_WIDTH, min(_MAX_TEXT_WIDTH, value))


def _normalize(raw: Dict[str, object]) -> CliConfig:
    return {
        "text_width": _normalize_text_width(raw.get("text_width")),
        "show_scene_art": raw.get("show_scene_art") is True,
    }


def load_config(path: Path | None = None) -> CliConfig:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return default_config()
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", config_path, exc)
        return default_config()
    if not isinstance(raw, dict):
        return default_config()
    return _normalize(raw)


def save_config(config: Dict[str, object], path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = _normalize(dict(config))
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
