from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from weaktables.constants import (
    DEFAULT_CLONE_MODE,
    ENV_CLONE_MODE,
    ENV_DEBUG_LEVEL,
    ENV_WARN_DEPRECATED,
    WeakMode,
)
from weaktables.errors import ModeError
from weaktables.validation import ensure_mode

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Settings:
    clone_default_mode: WeakMode = DEFAULT_CLONE_MODE
    debug_log_level: int = logging.INFO
    warn_deprecated: bool = True

    @staticmethod
    def from_env() -> Settings:
        return Settings(
            clone_default_mode=_env_clone_mode(os.getenv(ENV_CLONE_MODE)),
            debug_log_level=_parse_level(os.getenv(ENV_DEBUG_LEVEL)),
            warn_deprecated=os.getenv(ENV_WARN_DEPRECATED, "1").strip() != "0",
        )

    @staticmethod
    def from_file(path: Path) -> Settings:
        data = _load_yaml(path)
        known = {item.name for item in fields(Settings)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown settings in {path}: {', '.join(unknown)}")
        defaults = Settings()
        clone_mode = data.get("clone_default_mode")
        return Settings(
            clone_default_mode=(
                ensure_mode(clone_mode, "settings") if clone_mode is not None else defaults.clone_default_mode
            ),
            debug_log_level=_parse_level(data.get("debug_log_level")),
            warn_deprecated=bool(data.get("warn_deprecated", defaults.warn_deprecated)),
        )


def _env_clone_mode(raw: str | None) -> WeakMode:
    if not raw or not raw.strip():
        return DEFAULT_CLONE_MODE
    try:
        return ensure_mode(raw.strip(), "settings")
    except ModeError as exc:
        logger.warning("Ignoring %s: %s; using %r", ENV_CLONE_MODE, exc.message, DEFAULT_CLONE_MODE)
        return DEFAULT_CLONE_MODE


def _parse_level(raw: Any) -> int:
    if raw is None or raw == "":
        return logging.INFO
    if isinstance(raw, int):
        return raw
    text = str(raw).strip()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    return level if isinstance(level, int) else logging.INFO


def _load_yaml(path: Path) -> dict[str, Any]:
    import yaml

    loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Settings file must be a mapping: {path}")
    return loaded


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def configure(settings: Settings) -> Settings:
    global _settings
    _settings = settings
    return settings


def reset_settings() -> None:
    global _settings
    _settings = None


__all__ = [
    "Settings",
    "configure",
    "get_settings",
    "reset_settings",
]
