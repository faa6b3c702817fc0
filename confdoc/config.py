"""Configuration loading for confdoc (.confdoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .frontend.discovery import DEFAULT_INCLUDE

CONFIG_FILENAME = ".confdoc.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ConfDocConfig:
    """Settings defined in .confdoc.yml."""

    root: Path
    include: List[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE))
    exclude_paths: List[str] = field(default_factory=list)
    strict: bool = False
    log_file: Optional[Path] = None


def load_config(config_path: Path) -> ConfDocConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ConfDocConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    include = _as_str_list(data.get("include")) or list(DEFAULT_INCLUDE)
    log_file_str = _as_str(data.get("log_file"))

    return ConfDocConfig(
        root=root,
        include=include,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        strict=_as_bool(data.get("strict")) or False,
        log_file=root / log_file_str if log_file_str else None,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfDocConfig", "ConfigError", "load_config"]
