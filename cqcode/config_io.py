"""Reading cqcode settings from JSON, YAML or TOML files.

The reader is picked by file extension (``.json``, ``.yaml``/``.yml``,
``.toml``).  A go-cqhttp ``config.yml`` can be loaded directly: only its
``message`` block is validated, everything else is ignored.
"""
from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any, Callable

import yaml

from cqcode.config_schema import AppConfig

# Search order inside a data directory
CONFIG_NAMES = ("cqcode.json", "cqcode.yaml", "cqcode.yml", "cqcode.toml")


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _read_yaml(path: Path) -> Any:
    # An empty YAML document is None
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def _read_toml(path: Path) -> Any:
    return tomllib.loads(path.read_text(encoding="utf-8"))


_READERS: dict[str, Callable[[Path], Any]] = {
    ".json": _read_json,
    ".yaml": _read_yaml,
    ".yml": _read_yaml,
    ".toml": _read_toml,
}


def find_config(directory: Path) -> Path | None:
    """First of :data:`CONFIG_NAMES` present in *directory*, if any."""
    candidates = (directory / name for name in CONFIG_NAMES)
    return next((p for p in candidates if p.is_file()), None)


def load_config(path: Path) -> dict[str, Any]:
    """Read *path* into a plain dict without validating it."""
    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise ValueError(f"unsupported config format: {path.name} (expected one of {', '.join(_READERS)})")
    return reader(path)


def load_app_config(path: Path | None) -> AppConfig:
    """Load and validate *path*; ``None`` yields the defaults."""
    if path is None:
        return AppConfig()
    return AppConfig.model_validate(load_config(path))
