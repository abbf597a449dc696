"""Завантаження конфігурацій (YAML / TOML)."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

import yaml

from src.shared.errors import ConfigError

log = logging.getLogger(__name__)


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Зчитує YAML файл та повертає його вміст як dict.

    Args:
        path: Шлях до файлу.

    Returns:
        Вміст файлу як словник.

    Raises:
        ConfigError: Якщо файл не знайдено або він не розбирається.
    """
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse YAML config {p}: {exc}") from exc
    if data is not None and not isinstance(data, dict):
        raise ConfigError(f"Config {p} must contain a mapping at top level")
    log.debug("Loaded config %s (%d top-level keys)", p.name, len(data or {}))
    return data or {}


def load_toml(path: str | Path) -> dict[str, Any]:
    """Зчитує TOML файл та повертає його вміст як dict."""
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config not found: {p}")
    try:
        with p.open("rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Cannot parse TOML config {p}: {exc}") from exc
    log.debug("Loaded config %s (%d top-level keys)", p.name, len(data))
    return data


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Auto-detect format by file extension and load the document."""
    p = Path(path)
    if p.suffix in (".yaml", ".yml"):
        return load_yaml(p)
    return load_toml(p)
