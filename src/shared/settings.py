"""Typed run configuration built from the parsed config document.

Expected layout (TOML shown, YAML is equivalent)::

    [pagerduty]
    org = "acme"
    token = "..."
    timezone = "Europe/Kyiv"
    timezone_short = "+03"
    fetch_interval_sec = 60
    since_days = 2
    requester_id = "PABC123"

    [[actions]]
    alert = "restart (\\w+)"
    cmd = "systemctl restart $1"
    pause_sec = 5
    resolve = true
    resolve_check = "active"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from src.contracts.rule import Rule
from src.shared.config_loader import load_config_file
from src.shared.errors import ConfigError

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ServiceSettings:
    """Connection and query settings for the incident service."""

    org: str
    token: str
    timezone: str
    timezone_short: str
    fetch_interval_sec: int
    since_days: int
    requester_id: str
    base_url: str | None = None
    request_timeout_sec: float | None = 30.0
    max_parallel_pages: int = 8
    command_timeout_sec: float | None = None

    @property
    def api_root(self) -> str:
        return (self.base_url or f"https://{self.org}.pagerduty.com").rstrip("/")


@dataclass(slots=True)
class AutomatorConfig:
    service: ServiceSettings
    rules: list[Rule] = field(default_factory=list)


# ── Field helpers ────────────────────────────────────────────────────────────


def _require(section: dict[str, Any], key: str, kind: type | tuple[type, ...], where: str) -> Any:
    if key not in section:
        raise ConfigError(f"{where}: missing required key '{key}'")
    return _check(section[key], key, kind, where)


def _optional(section: dict[str, Any], key: str, kind: type | tuple[type, ...], where: str, default: Any) -> Any:
    value = section.get(key)
    if value is None:
        return default
    return _check(value, key, kind, where)


def _check(value: Any, key: str, kind: type | tuple[type, ...], where: str) -> Any:
    kinds = kind if isinstance(kind, tuple) else (kind,)
    if isinstance(value, bool) and bool not in kinds:
        raise ConfigError(f"{where}: '{key}' must be {_kind_name(kinds)}, got {value!r}")
    if not isinstance(value, kinds):
        raise ConfigError(f"{where}: '{key}' must be {_kind_name(kinds)}, got {value!r}")
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value < 0:
        raise ConfigError(f"{where}: '{key}' must be non-negative, got {value!r}")
    return value


def _kind_name(kinds: tuple[type, ...]) -> str:
    return " or ".join(k.__name__ for k in kinds)


# ── Public API ───────────────────────────────────────────────────────────────


def parse_service(section: Any) -> ServiceSettings:
    where = "[pagerduty]"
    if not isinstance(section, dict):
        raise ConfigError(f"{where}: section is missing or not a table")
    max_pages = _optional(section, "max_parallel_pages", int, where, 8)
    if max_pages < 1:
        raise ConfigError(f"{where}: 'max_parallel_pages' must be at least 1")
    return ServiceSettings(
        org=_require(section, "org", str, where),
        token=_require(section, "token", str, where),
        timezone=_require(section, "timezone", str, where),
        timezone_short=_require(section, "timezone_short", str, where),
        fetch_interval_sec=_require(section, "fetch_interval_sec", int, where),
        since_days=_require(section, "since_days", int, where),
        requester_id=_require(section, "requester_id", str, where),
        base_url=_optional(section, "base_url", str, where, None),
        request_timeout_sec=_optional(section, "request_timeout_sec", (int, float), where, 30.0),
        max_parallel_pages=max_pages,
        command_timeout_sec=_optional(section, "command_timeout_sec", (int, float), where, None),
    )


def parse_rule(entry: Any, index: int) -> Rule:
    where = f"[[actions]] #{index}"
    if not isinstance(entry, dict):
        raise ConfigError(f"{where}: entry must be a table")
    return Rule(
        alert_pattern=_require(entry, "alert", str, where),
        command_template=_require(entry, "cmd", str, where),
        pause_seconds=_optional(entry, "pause_sec", int, where, 0),
        resolve_on_success=_optional(entry, "resolve", bool, where, False),
        resolve_check_pattern=_optional(entry, "resolve_check", str, where, None),
    )


def parse_config(data: dict[str, Any]) -> AutomatorConfig:
    """Validate a parsed config document and build ``AutomatorConfig``.

    Raises:
        ConfigError: on any missing key or wrongly typed value.
    """
    actions = data.get("actions", [])
    if not isinstance(actions, list):
        raise ConfigError("'actions' must be a list of tables")
    cfg = AutomatorConfig(
        service=parse_service(data.get("pagerduty")),
        rules=[parse_rule(a, i) for i, a in enumerate(actions)],
    )
    if not cfg.rules:
        log.warning("No actions configured — nothing will be dispatched")
    return cfg


def load_config(path: str | Path) -> AutomatorConfig:
    """Load and validate the config file at *path*."""
    cfg = parse_config(load_config_file(path))
    log.info("Loaded %d actions for org '%s' from %s", len(cfg.rules), cfg.service.org, path)
    return cfg
