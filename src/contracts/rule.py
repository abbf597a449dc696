"""Rule (action) and work-item data classes."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Rule:
    """Configured reaction to alerts whose description matches a pattern.

    ``command_template`` may reference capture groups of ``alert_pattern``
    as ``$1``, ``${1}``, ``$name`` or ``${name}``; ``$$`` is a literal dollar.
    """

    alert_pattern: str
    command_template: str
    pause_seconds: int = 0
    resolve_on_success: bool = False
    resolve_check_pattern: str | None = None


@dataclass(frozen=True, slots=True)
class WorkItem:
    """One command derived for one alert."""

    alert_id: str
    command: str
