"""Canonical enumerations for the incident service contract."""

from __future__ import annotations

from enum import Enum


class IncidentStatus(str, Enum):
    TRIGGERED = "triggered"
    ACKNOWLEDGED = "acknowledged"
    RESOLVED = "resolved"

    @classmethod
    def from_str(cls, value: str) -> IncidentStatus | None:
        """Return the matching status or None for an unknown string."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None
