"""Модель оповіщення (Alert) та конверт пагінації сервісу інцидентів."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.shared.errors import DecodeError


@dataclass(slots=True)
class User:
    name: str = ""
    email: str = ""


@dataclass(slots=True)
class Acknowledger:
    at: str = ""
    name: str = ""


@dataclass(slots=True)
class Alert:
    """One incident record as returned by ``GET /api/v1/incidents``.

    Only ``id`` and ``description`` drive matching; the remaining fields
    are kept as returned for logging and later use.
    """

    id: str | None = None
    description: str | None = None  # trigger_summary_data.description
    incident_number: int | None = None
    created_on: str | None = None
    status: str | None = None
    service_name: str | None = None
    last_status_change_on: str | None = None
    resolved_by_user: User | None = None
    acknowledgers: list[Acknowledger] = field(default_factory=list)

    @classmethod
    def from_dict(cls, obj: dict[str, Any]) -> Alert:
        """Build an Alert from one raw incident object.

        Raises:
            DecodeError: if a known field has the wrong JSON type.
        """
        summary = _opt(obj, "trigger_summary_data", dict) or {}
        service = _opt(obj, "service", dict) or {}
        resolved_by = _opt(obj, "resolved_by_user", dict)
        return cls(
            id=_opt(obj, "id", str),
            description=_opt(summary, "description", str),
            incident_number=_opt(obj, "incident_number", int),
            created_on=_opt(obj, "created_on", str),
            status=_opt(obj, "status", str),
            service_name=_opt(service, "name", str),
            last_status_change_on=_opt(obj, "last_status_change_on", str),
            resolved_by_user=(
                User(
                    name=_opt(resolved_by, "name", str) or "",
                    email=_opt(resolved_by, "email", str) or "",
                )
                if resolved_by is not None
                else None
            ),
            acknowledgers=[_acknowledger(a) for a in _opt(obj, "acknowledgers", list) or []],
        )


def _opt(obj: dict[str, Any], key: str, kind: type) -> Any:
    """Return ``obj[key]`` if it is None/absent or of *kind*; else DecodeError."""
    value = obj.get(key)
    if value is None:
        return None
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise DecodeError(f"incident field '{key}' must be {kind.__name__} or null, got {value!r}")
    return value


def _acknowledger(obj: Any) -> Acknowledger:
    if not isinstance(obj, dict):
        raise DecodeError(f"acknowledger must be an object, got {obj!r}")
    target = _opt(obj, "object", dict) or {}
    return Acknowledger(at=_opt(obj, "at", str) or "", name=_opt(target, "name", str) or "")


def _non_negative_int(obj: dict[str, Any], key: str) -> int:
    value = obj.get(key)
    # bool is an int subclass; reject it explicitly
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise DecodeError(f"envelope field '{key}' must be a non-negative integer, got {value!r}")
    return value


@dataclass(slots=True)
class AlertPage:
    """Pagination envelope: ``{incidents, limit, offset, total}``."""

    items: list[Alert]
    limit: int
    offset: int
    total: int

    @classmethod
    def from_dict(cls, obj: Any) -> AlertPage:
        if not isinstance(obj, dict):
            raise DecodeError(f"envelope must be a JSON object, got {type(obj).__name__}")
        raw_items = obj.get("incidents")
        if not isinstance(raw_items, list) or not all(isinstance(i, dict) for i in raw_items):
            raise DecodeError("envelope field 'incidents' must be a list of objects")
        return cls(
            items=[Alert.from_dict(i) for i in raw_items],
            limit=_non_negative_int(obj, "limit"),
            offset=_non_negative_int(obj, "offset"),
            total=_non_negative_int(obj, "total"),
        )
