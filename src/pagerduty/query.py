"""Query-string construction for the incidents list endpoint."""

from __future__ import annotations

from datetime import date
from urllib.parse import quote

from src.contracts.enums import IncidentStatus

INCIDENTS_PATH = "/api/v1/incidents"


def _enc(value: str) -> str:
    # ':' -> %3A and '+' -> %2B; '/' (time zone names) and ',' (field lists) stay
    return quote(value, safe="/,")


def build_incidents_query(
    timezone: str,
    timezone_short: str,
    offset: int,
    since: date | None = None,
    until: date | None = None,
    status: IncidentStatus | None = None,
    fields: list[str] | None = None,
) -> str:
    """Return the query string (without ``?``) for one incidents page.

    Parameter order is fixed: time_zone, offset, since, until, status, fields.
    """
    params = [f"time_zone={_enc(timezone)}", f"offset={offset}"]

    if since is not None:
        params.append(f"since={_enc(since.strftime('%Y-%m-%d') + 'T00:00:00' + timezone_short)}")

    if until is not None:
        params.append(f"until={_enc(until.strftime('%Y-%m-%d') + 'T23:59:59' + timezone_short)}")

    if status is not None:
        params.append(f"status={status.value}")

    if fields:
        params.append(f"fields={_enc(','.join(fields))}")

    return "&".join(params)


def incidents_url(api_root: str, query: str) -> str:
    return f"{api_root}{INCIDENTS_PATH}?{query}"


def resolve_url(api_root: str, alert_id: str, requester_id: str) -> str:
    return (
        f"{api_root}{INCIDENTS_PATH}/{quote(alert_id, safe='')}/resolve"
        f"?requester_id={quote(requester_id, safe='')}"
    )
