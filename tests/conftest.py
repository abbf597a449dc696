"""Shared helpers and fixtures for the incident automator tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from src.contracts.alert import Alert
from src.contracts.rule import Rule
from src.pagerduty.client import ServiceClient
from src.shared.settings import AutomatorConfig, ServiceSettings

# ── Helper: create domain objects with sensible defaults ─────────────────


def make_incident(
    *,
    id: str | None = "PINC001",
    description: str | None = "restart nginx",
    status: str = "triggered",
    **extra: Any,
) -> dict[str, Any]:
    """Raw incident object as returned by the list endpoint."""
    obj: dict[str, Any] = {"status": status, **extra}
    if id is not None:
        obj["id"] = id
    if description is not None:
        obj["trigger_summary_data"] = {"description": description}
    return obj


def make_alert(*, id: str | None = "PINC001", description: str | None = "restart nginx") -> Alert:
    return Alert(id=id, description=description)


def make_rule(
    *,
    alert_pattern: str = r"restart (\w+)",
    command_template: str = "systemctl restart $1",
    pause_seconds: int = 0,
    resolve_on_success: bool = False,
    resolve_check_pattern: str | None = None,
) -> Rule:
    return Rule(
        alert_pattern=alert_pattern,
        command_template=command_template,
        pause_seconds=pause_seconds,
        resolve_on_success=resolve_on_success,
        resolve_check_pattern=resolve_check_pattern,
    )


def make_settings(**overrides: Any) -> ServiceSettings:
    values: dict[str, Any] = {
        "org": "acme",
        "token": "s3cret",
        "timezone": "UTC",
        "timezone_short": "Z",
        "fetch_interval_sec": 60,
        "since_days": 2,
        "requester_id": "PREQ01",
    }
    values.update(overrides)
    return ServiceSettings(**values)


def make_envelope(items: list[dict[str, Any]], *, limit: int = 100, offset: int = 0, total: int | None = None) -> dict[str, Any]:
    return {
        "incidents": items,
        "limit": limit,
        "offset": offset,
        "total": len(items) if total is None else total,
    }


# ── Mock incident service ───────────────────────────────────────────────


class FakeService:
    """Serves a fixed incident list in pages of *limit* through ``httpx.MockTransport``.

    Every request is recorded in ``requests``; ``fail_offsets`` answer 500,
    ``delays`` (offset → seconds) postpone individual page responses.
    """

    def __init__(
        self,
        incidents: list[dict[str, Any]],
        *,
        limit: int = 2,
        fail_offsets: set[int] | None = None,
        delays: dict[int, float] | None = None,
        resolve_status: int = 200,
        resolve_fails: bool = False,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self.incidents = incidents
        self.limit = limit
        self.fail_offsets = fail_offsets or set()
        self.delays = delays or {}
        self.resolve_status = resolve_status
        self.resolve_fails = resolve_fails
        self.sleep = sleep
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "PUT":
            if self.resolve_fails:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(self.resolve_status, json={})

        offset = int(request.url.params.get("offset", "0"))
        if offset in self.delays and self.sleep is not None:
            self.sleep(self.delays[offset])
        if offset in self.fail_offsets:
            return httpx.Response(500, text="boom")
        page = self.incidents[offset : offset + self.limit]
        body = make_envelope(page, limit=self.limit, offset=offset, total=len(self.incidents))
        return httpx.Response(200, content=json.dumps(body).encode())

    @property
    def list_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "GET"]

    @property
    def resolve_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "PUT"]

    def client_factory(self, settings: ServiceSettings) -> ServiceClient:
        return ServiceClient(settings, transport=self.transport)


@pytest.fixture
def settings() -> ServiceSettings:
    return make_settings()


@pytest.fixture
def restart_config(settings) -> AutomatorConfig:
    """One action: restart a service, resolve when the output says 'active'."""
    return AutomatorConfig(
        service=settings,
        rules=[
            make_rule(
                alert_pattern=r"restart (\w+)",
                command_template="systemctl restart $1",
                resolve_on_success=True,
                resolve_check_pattern="active",
            )
        ],
    )
