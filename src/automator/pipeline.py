"""Pipeline — orchestrator: compile rules -> fetch -> resolve actions -> dispatch.

``run_once`` performs a single synchronisation; ``watch`` repeats it every
``fetch_interval_sec`` until interrupted.  Nothing is carried between
cycles: each one re-derives its work from the incident service.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, timedelta

from src.automator.dispatcher import CommandRunner, WorkerReport, dispatch
from src.automator.executor import run_command
from src.automator.resolver import ActionPlan, resolve_actions
from src.automator.rules import compile_rules
from src.contracts.enums import IncidentStatus
from src.pagerduty.client import ServiceClient
from src.shared.errors import ResolveError, TransportError
from src.shared.settings import AutomatorConfig, ServiceSettings

log = logging.getLogger(__name__)

FETCH_FIELDS = ["id", "trigger_summary_data"]

ClientFactory = Callable[[ServiceSettings], ServiceClient]


@dataclass(slots=True)
class RunResult:
    alerts_fetched: int = 0
    plan: ActionPlan = field(default_factory=dict)
    reports: list[WorkerReport] = field(default_factory=list)


def make_resolver(settings: ServiceSettings, client_factory: ClientFactory = ServiceClient) -> Callable[[str], None]:
    """Build the resolve callback; every call opens its own client."""

    def resolve_alert(alert_id: str) -> None:
        try:
            with client_factory(settings) as client:
                client.resolve(alert_id, settings.requester_id)
        except TransportError as exc:
            raise ResolveError(f"resolve of incident {alert_id} failed: {exc}") from exc

    return resolve_alert


def run_once(
    config: AutomatorConfig,
    client_factory: ClientFactory = ServiceClient,
    runner: CommandRunner = run_command,
    sleep: Callable[[float], None] = time.sleep,
    today: date | None = None,
) -> RunResult:
    """Execute one full synchronisation and wait for every worker.

    Raises:
        PatternError: invalid rule pattern (before any request is made).
        TransportError, DecodeError: the incident fetch failed.
    """
    compiled = compile_rules(config.rules)

    settings = config.service
    since = (today or date.today()) - timedelta(days=settings.since_days)

    with client_factory(settings) as client:
        alerts = client.fetch_open_alerts(since, None, IncidentStatus.TRIGGERED, FETCH_FIELDS)

    plan = resolve_actions(alerts, compiled, config.rules)
    reports = dispatch(
        plan,
        config.rules,
        compiled,
        make_resolver(settings, client_factory),
        runner=runner,
        sleep=sleep,
        command_timeout=settings.command_timeout_sec,
    )
    return RunResult(alerts_fetched=len(alerts), plan=plan, reports=reports)


def watch(
    config: AutomatorConfig,
    client_factory: ClientFactory = ServiceClient,
    runner: CommandRunner = run_command,
    sleep: Callable[[float], None] = time.sleep,
    max_cycles: int | None = None,
) -> int:
    """Repeat ``run_once`` every ``fetch_interval_sec`` seconds.

    Blocks until Ctrl+C (or *max_cycles*).  Fatal errors propagate; there is
    no automatic retry.  Returns the number of completed cycles.
    """
    interval = config.service.fetch_interval_sec
    cycles = 0
    log.info("Watch mode: interval %ds, %d actions", interval, len(config.rules))
    try:
        while max_cycles is None or cycles < max_cycles:
            if cycles:
                sleep(interval)
            result = run_once(config, client_factory=client_factory, runner=runner, sleep=sleep)
            cycles += 1
            log.info(
                "Watch cycle %d: %d incidents, %d actions dispatched",
                cycles, result.alerts_fetched, len(result.reports),
            )
    except KeyboardInterrupt:
        log.info("Watch stopped after %d cycle(s)", cycles)
    return cycles
