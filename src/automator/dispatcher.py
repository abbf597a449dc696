"""Dispatch Engine — one worker thread per action, sequential within it.

Worker state machine over its ordered ``WorkItem`` list
────────────────────────────────────────────────────────
  Pause         — before every item except the first (``pause_seconds``)
  Execute       — run the command; a launch failure abandons the queue
  MaybeResolve  — only if ``resolve_on_success`` and the optional
                  ``resolve_check`` matches stdout; a failed resolve is
                  logged and the queue continues

Workers share nothing: each owns its slice of the plan and opens its own
service connection per resolve call.  ``dispatch`` returns only after
every worker has finished.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from src.automator.executor import CommandResult, run_command
from src.automator.resolver import ActionPlan
from src.automator.rules import CompiledRules
from src.contracts.rule import Rule, WorkItem
from src.shared.errors import ExecutionError, ResolveError

log = logging.getLogger(__name__)

CommandRunner = Callable[[str, float | None], CommandResult]
ResolveCallback = Callable[[str], None]


@dataclass(slots=True)
class WorkerReport:
    """Outcome of one action worker."""

    rule_index: int
    queued: int
    executed: int = 0
    resolved: int = 0
    resolve_failures: int = 0
    aborted: bool = False


class RuleWorker:
    """Executes the work queue of a single action."""

    def __init__(
        self,
        rule_index: int,
        rule: Rule,
        items: list[WorkItem],
        compiled: CompiledRules,
        resolve_alert: ResolveCallback,
        runner: CommandRunner = run_command,
        sleep: Callable[[float], None] = time.sleep,
        command_timeout: float | None = None,
    ) -> None:
        self.rule_index = rule_index
        self.rule = rule
        self.items = items
        self.compiled = compiled
        self.resolve_alert = resolve_alert
        self.runner = runner
        self.sleep = sleep
        self.command_timeout = command_timeout

    def run(self) -> WorkerReport:
        report = WorkerReport(rule_index=self.rule_index, queued=len(self.items))
        try:
            self._run_queue(report)
        except Exception:
            log.exception("Action #%d worker crashed", self.rule_index)
            report.aborted = True
        return report

    def _run_queue(self, report: WorkerReport) -> None:
        for position, item in enumerate(self.items):
            if position > 0 and self.rule.pause_seconds > 0:
                self.sleep(self.rule.pause_seconds)

            try:
                result = self.runner(item.command, self.command_timeout)
            except ExecutionError as exc:
                log.error(
                    "Action #%d: %s — abandoning %d remaining command(s)",
                    self.rule_index, exc, len(self.items) - position - 1,
                )
                report.aborted = True
                return

            report.executed += 1
            log.info("stdout: %s", result.stdout)
            log.info("stderr: %s", result.stderr)

            self._maybe_resolve(item, result.stdout, report)

    def _maybe_resolve(self, item: WorkItem, stdout: str, report: WorkerReport) -> None:
        if not self.rule.resolve_on_success:
            return
        if not self.compiled.should_resolve(self.rule_index, stdout):
            log.info("Incident %s: resolve check did not match output — left open", item.alert_id)
            return
        try:
            self.resolve_alert(item.alert_id)
        except ResolveError as exc:
            log.error("Action #%d: %s", self.rule_index, exc)
            report.resolve_failures += 1
            return
        report.resolved += 1


def dispatch(
    plan: ActionPlan,
    rules: list[Rule],
    compiled: CompiledRules,
    resolve_alert: ResolveCallback,
    runner: CommandRunner = run_command,
    sleep: Callable[[float], None] = time.sleep,
    command_timeout: float | None = None,
) -> list[WorkerReport]:
    """Run every action's queue concurrently and wait for all of them.

    Returns one report per action in ascending action index.
    """
    workers = [
        RuleWorker(index, rules[index], items, compiled, resolve_alert, runner, sleep, command_timeout)
        for index, items in plan.items()
        if items and index < len(rules)
    ]
    if not workers:
        log.info("Nothing to dispatch")
        return []

    log.info("Dispatching %d action worker(s)", len(workers))
    with ThreadPoolExecutor(max_workers=len(workers), thread_name_prefix="action") as pool:
        futures = [pool.submit(w.run) for w in workers]
        reports = [f.result() for f in futures]

    for r in reports:
        log.info(
            "Action #%d: %d/%d executed, %d resolved, %d resolve failure(s)%s",
            r.rule_index, r.executed, r.queued, r.resolved, r.resolve_failures,
            " (aborted)" if r.aborted else "",
        )
    return reports
