"""Action Resolver — fetched alerts × compiled rules → per-rule work queues."""

from __future__ import annotations

import logging

from src.automator.rules import CompiledRules
from src.contracts.alert import Alert
from src.contracts.rule import Rule, WorkItem

log = logging.getLogger(__name__)

# rule index → ordered work items; iteration follows ascending rule index
ActionPlan = dict[int, list[WorkItem]]


def resolve_actions(
    alerts: list[Alert],
    compiled: CompiledRules,
    rules: list[Rule],
) -> ActionPlan:
    """Map every matching alert to a derived command under each matching rule.

    Alerts without an id or a description are dropped.  An alert matching
    several rules yields one ``WorkItem`` per rule; one matching none is
    skipped.  Within a rule, items keep the order of *alerts*.
    """
    by_rule: dict[int, list[WorkItem]] = {}
    skipped = 0

    for alert in alerts:
        if alert.id is None or alert.description is None:
            skipped += 1
            continue

        desc = alert.description.strip()
        log.debug("desc: %s", desc)

        matched = compiled.matches(desc)
        if not matched:
            log.debug("Incident %s matches no action", alert.id)
            continue

        for index in matched:
            if index >= len(rules):
                continue
            command = compiled.substitute(index, desc)
            if command is None:
                continue
            log.debug("Incident %s → action #%d: %s", alert.id, index, command)
            by_rule.setdefault(index, []).append(WorkItem(alert_id=alert.id, command=command))

    if skipped:
        log.info("Dropped %d incidents without id or description", skipped)

    plan: ActionPlan = {i: by_rule[i] for i in sorted(by_rule)}
    log.info(
        "Resolved %d commands across %d actions from %d incidents",
        sum(len(v) for v in plan.values()), len(plan), len(alerts),
    )
    return plan
