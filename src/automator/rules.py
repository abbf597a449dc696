"""Rule Compiler — configured actions → anchored matcher + substitutions.

Every alert pattern is trimmed and matched with ``fullmatch``, so it must
cover the *whole* trimmed description; ``"foo"`` never matches a ``foo bar``
rule.  Command templates use ``$``-style back-references:

  ``$1`` / ``${1}``        numbered group
  ``$name`` / ``${name}``  named group
  ``$$``                   literal dollar

An unknown or non-participating group expands to an empty string.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from src.contracts.rule import Rule
from src.shared.errors import PatternError

log = logging.getLogger(__name__)

_TEMPLATE_REF = re.compile(r"\$(?:\$|\{(?P<braced>[^}]*)\}|(?P<bare>[0-9A-Za-z_]+))")


def expand_template(template: str, match: re.Match[str]) -> str:
    """Expand ``$``-references in *template* against *match*."""

    def _ref(m: re.Match[str]) -> str:
        name = m.group("braced")
        if name is None:
            name = m.group("bare")
        if name is None:
            return "$"
        try:
            value = match.group(int(name) if name.isdigit() else name)
        except IndexError:
            return ""
        return value or ""

    return _TEMPLATE_REF.sub(_ref, template)


@dataclass(slots=True)
class CompiledRules:
    """Multi-pattern matcher plus per-rule substitution and resolve checks."""

    patterns: list[re.Pattern[str]]
    templates: list[str]
    resolve_checks: list[re.Pattern[str] | None]

    def __len__(self) -> int:
        return len(self.patterns)

    def matches(self, text: str) -> list[int]:
        """Return ascending indices of every rule matching the whole *text*."""
        return [i for i, rx in enumerate(self.patterns) if rx.fullmatch(text)]

    def substitute(self, index: int, text: str) -> str | None:
        """Derive the command of rule *index* for *text* (None if it does not match)."""
        if index >= len(self.patterns) or index >= len(self.templates):
            return None
        m = self.patterns[index].fullmatch(text)
        if m is None:
            return None
        return expand_template(self.templates[index], m)

    def should_resolve(self, index: int, stdout: str) -> bool:
        """Resolve-check test; a rule without a check always passes."""
        check = self.resolve_checks[index] if index < len(self.resolve_checks) else None
        return check is None or check.search(stdout) is not None


def _compile(pattern: str, index: int, what: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise PatternError(f"action #{index}: invalid {what} {pattern!r}: {exc}") from exc


def compile_rules(rules: list[Rule]) -> CompiledRules:
    """Compile every rule; raise ``PatternError`` on the first invalid regex."""
    compiled = CompiledRules(
        patterns=[_compile(r.alert_pattern.strip(), i, "alert pattern") for i, r in enumerate(rules)],
        templates=[r.command_template for r in rules],
        resolve_checks=[
            _compile(r.resolve_check_pattern, i, "resolve check")
            if r.resolve_check_pattern is not None
            else None
            for i, r in enumerate(rules)
        ],
    )
    log.debug("Compiled %d rule patterns", len(compiled))
    return compiled
