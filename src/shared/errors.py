"""Error taxonomy for the incident automator.

Errors raised before any worker starts (config, pattern compilation,
initial fetch) are fatal for the run.  ``ExecutionError`` and
``ResolveError`` are contained inside a single rule worker.
"""

from __future__ import annotations


class AutomatorError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(AutomatorError):
    """Configuration file missing, unparsable or structurally invalid."""


class PatternError(AutomatorError):
    """A rule pattern (or resolve check) is not a valid regular expression."""


class TransportError(AutomatorError):
    """HTTP or connection failure while talking to the incident service."""


class DecodeError(AutomatorError):
    """Response body is not a valid pagination envelope."""


class ExecutionError(AutomatorError):
    """A remediation command could not be launched (or timed out)."""


class ResolveError(AutomatorError):
    """The resolve callback for one alert failed."""
