"""Command executor: run one whitespace-split command, capture its output."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass

from src.shared.errors import ExecutionError

log = logging.getLogger(__name__)


@dataclass(slots=True)
class CommandResult:
    stdout: str
    stderr: str
    returncode: int | None = None


def run_command(command: str, timeout: float | None = None) -> CommandResult:
    """Run *command* (split on whitespace, no shell) and capture text output.

    An empty command does nothing.  The exit code is reported but callers
    only inspect stdout.

    Raises:
        ExecutionError: if the process cannot be started or exceeds *timeout*.
    """
    log.info("=> %s", command)

    args = command.split()
    if not args:
        return CommandResult(stdout="", stderr="")

    try:
        proc = subprocess.run(
            args,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except OSError as exc:
        raise ExecutionError(f"cannot launch {args[0]!r}: {exc}") from exc
    except subprocess.TimeoutExpired as exc:
        raise ExecutionError(f"{args[0]!r} timed out after {timeout}s") from exc

    return CommandResult(stdout=proc.stdout, stderr=proc.stderr, returncode=proc.returncode)
