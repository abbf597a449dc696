"""CLI entry-point for the incident automator.

Usage examples
--------------
# One synchronisation with the default config.toml:
python -m src.automator

# Custom config, verbose logging:
python -m src.automator --config config/automator.yaml --debug

# Re-run every fetch_interval_sec seconds until Ctrl+C:
python -m src.automator --watch
"""

from __future__ import annotations

import argparse
import logging

from src.automator.pipeline import run_once, watch
from src.shared.errors import AutomatorError
from src.shared.logger import setup_logging
from src.shared.settings import load_config

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="incident-automator",
        description="Match open incidents against configured actions and run remediation commands",
    )
    p.add_argument(
        "-c",
        "--config",
        default="config.toml",
        help="Config file (TOML or YAML, detected by extension). Default: config.toml",
    )
    p.add_argument(
        "-d",
        "--debug",
        action="store_true",
        default=False,
        help="Shortcut for --log-level DEBUG (also logs raw service responses).",
    )
    p.add_argument(
        "--watch",
        action="store_true",
        default=False,
        help="Repeat the synchronisation every fetch_interval_sec seconds.",
    )
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level. Default: INFO",
    )
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.debug else args.log_level)

    try:
        cfg = load_config(args.config)
        if args.watch:
            watch(cfg)
        else:
            run_once(cfg)
    except AutomatorError as exc:
        log.error("%s: %s", type(exc).__name__, exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
