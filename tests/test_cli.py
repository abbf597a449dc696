"""Tests for src.automator.cli — argument parsing and exit codes."""

from __future__ import annotations

import pytest

from src.automator import cli


class TestBuildParser:
    def test_defaults(self):
        args = cli.build_parser().parse_args([])
        assert args.config == "config.toml"
        assert args.debug is False
        assert args.watch is False
        assert args.log_level == "INFO"

    def test_flags(self):
        args = cli.build_parser().parse_args(["--config", "x.yaml", "--debug", "--watch"])
        assert args.config == "x.yaml"
        assert args.debug is True
        assert args.watch is True

    def test_help_exits_zero(self, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.build_parser().parse_args(["--help"])
        assert exc.value.code == 0
        assert "--config" in capsys.readouterr().out


class TestMain:
    def test_missing_config_exits_one(self, tmp_path):
        assert cli.main(["--config", str(tmp_path / "absent.toml")]) == 1

    def test_invalid_pattern_exits_one(self, tmp_path):
        p = tmp_path / "config.yaml"
        p.write_text(
            "pagerduty:\n"
            "  org: acme\n  token: t\n  timezone: UTC\n  timezone_short: Z\n"
            "  fetch_interval_sec: 60\n  since_days: 1\n  requester_id: P1\n"
            "actions:\n  - alert: 'restart ('\n    cmd: echo\n",
            encoding="utf-8",
        )
        assert cli.main(["--config", str(p)]) == 1

    def test_success_exits_zero(self, tmp_path, monkeypatch):
        p = tmp_path / "config.yaml"
        p.write_text(
            "pagerduty:\n"
            "  org: acme\n  token: t\n  timezone: UTC\n  timezone_short: Z\n"
            "  fetch_interval_sec: 60\n  since_days: 1\n  requester_id: P1\n",
            encoding="utf-8",
        )
        seen = []
        monkeypatch.setattr(cli, "run_once", lambda cfg: seen.append(cfg))
        assert cli.main(["--config", str(p)]) == 0
        assert seen[0].service.org == "acme"
