"""
Unit tests for the command line entry point.

Covers:
- argument defaults
- a seeded multi-cycle run with CSV export
- failure exit code for invalid overrides
"""

import pandas as pd

from ev_charging.cli import main, parse_args


class TestParseArgs:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("EV_CHARGING_LOG_MODE", raising=False)
        monkeypatch.delenv("EV_CHARGING_OVERRIDES", raising=False)
        args = parse_args([])
        assert args.cycles == 1
        assert args.seed is None
        assert args.log_mode == "DEVELOPMENT"
        assert args.config is None


class TestMain:
    def test_seeded_run_exports_plans(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        output = tmp_path / "out" / "plans.csv"
        exit_code = main([
            "--cycles", "3", "--seed", "7", "--fleet-size", "6", "--stations", "3",
            "--log-mode", "SILENT", "--export-csv", str(output),
        ])
        assert exit_code == 0
        frame = pd.read_csv(output)
        assert len(frame) <= 3
        assert "estimated_cost" in frame.columns

    def test_invalid_overrides_fail(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        overrides = tmp_path / "bad.yaml"
        overrides.write_text("rl:\n  epsilon: 5\n", encoding="utf-8")
        assert main(["--config", str(overrides), "--log-mode", "SILENT"]) == 1
