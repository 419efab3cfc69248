"""Tests for the one-shot command line entry point."""

import json

from range_core.__main__ import main


class TestCli:
    def test_manual_price_prints_report(self, capsys):
        assert main(["--price", "60000", "--seed", "7"]) == 0

        report = json.loads(capsys.readouterr().out)
        assert report["success"] is True
        assert report["currentPrice"] == 60000.0
        assert report["market"]["source"] == "manual"
        assert len(report["rangePredictions"]) == 6

    def test_horizon_override(self, capsys):
        assert main(["--price", "60000", "--seed", "7", "--horizons", "2,8"]) == 0

        report = json.loads(capsys.readouterr().out)
        assert [p["horizonHours"] for p in report["rangePredictions"]] == [2, 8]

    def test_seed_makes_runs_repeatable(self, capsys):
        main(["--price", "60000", "--seed", "3", "--horizons", "4"])
        first = json.loads(capsys.readouterr().out)
        main(["--price", "60000", "--seed", "3", "--horizons", "4"])
        second = json.loads(capsys.readouterr().out)
        assert first["rangePredictions"] == second["rangePredictions"]

    def test_bad_horizons_exit_code(self, capsys):
        assert main(["--price", "60000", "--horizons", "x"]) == 1
        assert capsys.readouterr().out == ""

    def test_config_file(self, tmp_path, capsys):
        path = tmp_path / "config.yaml"
        path.write_text("engine:\n  horizons: [3]\n  candle_count: 60\n")
        assert main(["--config", str(path), "--price", "100", "--seed", "1"]) == 0

        report = json.loads(capsys.readouterr().out)
        assert [p["timeframe"] for p in report["rangePredictions"]] == ["3h"]
