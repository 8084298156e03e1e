"""Tests for the command-line interface."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from heatertape.cli import cli


@pytest.fixture
def invoke(tmp_path):
    runner = CliRunner()
    store = tmp_path / "state.json"

    def _invoke(*args, backend="json"):
        return runner.invoke(cli, ["--store", str(store), "--backend", backend, "--seed", "1", *args])

    return _invoke


class TestCli:
    def test_status(self, invoke):
        result = invoke("status")
        assert result.exit_code == 0, result.output
        assert "Active segments: 10" in result.output
        assert "Total length: 48 m" in result.output

    def test_add_tape(self, invoke):
        result = invoke("add-tape")
        assert result.exit_code == 0, result.output
        assert "Tape 3: segments 13, 14, 15, 16" in result.output
        assert "Active tapes: 3" in invoke("status").output

    def test_remove_last_tape_rejected(self, invoke):
        assert "OK" in invoke("remove-tape", "1").output
        result = invoke("remove-tape", "2")
        assert result.exit_code == 0
        assert "Rejected" in result.output

    def test_segment_commands(self, invoke):
        assert "OK" in invoke("toggle-segment", "1", "6").output
        assert "OK" in invoke("power", "1", "6", "120").output
        assert "OK" in invoke("target", "1", "6", "12").output
        output = invoke("tapes", "--tape", "1").output
        assert "Segment 6" in output
        assert "Segment 7" not in output

    def test_bulk(self, invoke):
        invoke("disable-all", "1")
        invoke("disable-all", "2")
        assert "Average temperature: n/a" in invoke("status").output
        invoke("enable-all", "2")
        assert "Active segments: 6" in invoke("status").output

    def test_set_tape_field(self, invoke):
        assert "OK" in invoke("set-tape", "1", "length", "100").output
        assert "Total length: 124 m" in invoke("status").output

    def test_set_tape_unknown_field(self, invoke):
        result = invoke("set-tape", "1", "enabled", "no")
        assert result.exit_code != 0

    def test_alerts_and_ack(self, invoke):
        assert "[1]" in invoke("alerts", "--pending").output
        assert "OK" in invoke("ack", "1").output
        assert "[1]" not in invoke("alerts", "--pending").output
        assert "Rejected" in invoke("ack", "99").output

    def test_settings(self, invoke):
        result = invoke("settings", "--poll", "5", "--manual")
        assert "Poll interval: 5 s" in result.output
        assert "Auto mode: False" in result.output
        assert "Poll interval: 5 s" in invoke("settings").output

    def test_logs(self, invoke):
        output = invoke("logs").output
        assert "(Segment 3)" in output

    def test_simulate(self, invoke):
        result = invoke("simulate", "--ticks", "3")
        assert result.exit_code == 0, result.output
        assert "Active segments" in result.output

    def test_duckdb_backend(self, tmp_path):
        runner = CliRunner()
        store = tmp_path / "state.duckdb"
        args = ["--store", str(store), "--backend", "duckdb"]
        assert runner.invoke(cli, [*args, "add-tape"]).exit_code == 0
        result = runner.invoke(cli, [*args, "status"])
        assert result.exit_code == 0, result.output
        assert "Active tapes: 3" in result.output
