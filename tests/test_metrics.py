"""Tests for aggregate metrics."""

from __future__ import annotations

import pytest

from heatertape.analysis.metrics import (
    active_segment_count,
    average_temperature,
    compute_metrics,
    parse_number,
    segment_table,
    tape_summary,
    total_length_meters,
    total_power_kw,
)
from heatertape.control import commands


class TestParseNumber:
    @pytest.mark.parametrize(
        "text, expected",
        [("24", 24.0), (" 12.5", 12.5), ("30 m", 30.0), ("-3", -3.0), (".5", 0.5), ("", 0.0), ("n/a", 0.0), ("nan", 0.0)],
    )
    def test_values(self, text, expected):
        assert parse_number(text) == expected


class TestMetrics:
    def test_small_system(self, small_system):
        m = compute_metrics(small_system)
        assert m.active_segment_count == 1
        assert m.average_temperature == pytest.approx(2.0)
        assert m.total_power_kw == pytest.approx(0.5)
        assert m.total_length_meters == pytest.approx(24.0)
        assert m.active_tape_count == 1
        assert m.total_sensor_count == 9
        assert m.unacknowledged_alert_count == 1

    def test_enabling_tape_counts_its_segments(self, small_system):
        system = commands.toggle_tape(small_system, 2)
        assert active_segment_count(system) == 2
        assert average_temperature(system) == pytest.approx(-1.0)
        assert total_power_kw(system) == pytest.approx(0.9)

    def test_average_unavailable_when_nothing_active(self, small_system):
        system = commands.toggle_segment(small_system, 1, 1)
        assert active_segment_count(system) == 0
        assert average_temperature(system) is None
        assert total_power_kw(system) == 0

    def test_disabled_segment_on_enabled_tape(self, small_system):
        system = commands.toggle_segment(small_system, 1, 2)
        assert active_segment_count(system) == 2
        assert average_temperature(system) == pytest.approx(6.0)

    def test_recomputed_after_mutation(self, small_system):
        before = compute_metrics(small_system)
        system = commands.update_tape_field(small_system, 2, "length", "16")
        assert total_length_meters(system) == pytest.approx(40.0)
        assert before.total_length_meters == pytest.approx(24.0)

    def test_default_system(self, system):
        m = compute_metrics(system)
        assert m.active_segment_count == 10
        assert m.active_tape_count == 2
        assert m.total_length_meters == pytest.approx(48.0)
        assert 24 <= m.total_sensor_count <= 48

    def test_summary_text(self, small_system):
        text = compute_metrics(commands.toggle_segment(small_system, 1, 1)).summary()
        assert "Average temperature: n/a" in text


class TestTables:
    def test_segment_table(self, small_system):
        df = segment_table(small_system)
        assert list(df["segment_id"]) == [1, 2, 3]
        assert list(df["active"]) == [True, False, False]
        assert list(df["sensor_count"]) == [3, 2, 4]

    def test_segment_table_electrical(self, small_system):
        df = segment_table(small_system).set_index("segment_id")
        assert df.loc[1, "power_density_w_per_m"] == pytest.approx(40.0)
        assert df.loc[1, "current_a"] == pytest.approx(80 / 220)
        assert df.loc[1, "resistance_ohm"] == pytest.approx(605.0)
        for column in ("power_density_w_per_m", "current_a", "resistance_ohm"):
            assert df.loc[[2, 3], column].isna().all()

    def test_segment_table_electrical_zero_power(self, small_system):
        system = commands.set_segment_power(small_system, 1, 1, 0)
        row = segment_table(system).set_index("segment_id").loc[1]
        assert row[["power_density_w_per_m", "current_a", "resistance_ohm"]].isna().all()

    def test_segment_table_electrical_half_power(self, small_system):
        system = commands.set_segment_power(small_system, 1, 1, 50)
        row = segment_table(system).set_index("segment_id").loc[1]
        assert row["power_density_w_per_m"] == pytest.approx(20.0)
        assert row["resistance_ohm"] == pytest.approx(1210.0)

    def test_tape_summary(self, small_system):
        df = tape_summary(small_system).set_index("tape_id")
        assert df.loc[1, "segments"] == 2
        assert df.loc[1, "active_segments"] == 1
        assert df.loc[1, "power_kw"] == pytest.approx(0.5)
        assert df.loc[1, "avg_temp_c"] == pytest.approx(2.0)
        assert df.loc[2, "active_segments"] == 0
        assert df.loc[2, "length_m"] == 0.0
