"""Tests for session logs and alerts."""

from __future__ import annotations

from datetime import datetime, timedelta

from heatertape.events.journal import (
    acknowledge,
    extract_segment_tag,
    generate_alerts,
    generate_logs,
    unacknowledged,
)
from heatertape.models.core import AlertSeverity, LogType


class TestLogs:
    def test_generated_from_templates(self):
        logs = generate_logs(datetime(2026, 2, 13, 15, 0))
        assert len(logs) == 12
        assert [e.id for e in logs] == list(range(1, 13))
        assert logs[0].type == LogType.INFO

    def test_descending_timestamps(self):
        now = datetime(2026, 2, 13, 15, 0)
        logs = generate_logs(now)
        assert logs[0].timestamp == now
        for newer, older in zip(logs, logs[1:]):
            assert newer.timestamp - older.timestamp == timedelta(minutes=5)

    def test_segment_tags(self):
        logs = generate_logs()
        assert logs[0].segment is None
        assert logs[1].segment == "Segment 3"
        assert logs[2].segment == "Segment 7"

    def test_extract_segment_tag(self):
        assert extract_segment_tag("Segment 11: sensor not responding") == "Segment 11"
        assert extract_segment_tag("short circuit on segment 6") is None


class TestAlerts:
    def test_generated_from_templates(self):
        alerts = generate_alerts()
        assert [a.id for a in alerts] == [1, 2, 3, 4, 5]
        assert alerts[0].severity == AlertSeverity.CRITICAL
        assert alerts[0].timestamp == datetime(2026, 2, 13, 14, 32)
        assert [a.id for a in unacknowledged(alerts)] == [1, 2]

    def test_acknowledge(self):
        alert = generate_alerts()[0]
        acked = acknowledge(alert)
        assert acked.acknowledged
        assert acked.id == alert.id
        assert acked.message == alert.message
        assert not alert.acknowledged

    def test_acknowledge_idempotent(self):
        alert = generate_alerts()[0]
        assert acknowledge(acknowledge(alert)) == acknowledge(alert)
