"""Session logs and alerts: generated from templates, alerts acknowledgeable."""

from __future__ import annotations

import re
from dataclasses import replace
from datetime import datetime, timedelta
from pathlib import Path

import yaml

from heatertape.config import LOG_INTERVAL_S
from heatertape.models.core import Alert, AlertSeverity, LogEntry, LogType

_TEMPLATES: dict[str, list[dict]] | None = None
_TEMPLATES_PATH = Path(__file__).parent / "templates.yaml"

SEGMENT_TAG_RE = re.compile(r"Segment \d+")


def _load_templates() -> dict[str, list[dict]]:
    global _TEMPLATES
    if _TEMPLATES is not None:
        return _TEMPLATES

    with open(_TEMPLATES_PATH, encoding="utf-8") as f:
        _TEMPLATES = yaml.safe_load(f)
    return _TEMPLATES


def extract_segment_tag(message: str) -> str | None:
    """Best-effort segment name mentioned in a message, e.g. 'Segment 7'."""
    match = SEGMENT_TAG_RE.search(message)
    return match.group(0) if match else None


def generate_logs(now: datetime | None = None) -> tuple[LogEntry, ...]:
    """Build the session log, newest first, one entry every LOG_INTERVAL_S."""
    now = now or datetime.now()
    entries = []
    for i, tmpl in enumerate(_load_templates()["logs"]):
        message = tmpl["message"]
        entries.append(LogEntry(
            id=i + 1,
            timestamp=now - timedelta(seconds=i * LOG_INTERVAL_S),
            type=LogType(tmpl["type"]),
            message=message,
            segment=extract_segment_tag(message),
        ))
    return tuple(entries)


def generate_alerts() -> tuple[Alert, ...]:
    return tuple(
        Alert(
            id=int(tmpl["id"]),
            timestamp=datetime.fromisoformat(tmpl["timestamp"]),
            severity=AlertSeverity(tmpl["severity"]),
            message=tmpl["message"],
            acknowledged=bool(tmpl["acknowledged"]),
        )
        for tmpl in _load_templates()["alerts"]
    )


def unacknowledged(alerts: tuple[Alert, ...]) -> list[Alert]:
    return [a for a in alerts if not a.acknowledged]


def acknowledge(alert: Alert) -> Alert:
    """Mark an alert acknowledged; already-acknowledged alerts come back unchanged."""
    if alert.acknowledged:
        return alert
    return replace(alert, acknowledged=True)
