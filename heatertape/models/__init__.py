"""Data models for tapes, segments, sensors, alerts and logs."""

from heatertape.models.core import (
    Alert,
    AlertSeverity,
    LogEntry,
    LogType,
    Segment,
    SegmentStatus,
    Sensor,
    SensorStatus,
    Settings,
    System,
    Tape,
)

__all__ = [
    "Alert",
    "AlertSeverity",
    "LogEntry",
    "LogType",
    "Segment",
    "SegmentStatus",
    "Sensor",
    "SensorStatus",
    "Settings",
    "System",
    "Tape",
]
