"""Core data models for the heater tape control panel."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from heatertape.config import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_TAPE_LENGTH,
    DEFAULT_TAPE_WIDTH,
    DEFAULT_TARGET_TEMP_C,
    DEFAULT_THRESHOLD_TEMP,
)


class SensorStatus(Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    ERROR = "error"


class SegmentStatus(Enum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"
    OFF = "off"


class LogType(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


class AlertSeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class Sensor:
    """A single temperature-reporting point bound to one segment."""

    id: str  # e.g. "7-2"
    serial_number: str  # e.g. "28-0a1b..."
    temperature_c: float
    status: SensorStatus = SensorStatus.ONLINE
    last_update: datetime | None = None


@dataclass(frozen=True)
class Segment:
    """An independently powered section of a tape."""

    id: int
    name: str  # e.g. "Segment 7"
    enabled: bool
    power: int  # percent, 0..100
    temperature_c: float
    target_temp_c: int = DEFAULT_TARGET_TEMP_C
    status: SegmentStatus = SegmentStatus.NORMAL
    legacy_sensor_id: str = ""  # e.g. "DS18B20-007"
    sensors: tuple[Sensor, ...] = ()

    @property
    def sensor_count(self) -> int:
        return len(self.sensors)


@dataclass(frozen=True)
class Tape:
    """A physical de-icing cable run."""

    id: int
    name: str
    segments: tuple[Segment, ...]
    coordinates: str = ""  # free-form "lat, lon"
    contract_number: str = ""
    length: str = DEFAULT_TAPE_LENGTH  # metres, numeric text
    width: str = DEFAULT_TAPE_WIDTH  # millimetres, numeric text
    enabled: bool = True

    def get_segment(self, segment_id: int) -> Segment | None:
        for s in self.segments:
            if s.id == segment_id:
                return s
        return None

    def is_effective(self, segment: Segment) -> bool:
        """A segment is active only if both it and this tape are enabled."""
        return self.enabled and segment.enabled


@dataclass(frozen=True)
class LogEntry:
    id: int
    timestamp: datetime
    type: LogType
    message: str
    segment: str | None = None  # name tag, not an ownership link


@dataclass(frozen=True)
class Alert:
    id: int
    timestamp: datetime
    severity: AlertSeverity
    message: str
    acknowledged: bool = False


@dataclass(frozen=True)
class Settings:
    """Panel-wide scalar settings."""

    system_on: bool = True
    auto_mode: bool = True
    threshold_temp: str = DEFAULT_THRESHOLD_TEMP  # numeric text
    alert_sound: bool = True
    poll_interval: str = DEFAULT_POLL_INTERVAL  # seconds, one of POLL_INTERVALS


@dataclass(frozen=True)
class System:
    """The whole persisted state: tapes, alerts and settings."""

    tapes: tuple[Tape, ...]
    alerts: tuple[Alert, ...] = ()
    settings: Settings = field(default_factory=Settings)
    last_tape_id: int = 0  # highest tape id ever allocated
    last_segment_id: int = 0  # highest segment id ever allocated

    def get_tape(self, tape_id: int) -> Tape | None:
        for t in self.tapes:
            if t.id == tape_id:
                return t
        return None

    def get_alert(self, alert_id: int) -> Alert | None:
        for a in self.alerts:
            if a.id == alert_id:
                return a
        return None

    def iter_segments(self):
        """Yield ``(tape, segment)`` pairs across all tapes."""
        for tape in self.tapes:
            for segment in tape.segments:
                yield tape, segment

    @property
    def segment_ids(self) -> list[int]:
        return [s.id for _, s in self.iter_segments()]
