"""Conversion between System values and the persisted JSON record."""

from __future__ import annotations

from datetime import datetime

from heatertape.config import DEFAULT_TARGET_TEMP_C, SCHEMA_VERSION
from heatertape.models.core import (
    Alert,
    AlertSeverity,
    Segment,
    SegmentStatus,
    Sensor,
    SensorStatus,
    Settings,
    System,
    Tape,
)


def _dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def sensor_to_dict(sensor: Sensor) -> dict:
    return {
        "id": sensor.id,
        "serialNumber": sensor.serial_number,
        "temperature": sensor.temperature_c,
        "status": sensor.status.value,
        "lastUpdate": sensor.last_update.isoformat() if sensor.last_update else None,
    }


def segment_to_dict(segment: Segment) -> dict:
    return {
        "id": segment.id,
        "name": segment.name,
        "enabled": segment.enabled,
        "power": segment.power,
        "temperature": segment.temperature_c,
        "targetTemp": segment.target_temp_c,
        "status": segment.status.value,
        "sensorId": segment.legacy_sensor_id,
        "sensors": [sensor_to_dict(s) for s in segment.sensors],
    }


def tape_to_dict(tape: Tape) -> dict:
    return {
        "id": tape.id,
        "name": tape.name,
        "coordinates": tape.coordinates,
        "contractNumber": tape.contract_number,
        "length": tape.length,
        "width": tape.width,
        "enabled": tape.enabled,
        "segments": [segment_to_dict(s) for s in tape.segments],
    }


def alert_to_dict(alert: Alert) -> dict:
    return {
        "id": alert.id,
        "timestamp": alert.timestamp.isoformat(),
        "severity": alert.severity.value,
        "message": alert.message,
        "acknowledged": alert.acknowledged,
    }


def tapes_record(system: System) -> dict:
    """Field group written after every tape/segment mutation."""
    return {
        "schemaVersion": SCHEMA_VERSION,
        "tapes": [tape_to_dict(t) for t in system.tapes],
        "lastTapeId": system.last_tape_id,
        "lastSegmentId": system.last_segment_id,
    }


def alerts_record(system: System) -> dict:
    return {"alerts": [alert_to_dict(a) for a in system.alerts]}


def settings_record(settings: Settings) -> dict:
    return {
        "systemOn": settings.system_on,
        "autoMode": settings.auto_mode,
        "thresholdTemp": settings.threshold_temp,
        "alertSound": "true" if settings.alert_sound else "false",
        "pollInterval": settings.poll_interval,
    }


def system_to_dict(system: System) -> dict:
    return {**tapes_record(system), **alerts_record(system), **settings_record(system.settings)}


def sensor_from_dict(data: dict) -> Sensor:
    return Sensor(
        id=str(data["id"]),
        serial_number=data["serialNumber"],
        temperature_c=float(data["temperature"]),
        status=SensorStatus(data.get("status", "online")),
        last_update=_dt(data.get("lastUpdate")),
    )


def segment_from_dict(data: dict) -> Segment:
    return Segment(
        id=int(data["id"]),
        name=data.get("name", f"Segment {data['id']}"),
        enabled=bool(data["enabled"]),
        power=int(data["power"]),
        temperature_c=float(data["temperature"]),
        target_temp_c=int(data.get("targetTemp", DEFAULT_TARGET_TEMP_C)),
        status=SegmentStatus(data["status"]),
        legacy_sensor_id=data.get("sensorId", ""),
        sensors=tuple(sensor_from_dict(s) for s in data["sensors"]),
    )


def tape_from_dict(data: dict) -> Tape:
    return Tape(
        id=int(data["id"]),
        name=data.get("name", f"Tape {data['id']}"),
        coordinates=data["coordinates"],
        contract_number=data["contractNumber"],
        length=str(data["length"]),
        width=str(data["width"]),
        enabled=bool(data["enabled"]),
        segments=tuple(segment_from_dict(s) for s in data["segments"]),
    )


def alert_from_dict(data: dict) -> Alert:
    return Alert(
        id=int(data["id"]),
        timestamp=datetime.fromisoformat(data["timestamp"]),
        severity=AlertSeverity(data["severity"]),
        message=data["message"],
        acknowledged=bool(data.get("acknowledged", False)),
    )


def _flag(value, default: bool) -> bool:
    """Booleans may be stored as JSON booleans or as "true"/"false" text."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return default


def settings_from_dict(data: dict) -> Settings:
    defaults = Settings()
    return Settings(
        system_on=_flag(data.get("systemOn"), defaults.system_on),
        auto_mode=_flag(data.get("autoMode"), defaults.auto_mode),
        threshold_temp=str(data.get("thresholdTemp", defaults.threshold_temp)),
        alert_sound=_flag(data.get("alertSound"), defaults.alert_sound),
        poll_interval=str(data.get("pollInterval", defaults.poll_interval)),
    )


def system_from_dict(data: dict, default_alerts: tuple[Alert, ...] = ()) -> System:
    """Decode a current-shape record. Missing alerts fall back to ``default_alerts``."""
    if "alerts" in data:
        alerts = tuple(alert_from_dict(a) for a in data["alerts"])
    else:
        alerts = default_alerts
    return System(
        tapes=tuple(tape_from_dict(t) for t in data["tapes"]),
        alerts=alerts,
        settings=settings_from_dict(data),
        last_tape_id=int(data.get("lastTapeId", 0)),
        last_segment_id=int(data.get("lastSegmentId", 0)),
    )
