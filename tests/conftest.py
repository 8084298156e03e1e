"""Shared fixtures for heatertape tests."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import numpy as np
import pytest

from heatertape.models.core import Alert, AlertSeverity, Segment, SegmentStatus, Sensor, System, Tape
from heatertape.models.factory import default_system
from heatertape.storage.store import MemoryStore

FIXTURES_DIR = Path(__file__).parent / "fixtures"

STAMP = datetime(2026, 2, 13, 12, 0, 0)


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR


@pytest.fixture
def legacy_record():
    with open(FIXTURES_DIR / "legacy_v1.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def v2_record():
    with open(FIXTURES_DIR / "tapes_v2.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def system(rng):
    """Two tapes of six segments each, segment ids 1-12."""
    return default_system(rng)


@pytest.fixture
def store():
    return MemoryStore()


def make_segment(segment_id, enabled=True, power=50, temperature=0.0, sensors=2):
    return Segment(
        id=segment_id,
        name=f"Segment {segment_id}",
        enabled=enabled,
        power=power,
        temperature_c=temperature,
        status=SegmentStatus.NORMAL if enabled else SegmentStatus.OFF,
        legacy_sensor_id=f"DS18B20-{segment_id:03d}",
        sensors=tuple(
            Sensor(id=f"{segment_id}-{i + 1}", serial_number=f"28-{i:032x}", temperature_c=temperature, last_update=STAMP)
            for i in range(sensors)
        ),
    )


@pytest.fixture
def small_system():
    """Hand-built system with known values.

    Tape 1 (enabled, 24 m): seg 1 on 100% 2.0 °C, seg 2 off 50% 10.0 °C.
    Tape 2 (disabled, "n/a" m): seg 3 on 80% -4.0 °C.
    """
    tape1 = Tape(
        id=1,
        name="Tape 1",
        length="24",
        segments=(
            make_segment(1, enabled=True, power=100, temperature=2.0, sensors=3),
            make_segment(2, enabled=False, power=50, temperature=10.0, sensors=2),
        ),
    )
    tape2 = Tape(
        id=2,
        name="Tape 2",
        length="n/a",
        enabled=False,
        segments=(make_segment(3, enabled=True, power=80, temperature=-4.0, sensors=4),),
    )
    alerts = (
        Alert(id=1, timestamp=STAMP, severity=AlertSeverity.HIGH, message="Sensor not responding"),
        Alert(id=2, timestamp=STAMP, severity=AlertSeverity.LOW, message="Maintenance due", acknowledged=True),
    )
    return System(tapes=(tape1, tape2), alerts=alerts)


@pytest.fixture
def segment_factory():
    return make_segment
