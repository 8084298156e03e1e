"""Construction rules for new sensors, segments, tapes and whole systems.

All randomness goes through a ``numpy.random.Generator`` passed in by the
caller, so a seeded generator gives reproducible installations.
"""

from __future__ import annotations

import math
from datetime import datetime

import numpy as np

from heatertape.config import (
    DEFAULT_SEGMENTS_PER_TAPE,
    DEFAULT_TAPE_COUNT,
    ENABLED_FRACTION,
    INITIAL_POWER_RANGE,
    SENSOR_OFFLINE_PROBABILITY,
    SENSOR_TEMP_RANGE_C,
    SENSORS_PER_SEGMENT,
    SERIAL_BYTES,
    SERIAL_FAMILY_CODE,
    WARNING_PROBABILITY,
)
from heatertape.models.core import Segment, SegmentStatus, Sensor, SensorStatus, Settings, System, Tape


def generate_serial(rng: np.random.Generator) -> str:
    """Random 1-Wire style serial, e.g. ``28-3fa0...``."""
    return f"{SERIAL_FAMILY_CODE}-{rng.bytes(SERIAL_BYTES).hex()}"


def sensor_id(segment_id: int, index: int) -> str:
    return f"{segment_id}-{index + 1}"


def create_sensor(segment_id: int, index: int, rng: np.random.Generator, now: datetime | None = None) -> Sensor:
    low, high = SENSOR_TEMP_RANGE_C
    offline = rng.random() < SENSOR_OFFLINE_PROBABILITY
    return Sensor(
        id=sensor_id(segment_id, index),
        serial_number=generate_serial(rng),
        temperature_c=round(float(rng.uniform(low, high)), 1),
        status=SensorStatus.OFFLINE if offline else SensorStatus.ONLINE,
        last_update=now or datetime.now(),
    )


def create_sensors(
    segment_id: int,
    rng: np.random.Generator,
    count: int | None = None,
    now: datetime | None = None,
) -> tuple[Sensor, ...]:
    """Create a segment's sensor list; 2 to 4 sensors unless ``count`` is given."""
    if count is None:
        low, high = SENSORS_PER_SEGMENT
        count = int(rng.integers(low, high + 1))
    return tuple(create_sensor(segment_id, i, rng, now=now) for i in range(count))


def mean_temperature(sensors: tuple[Sensor, ...]) -> float:
    return round(sum(s.temperature_c for s in sensors) / len(sensors), 1)


def create_segment(segment_id: int, enabled: bool, rng: np.random.Generator) -> Segment:
    sensors = create_sensors(segment_id, rng)
    low, high = INITIAL_POWER_RANGE
    power = int(rng.integers(low, high))
    if not enabled:
        status = SegmentStatus.OFF
    elif rng.random() < WARNING_PROBABILITY:
        status = SegmentStatus.WARNING
    else:
        status = SegmentStatus.NORMAL
    return Segment(
        id=segment_id,
        name=f"Segment {segment_id}",
        enabled=enabled,
        power=power,
        temperature_c=mean_temperature(sensors),
        status=status,
        legacy_sensor_id=f"DS18B20-{segment_id:03d}",
        sensors=sensors,
    )


def create_tape(tape_id: int, first_segment_id: int, segment_count: int, rng: np.random.Generator) -> Tape:
    """Create a tape whose leading ~70% of segments start enabled."""
    enabled_count = math.ceil(ENABLED_FRACTION * segment_count)
    segments = tuple(
        create_segment(first_segment_id + i, i < enabled_count, rng)
        for i in range(segment_count)
    )
    return Tape(id=tape_id, name=f"Tape {tape_id}", segments=segments)


def next_tape_id(system: System) -> int:
    """Next tape id; ids of removed tapes are never handed out again."""
    return max([system.last_tape_id, *(t.id for t in system.tapes)]) + 1


def next_segment_id(system: System) -> int:
    return max([system.last_segment_id, *system.segment_ids]) + 1


def default_system(rng: np.random.Generator) -> System:
    """Fresh installation used when no saved state is available."""
    from heatertape.events.journal import generate_alerts

    tapes = []
    first_segment_id = 1
    for tape_id in range(1, DEFAULT_TAPE_COUNT + 1):
        tapes.append(create_tape(tape_id, first_segment_id, DEFAULT_SEGMENTS_PER_TAPE, rng))
        first_segment_id += DEFAULT_SEGMENTS_PER_TAPE
    return System(tapes=tuple(tapes), alerts=generate_alerts(), settings=Settings())
