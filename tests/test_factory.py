"""Tests for construction of sensors, segments, tapes and default systems."""

from __future__ import annotations

import re

import numpy as np

from heatertape.models.core import SegmentStatus, SensorStatus
from heatertape.models.factory import (
    create_segment,
    create_sensor,
    create_sensors,
    create_tape,
    default_system,
    generate_serial,
    mean_temperature,
    next_segment_id,
    next_tape_id,
)


class TestSensor:
    def test_serial_format(self, rng):
        serial = generate_serial(rng)
        assert re.fullmatch(r"28-[0-9a-f]{32}", serial)

    def test_serials_unique(self, rng):
        serials = {generate_serial(rng) for _ in range(200)}
        assert len(serials) == 200

    def test_id_from_segment_and_index(self, rng):
        sensor = create_sensor(7, 2, rng)
        assert sensor.id == "7-3"

    def test_temperature_range_and_rounding(self, rng):
        for _ in range(200):
            sensor = create_sensor(1, 0, rng)
            assert -5.0 <= sensor.temperature_c <= 10.0
            assert round(sensor.temperature_c, 1) == sensor.temperature_c

    def test_status_mostly_online(self, rng):
        statuses = [create_sensor(1, 0, rng).status for _ in range(500)]
        assert set(statuses) <= {SensorStatus.ONLINE, SensorStatus.OFFLINE}
        offline = statuses.count(SensorStatus.OFFLINE)
        assert 0 < offline < 150

    def test_sensor_count_between_two_and_four(self, rng):
        counts = {len(create_sensors(1, rng)) for _ in range(100)}
        assert counts == {2, 3, 4}

    def test_explicit_count(self, rng):
        assert len(create_sensors(1, rng, count=5)) == 5


class TestSegment:
    def test_enabled_segment(self, rng):
        for _ in range(50):
            seg = create_segment(3, True, rng)
            assert seg.status in (SegmentStatus.NORMAL, SegmentStatus.WARNING)
            assert 40 <= seg.power < 90
            assert 2 <= seg.sensor_count <= 4

    def test_disabled_segment_is_off(self, rng):
        seg = create_segment(3, False, rng)
        assert not seg.enabled
        assert seg.status == SegmentStatus.OFF

    def test_temperature_is_sensor_mean(self, rng):
        seg = create_segment(3, True, rng)
        assert seg.temperature_c == mean_temperature(seg.sensors)

    def test_names(self, rng):
        seg = create_segment(12, True, rng)
        assert seg.name == "Segment 12"
        assert seg.legacy_sensor_id == "DS18B20-012"
        assert all(s.id.startswith("12-") for s in seg.sensors)


class TestTape:
    def test_six_segments(self, rng):
        tape = create_tape(1, 1, 6, rng)
        assert [s.id for s in tape.segments] == [1, 2, 3, 4, 5, 6]
        assert [s.enabled for s in tape.segments] == [True] * 5 + [False]

    def test_four_segments(self, rng):
        tape = create_tape(3, 13, 4, rng)
        assert [s.id for s in tape.segments] == [13, 14, 15, 16]
        assert [s.enabled for s in tape.segments] == [True, True, True, False]

    def test_defaults(self, rng):
        tape = create_tape(2, 1, 1, rng)
        assert tape.name == "Tape 2"
        assert tape.length == "24"
        assert tape.width == "50"
        assert tape.coordinates == ""
        assert tape.contract_number == ""
        assert tape.enabled


class TestDefaultSystem:
    def test_shape(self, system):
        assert [t.id for t in system.tapes] == [1, 2]
        assert system.segment_ids == list(range(1, 13))
        assert len(system.alerts) == 5

    def test_next_ids(self, system):
        assert next_tape_id(system) == 3
        assert next_segment_id(system) == 13

    def test_seeded_generation_is_reproducible(self):
        a = default_system(np.random.default_rng(7))
        b = default_system(np.random.default_rng(7))
        serials_a = [sensor.serial_number for _, s in a.iter_segments() for sensor in s.sensors]
        serials_b = [sensor.serial_number for _, s in b.iter_segments() for sensor in s.sensors]
        assert serials_a == serials_b
