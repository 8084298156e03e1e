"""Paths, constants, and configuration."""

from __future__ import annotations

import os
from pathlib import Path

# Default persisted state location
DEFAULT_STORE_PATH = Path(os.environ.get("HEATERTAPE_STORE", Path.home() / ".heatertape" / "state.json"))

# Single fixed key the whole System snapshot is stored under
STORAGE_KEY = "heater-tape-settings"

SCHEMA_VERSION = 4

# Simulation periods (seconds)
SIMULATION_PERIOD_S = 3.0
CLOCK_PERIOD_S = 1.0
MAX_DRIFT_C = 0.75

# Construction rules
SENSORS_PER_SEGMENT = (2, 4)  # inclusive range
SENSOR_TEMP_RANGE_C = (-5.0, 10.0)
SENSOR_OFFLINE_PROBABILITY = 0.1
SERIAL_FAMILY_CODE = "28"  # DS18B20 1-Wire family
SERIAL_BYTES = 16
INITIAL_POWER_RANGE = (40, 90)  # [low, high)
WARNING_PROBABILITY = 0.2
ENABLED_FRACTION = 0.7
DEFAULT_TARGET_TEMP_C = 5
SEGMENTS_PER_NEW_TAPE = 4
DEFAULT_TAPE_COUNT = 2
DEFAULT_SEGMENTS_PER_TAPE = 6
DEFAULT_TAPE_LENGTH = "24"  # m
DEFAULT_TAPE_WIDTH = "50"  # mm

# Control ranges
POWER_RANGE = (0, 100)
TARGET_TEMP_RANGE_C = (-10, 30)

# kW drawn by one segment at 100% power
SEGMENT_POWER_KW = 0.5

# Electrical readout: heating density at 100% power, supply voltage and the
# number of heating conductors per tape run
HEATING_W_PER_M = 40
SUPPLY_VOLTAGE_V = 220
HEATING_CONDUCTORS = 2

# Tape fields editable from the panel (persisted names)
EDITABLE_TAPE_FIELDS = ("name", "coordinates", "contractNumber", "length", "width")

# Settings
POLL_INTERVALS = ("1", "2", "5", "10")
DEFAULT_THRESHOLD_TEMP = "5"
DEFAULT_POLL_INTERVAL = "2"

# Session log spacing (seconds)
LOG_INTERVAL_S = 300
