"""Schema migrations for the persisted record.

Versions:

1. flat ``segments`` list with ``tapeLength``/``tapeWidth`` scalars, no tapes
2. ``tapes`` list, segments without ``sensors``
3. segments carry sensors, tapes may lack location/contract/size/enabled
4. current shape

Each step is a pure function of ``(record, rng)`` returning a new record one
version up. :func:`migrate` runs steps until the record is current.
"""

from __future__ import annotations

import copy
import logging
from typing import Callable

import numpy as np

from heatertape.config import DEFAULT_TAPE_LENGTH, DEFAULT_TAPE_WIDTH, SCHEMA_VERSION
from heatertape.models.factory import create_sensors
from heatertape.storage.codec import sensor_to_dict

logger = logging.getLogger(__name__)

TAPE_DEFAULTS = {
    "coordinates": "",
    "contractNumber": "",
    "length": DEFAULT_TAPE_LENGTH,
    "width": DEFAULT_TAPE_WIDTH,
    "enabled": True,
}


def _segments(record: dict):
    for tape in record["tapes"]:
        yield from tape.get("segments", [])


def detect_version(record: dict) -> int:
    """Infer the schema version from the record's shape."""
    if "tapes" not in record:
        return 1 if "segments" in record else SCHEMA_VERSION
    if any(not seg.get("sensors") for seg in _segments(record)):
        return 2
    if any(key not in tape for tape in record["tapes"] for key in TAPE_DEFAULTS):
        return 3
    return SCHEMA_VERSION


def v1_to_v2(record: dict, rng: np.random.Generator) -> dict:
    """Wrap the legacy flat segment list in a single tape."""
    out = copy.deepcopy(record)
    segments = out.pop("segments")
    length = out.pop("tapeLength", None) or DEFAULT_TAPE_LENGTH
    width = out.pop("tapeWidth", None) or DEFAULT_TAPE_WIDTH
    out["tapes"] = [{
        "id": 1,
        "name": "Tape 1",
        "coordinates": "",
        "contractNumber": "",
        "length": str(length),
        "width": str(width),
        "segments": segments,
    }]
    return out


def v2_to_v3(record: dict, rng: np.random.Generator) -> dict:
    """Give every sensor-less segment a fresh synthetic sensor list.

    Lossy: the segment's historical per-sensor data does not exist, so the
    sensors are newly randomised.
    """
    out = copy.deepcopy(record)
    for seg in _segments(out):
        if not seg.get("sensors"):
            seg["sensors"] = [sensor_to_dict(s) for s in create_sensors(int(seg["id"]), rng)]
    return out


def v3_to_v4(record: dict, rng: np.random.Generator) -> dict:
    out = copy.deepcopy(record)
    for tape in out["tapes"]:
        for key, default in TAPE_DEFAULTS.items():
            tape.setdefault(key, default)
    return out


MIGRATIONS: dict[int, Callable[[dict, np.random.Generator], dict]] = {
    1: v1_to_v2,
    2: v2_to_v3,
    3: v3_to_v4,
}


def migrate(record: dict, rng: np.random.Generator) -> dict:
    """Upgrade a record to the current schema. Current records pass through unchanged."""
    version = detect_version(record)
    while version < SCHEMA_VERSION:
        logger.info("Migrating persisted state from schema v%d to v%d", version, version + 1)
        record = MIGRATIONS[version](record, rng)
        new_version = detect_version(record)
        if new_version <= version:
            raise ValueError(f"Migration from v{version} did not advance the schema")
        version = new_version
    if "tapes" in record and record.get("schemaVersion") != SCHEMA_VERSION:
        record = {**record, "schemaVersion": SCHEMA_VERSION}
    return record
