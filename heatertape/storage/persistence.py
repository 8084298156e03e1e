"""Load and save the System record under the fixed storage key."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace

import numpy as np

from heatertape.config import STORAGE_KEY
from heatertape.models.core import System
from heatertape.storage.codec import system_from_dict, system_to_dict
from heatertape.storage.migrations import migrate
from heatertape.storage.store import KeyValueStore

logger = logging.getLogger(__name__)


def load_record(store: KeyValueStore, key: str = STORAGE_KEY) -> dict | None:
    """Raw persisted record, or None if absent or not a JSON object."""
    raw = store.get(key)
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Ignoring malformed saved state: %s", e)
        return None
    if not isinstance(data, dict):
        logger.warning("Ignoring saved state of type %s", type(data).__name__)
        return None
    return data


def save(store: KeyValueStore, partial: dict, key: str = STORAGE_KEY) -> dict:
    """Shallow-merge ``partial`` over the stored record and write it back.

    Not a compare-and-swap: two writers merging different field groups from
    the same prior snapshot end with the last write winning.
    """
    record = {**(load_record(store, key) or {}), **partial}
    store.set(key, json.dumps(record, ensure_ascii=False))
    return record


def replace_record(store: KeyValueStore, system: System, key: str = STORAGE_KEY) -> dict:
    """Overwrite the stored record with the full encoding of ``system``, dropping stale keys."""
    record = system_to_dict(system)
    store.set(key, json.dumps(record, ensure_ascii=False))
    return record


@dataclass(frozen=True)
class LoadedState:
    """A decoded System and whether it differs from the stored record."""

    system: System
    upgraded: bool = False


def load_state(
    store: KeyValueStore,
    rng: np.random.Generator,
    key: str = STORAGE_KEY,
) -> LoadedState | None:
    """Load, migrate and decode the saved System; None when nothing usable is stored.

    ``upgraded`` is set when migration rewrote the record or missing tapes or
    alerts were filled in, so the caller can write the result back once.
    """
    from heatertape.events.journal import generate_alerts
    from heatertape.models.factory import default_system

    stored = load_record(store, key)
    if stored is None:
        return None

    try:
        record = migrate(stored, rng)
        upgraded = record != stored or "alerts" not in record
        if "tapes" in record:
            system = system_from_dict(record, default_alerts=generate_alerts())
        else:
            # settings or alerts saved before any tapes
            partial = system_from_dict({**record, "tapes": []}, default_alerts=generate_alerts())
            return LoadedState(replace(partial, tapes=default_system(rng).tapes), upgraded=True)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning("Ignoring saved state that could not be decoded: %s", e)
        return None

    if not system.tapes or any(not t.segments for t in system.tapes):
        logger.warning("Ignoring saved state with an empty tape or segment list")
        return None
    return LoadedState(system, upgraded=upgraded)


def load(
    store: KeyValueStore,
    rng: np.random.Generator,
    key: str = STORAGE_KEY,
) -> System | None:
    """Load, migrate and decode the saved System; None when nothing usable is stored."""
    state = load_state(store, rng, key)
    return state.system if state is not None else None
