"""Command surface: pure ``System -> System`` transformations.

Each command has a ``try_*`` form returning a :class:`CommandResult` so the
non-empty and range guards live in one place. The plain form returns only the
resulting system; a rejected command hands back the input unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable

import numpy as np

from heatertape.config import (
    EDITABLE_TAPE_FIELDS,
    POLL_INTERVALS,
    POWER_RANGE,
    SEGMENTS_PER_NEW_TAPE,
    TARGET_TEMP_RANGE_C,
)
from heatertape.events.journal import acknowledge
from heatertape.models.core import Segment, SegmentStatus, System, Tape
from heatertape.models.factory import create_segment, create_tape, next_segment_id, next_tape_id

logger = logging.getLogger(__name__)

# persisted field name -> Tape attribute
TAPE_FIELD_ATTRS = {
    "name": "name",
    "coordinates": "coordinates",
    "contractNumber": "contract_number",
    "length": "length",
    "width": "width",
}


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a command: the resulting system and whether it changed."""

    system: System
    applied: bool = True
    reason: str = ""


def _applied(system: System) -> CommandResult:
    return CommandResult(system=system)


def _rejected(system: System, reason: str) -> CommandResult:
    logger.debug("Command rejected: %s", reason)
    return CommandResult(system=system, applied=False, reason=reason)


def _clamp(value: int, bounds: tuple[int, int]) -> int:
    low, high = bounds
    return max(low, min(high, int(value)))


def _with_tape(system: System, tape: Tape) -> System:
    return replace(system, tapes=tuple(tape if t.id == tape.id else t for t in system.tapes))


def _update_tape(system: System, tape_id: int, fn: Callable[[Tape], Tape]) -> CommandResult:
    tape = system.get_tape(tape_id)
    if tape is None:
        return _rejected(system, f"unknown tape {tape_id}")
    return _applied(_with_tape(system, fn(tape)))


def _update_segment(
    system: System,
    tape_id: int,
    segment_id: int,
    fn: Callable[[Segment], Segment],
) -> CommandResult:
    tape = system.get_tape(tape_id)
    if tape is None:
        return _rejected(system, f"unknown tape {tape_id}")
    if tape.get_segment(segment_id) is None:
        return _rejected(system, f"unknown segment {segment_id} on tape {tape_id}")
    segments = tuple(fn(s) if s.id == segment_id else s for s in tape.segments)
    return _applied(_with_tape(system, replace(tape, segments=segments)))


def _with_high_water(system: System) -> System:
    """Record the current highest ids so removals never free them for reuse."""
    return replace(
        system,
        last_tape_id=next_tape_id(system) - 1,
        last_segment_id=next_segment_id(system) - 1,
    )


def _switch(segment: Segment, enabled: bool) -> Segment:
    status = SegmentStatus.NORMAL if enabled else SegmentStatus.OFF
    return replace(segment, enabled=enabled, status=status)


# ---------------------------------------------------------------------------
# Tapes
# ---------------------------------------------------------------------------

def try_add_tape(system: System, rng: np.random.Generator) -> CommandResult:
    tape = create_tape(next_tape_id(system), next_segment_id(system), SEGMENTS_PER_NEW_TAPE, rng)
    logger.debug("Adding tape %d with segments %s", tape.id, [s.id for s in tape.segments])
    return _applied(_with_high_water(replace(system, tapes=system.tapes + (tape,))))


def try_remove_tape(system: System, tape_id: int) -> CommandResult:
    if system.get_tape(tape_id) is None:
        return _rejected(system, f"unknown tape {tape_id}")
    if len(system.tapes) <= 1:
        return _rejected(system, "cannot remove the last tape")
    system = _with_high_water(system)
    return _applied(replace(system, tapes=tuple(t for t in system.tapes if t.id != tape_id)))


def try_toggle_tape(system: System, tape_id: int) -> CommandResult:
    """Flip a tape's own switch; its segments keep their own state."""
    return _update_tape(system, tape_id, lambda t: replace(t, enabled=not t.enabled))


def try_update_tape_field(system: System, tape_id: int, field: str, value: str) -> CommandResult:
    """Replace one free-text tape field. Numeric fields are stored as given."""
    attr = TAPE_FIELD_ATTRS.get(field)
    if attr is None:
        return _rejected(system, f"field {field!r} not in {EDITABLE_TAPE_FIELDS}")
    return _update_tape(system, tape_id, lambda t: replace(t, **{attr: str(value)}))


# ---------------------------------------------------------------------------
# Segments
# ---------------------------------------------------------------------------

def try_add_segment_to_tape(system: System, tape_id: int, rng: np.random.Generator) -> CommandResult:
    if system.get_tape(tape_id) is None:
        return _rejected(system, f"unknown tape {tape_id}")
    segment = create_segment(next_segment_id(system), False, rng)
    result = _update_tape(system, tape_id, lambda t: replace(t, segments=t.segments + (segment,)))
    return _applied(_with_high_water(result.system))


def try_remove_segment_from_tape(system: System, tape_id: int, segment_id: int) -> CommandResult:
    tape = system.get_tape(tape_id)
    if tape is None:
        return _rejected(system, f"unknown tape {tape_id}")
    if tape.get_segment(segment_id) is None:
        return _rejected(system, f"unknown segment {segment_id} on tape {tape_id}")
    if len(tape.segments) <= 1:
        return _rejected(system, f"cannot remove the last segment of tape {tape_id}")
    segments = tuple(s for s in tape.segments if s.id != segment_id)
    system = _with_high_water(system)
    return _applied(_with_tape(system, replace(tape, segments=segments)))


def try_toggle_segment(system: System, tape_id: int, segment_id: int) -> CommandResult:
    return _update_segment(system, tape_id, segment_id, lambda s: _switch(s, not s.enabled))


def try_set_segment_power(system: System, tape_id: int, segment_id: int, power: int) -> CommandResult:
    power = _clamp(power, POWER_RANGE)
    return _update_segment(system, tape_id, segment_id, lambda s: replace(s, power=power))


def try_set_segment_target_temp(system: System, tape_id: int, segment_id: int, target: int) -> CommandResult:
    target = _clamp(target, TARGET_TEMP_RANGE_C)
    return _update_segment(system, tape_id, segment_id, lambda s: replace(s, target_temp_c=target))


def try_set_all_segments(system: System, tape_id: int, enabled: bool) -> CommandResult:
    """Enable or disable every segment of one tape."""
    return _update_tape(
        system,
        tape_id,
        lambda t: replace(t, segments=tuple(_switch(s, enabled) for s in t.segments)),
    )


# ---------------------------------------------------------------------------
# Alerts and settings
# ---------------------------------------------------------------------------

def try_acknowledge_alert(system: System, alert_id: int) -> CommandResult:
    if system.get_alert(alert_id) is None:
        return _rejected(system, f"unknown alert {alert_id}")
    alerts = tuple(acknowledge(a) if a.id == alert_id else a for a in system.alerts)
    return _applied(replace(system, alerts=alerts))


def try_update_settings(system: System, **changes) -> CommandResult:
    """Replace settings fields, e.g. ``try_update_settings(s, auto_mode=False)``."""
    poll = changes.get("poll_interval")
    if poll is not None and str(poll) not in POLL_INTERVALS:
        return _rejected(system, f"poll interval {poll!r} not in {POLL_INTERVALS}")
    if poll is not None:
        changes["poll_interval"] = str(poll)
    if "threshold_temp" in changes:
        changes["threshold_temp"] = str(changes["threshold_temp"])
    try:
        settings = replace(system.settings, **changes)
    except TypeError as e:
        return _rejected(system, str(e))
    return _applied(replace(system, settings=settings))


# ---------------------------------------------------------------------------
# Plain command surface
# ---------------------------------------------------------------------------

def add_tape(system: System, rng: np.random.Generator) -> System:
    return try_add_tape(system, rng).system


def remove_tape(system: System, tape_id: int) -> System:
    return try_remove_tape(system, tape_id).system


def toggle_tape(system: System, tape_id: int) -> System:
    return try_toggle_tape(system, tape_id).system


def update_tape_field(system: System, tape_id: int, field: str, value: str) -> System:
    return try_update_tape_field(system, tape_id, field, value).system


def add_segment_to_tape(system: System, tape_id: int, rng: np.random.Generator) -> System:
    return try_add_segment_to_tape(system, tape_id, rng).system


def remove_segment_from_tape(system: System, tape_id: int, segment_id: int) -> System:
    return try_remove_segment_from_tape(system, tape_id, segment_id).system


def toggle_segment(system: System, tape_id: int, segment_id: int) -> System:
    return try_toggle_segment(system, tape_id, segment_id).system


def set_segment_power(system: System, tape_id: int, segment_id: int, power: int) -> System:
    return try_set_segment_power(system, tape_id, segment_id, power).system


def set_segment_target_temp(system: System, tape_id: int, segment_id: int, target: int) -> System:
    return try_set_segment_target_temp(system, tape_id, segment_id, target).system


def enable_all_segments(system: System, tape_id: int) -> System:
    return try_set_all_segments(system, tape_id, True).system


def disable_all_segments(system: System, tape_id: int) -> System:
    return try_set_all_segments(system, tape_id, False).system


def acknowledge_alert(system: System, alert_id: int) -> System:
    return try_acknowledge_alert(system, alert_id).system


def update_settings(system: System, **changes) -> System:
    return try_update_settings(system, **changes).system
