"""Control panel session: owns the System value for one run of the panel.

Every command is applied to the in-memory snapshot and then written through
to the store, one field group at a time (tapes, settings or alerts). Each
write is an unversioned read-merge-write: the last write wins for any key.
"""

from __future__ import annotations

import logging
from datetime import datetime

import numpy as np

from heatertape.analysis.metrics import SystemMetrics, compute_metrics
from heatertape.control import commands
from heatertape.control.commands import CommandResult
from heatertape.events.journal import generate_logs
from heatertape.models.core import LogEntry, System
from heatertape.models.factory import default_system
from heatertape.simulation.engine import Clock, tick
from heatertape.storage import persistence
from heatertape.storage.codec import alerts_record, settings_record, tapes_record
from heatertape.storage.store import KeyValueStore

logger = logging.getLogger(__name__)


class ControlPanel:
    """Single owner of the installation state during a session."""

    def __init__(self, store: KeyValueStore, rng: np.random.Generator | None = None):
        self.store = store
        self.rng = rng if rng is not None else np.random.default_rng()
        self.clock = Clock()
        self._system: System | None = None
        self._logs: tuple[LogEntry, ...] = ()

    def start(self, now: datetime | None = None) -> System:
        """Load saved state (or build a fresh installation) and generate the session log."""
        state = persistence.load_state(self.store, self.rng)
        if state is None:
            logger.info("No usable saved state, starting a fresh installation")
            self._system = default_system(self.rng)
            self._persist_all()
        else:
            logger.info("Loaded %d tapes from saved state", len(state.system.tapes))
            self._system = state.system
            if state.upgraded:
                # migration output is random; store it once
                logger.info("Writing upgraded state back to the store")
                persistence.replace_record(self.store, self._system)
        self._logs = generate_logs(now)
        return self._system

    @property
    def system(self) -> System:
        if self._system is None:
            raise RuntimeError("Session not started; call start() first")
        return self._system

    @property
    def logs(self) -> tuple[LogEntry, ...]:
        return self._logs

    def metrics(self) -> SystemMetrics:
        return compute_metrics(self.system)

    # -- write-through ----------------------------------------------------

    def _persist_all(self) -> None:
        self._persist_tapes()
        self._persist_settings()
        self._persist_alerts()

    def _persist_tapes(self) -> None:
        persistence.save(self.store, tapes_record(self.system))

    def _persist_settings(self) -> None:
        persistence.save(self.store, settings_record(self.system.settings))

    def _persist_alerts(self) -> None:
        persistence.save(self.store, alerts_record(self.system))

    def _apply(self, result: CommandResult, persist) -> CommandResult:
        if result.applied:
            self._system = result.system
            persist()
        return result

    # -- tapes and segments ----------------------------------------------

    def add_tape(self) -> CommandResult:
        return self._apply(commands.try_add_tape(self.system, self.rng), self._persist_tapes)

    def remove_tape(self, tape_id: int) -> CommandResult:
        return self._apply(commands.try_remove_tape(self.system, tape_id), self._persist_tapes)

    def toggle_tape(self, tape_id: int) -> CommandResult:
        return self._apply(commands.try_toggle_tape(self.system, tape_id), self._persist_tapes)

    def update_tape_field(self, tape_id: int, field: str, value: str) -> CommandResult:
        result = commands.try_update_tape_field(self.system, tape_id, field, value)
        return self._apply(result, self._persist_tapes)

    def add_segment(self, tape_id: int) -> CommandResult:
        result = commands.try_add_segment_to_tape(self.system, tape_id, self.rng)
        return self._apply(result, self._persist_tapes)

    def remove_segment(self, tape_id: int, segment_id: int) -> CommandResult:
        result = commands.try_remove_segment_from_tape(self.system, tape_id, segment_id)
        return self._apply(result, self._persist_tapes)

    def toggle_segment(self, tape_id: int, segment_id: int) -> CommandResult:
        result = commands.try_toggle_segment(self.system, tape_id, segment_id)
        return self._apply(result, self._persist_tapes)

    def set_power(self, tape_id: int, segment_id: int, power: int) -> CommandResult:
        result = commands.try_set_segment_power(self.system, tape_id, segment_id, power)
        return self._apply(result, self._persist_tapes)

    def set_target_temp(self, tape_id: int, segment_id: int, target: int) -> CommandResult:
        result = commands.try_set_segment_target_temp(self.system, tape_id, segment_id, target)
        return self._apply(result, self._persist_tapes)

    def set_all_segments(self, tape_id: int, enabled: bool) -> CommandResult:
        result = commands.try_set_all_segments(self.system, tape_id, enabled)
        return self._apply(result, self._persist_tapes)

    # -- alerts and settings ----------------------------------------------

    def acknowledge_alert(self, alert_id: int) -> CommandResult:
        result = commands.try_acknowledge_alert(self.system, alert_id)
        return self._apply(result, self._persist_alerts)

    def update_settings(self, **changes) -> CommandResult:
        result = commands.try_update_settings(self.system, **changes)
        return self._apply(result, self._persist_settings)

    # -- periodic jobs ----------------------------------------------------

    def tick(self) -> System:
        """One simulation step, persisted like any other tape mutation."""
        self._system = tick(self.system, self.rng)
        self._persist_tapes()
        return self._system

    def tick_clock(self) -> datetime:
        return self.clock.tick()
