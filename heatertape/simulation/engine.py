"""Temperature drift simulation and the displayed wall clock."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Callable

import numpy as np

from heatertape.config import MAX_DRIFT_C
from heatertape.models.core import Segment, System


def drift_segment(segment: Segment, rng: np.random.Generator) -> Segment:
    drift = float(rng.uniform(-MAX_DRIFT_C, MAX_DRIFT_C))
    return replace(segment, temperature_c=round(segment.temperature_c + drift, 1))


def tick(system: System, rng: np.random.Generator) -> System:
    """Advance the simulation by one step.

    Every effective-enabled segment drifts by up to MAX_DRIFT_C, rounded to
    0.1 °C. Disabled segments, and all segments of a disabled tape, keep their
    last temperature. Segment status is left as it is.
    """
    tapes = []
    for tape in system.tapes:
        segments = tuple(
            drift_segment(s, rng) if tape.is_effective(s) else s
            for s in tape.segments
        )
        tapes.append(replace(tape, segments=segments))
    return replace(system, tapes=tuple(tapes))


class Clock:
    """Displayed wall-clock value, advanced by its own periodic job."""

    def __init__(self, now_fn: Callable[[], datetime] = datetime.now):
        self.now_fn = now_fn
        self.current = now_fn()

    def tick(self) -> datetime:
        self.current = self.now_fn()
        return self.current

    def display(self) -> str:
        return self.current.strftime("%H:%M:%S")
