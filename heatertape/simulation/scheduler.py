"""Cooperative single-threaded scheduler for periodic jobs."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass
class PeriodicJob:
    name: str
    period_s: float
    callback: Callable[[], object]
    next_due: float = 0.0
    runs: int = 0


class PeriodicScheduler:
    """Runs due jobs to completion in turn; nothing is preempted."""

    def __init__(
        self,
        time_fn: Callable[[], float] = time.monotonic,
        sleep_fn: Callable[[float], None] = time.sleep,
    ):
        self.time_fn = time_fn
        self.sleep_fn = sleep_fn
        self.jobs: list[PeriodicJob] = []

    def every(self, period_s: float, callback: Callable[[], object], name: str = "") -> PeriodicJob:
        if period_s <= 0:
            raise ValueError(f"Period must be positive, got {period_s}")
        job = PeriodicJob(name=name or callback.__name__, period_s=period_s, callback=callback)
        self.jobs.append(job)
        return job

    def run(self, duration_s: float) -> None:
        """Run jobs for ``duration_s`` seconds; each job first fires one period in."""
        if not self.jobs:
            return
        start = self.time_fn()
        end = start + duration_s
        for job in self.jobs:
            job.next_due = start + job.period_s

        while True:
            due = min(job.next_due for job in self.jobs)
            if due > end:
                break
            now = self.time_fn()
            if due > now:
                self.sleep_fn(due - now)
            for job in self.jobs:
                if job.next_due <= due:
                    logger.debug("Running job %s", job.name)
                    job.callback()
                    job.runs += 1
                    job.next_due += job.period_s
