"""Named start/stop latency measurements."""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from fetch_cache.clock import Clock


@dataclass
class TimingRecord:
    """One named measurement. ``end_time`` stays None until ended."""

    name: str
    start_time: float
    end_time: float | None = None

    @property
    def duration(self) -> float | None:
        if self.end_time is None:
            return None
        return self.end_time - self.start_time


class OperationTimer:
    """Keeps the latest timing per name (no history).

    Purely observational: ending a timing that was never started is a no-op
    rather than an error.
    """

    def __init__(self, clock: Clock = time.perf_counter) -> None:
        self._clock = clock
        self._timings: dict[str, TimingRecord] = {}

    def start_timing(self, name: str) -> None:
        self._timings[name] = TimingRecord(name=name, start_time=self._clock())

    def end_timing(self, name: str) -> None:
        record = self._timings.get(name)
        if record is not None:
            record.end_time = self._clock()

    def get_timing(self, name: str) -> TimingRecord | None:
        return self._timings.get(name)

    def get_all_timings(self) -> dict[str, TimingRecord]:
        return dict(self._timings)

    def clear_timings(self) -> None:
        self._timings.clear()

    @contextmanager
    def timed(self, name: str) -> Iterator[None]:
        """Time the enclosed block; the timing ends even if the block raises."""
        self.start_timing(name)
        try:
            yield
        finally:
            self.end_timing(name)
