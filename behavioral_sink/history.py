"""Periodic history recording.

Every `interval_days` days (default 10) the recorder appends a
HistoryRecord to the state's history and notifies its listeners, which
is where a chart front end hooks in to refresh.

Usage:
    recorder = HistoryRecorder(interval_days=10)
    recorder.add_listener(lambda rec: chart.append(rec))

    # In the daily update:
    recorder.maybe_record(state)

    # After the run:
    recorder.save("history.npz")
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional

import numpy as np

from behavioral_sink.types import HistoryRecord, SimulationState


HistoryListener = Callable[[HistoryRecord], None]

_COLUMNS = ('day', 'total', 'normal', 'beautiful', 'aggressive', 'birth_rate_percent')


class HistoryRecorder:
    """Appends day-ascending snapshots to a history list."""

    def __init__(
        self,
        interval_days: int = 10,
        records: Optional[List[HistoryRecord]] = None,
    ):
        """
        Args:
            interval_days: Record when day % interval_days == 0.
            records: List to append to (normally SimulationState.history).
        """
        if interval_days < 1:
            raise ValueError(f"interval_days must be >= 1, got {interval_days}")
        self.interval_days = interval_days
        self.records: List[HistoryRecord] = records if records is not None else []
        self._listeners: List[HistoryListener] = []

    def add_listener(self, listener: HistoryListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: HistoryListener) -> None:
        self._listeners.remove(listener)

    def should_record(self, day: int) -> bool:
        return day % self.interval_days == 0

    def record(self, state: SimulationState) -> HistoryRecord:
        """Snapshot state unconditionally and notify listeners."""
        if self.records and state.day <= self.records[-1].day:
            raise ValueError(
                f"History must be day-ascending: day {state.day} after "
                f"day {self.records[-1].day}"
            )
        pop = state.population
        rec = HistoryRecord(
            day=state.day,
            total=pop.total,
            normal=pop.normal,
            beautiful=pop.beautiful,
            aggressive=pop.aggressive,
            birth_rate_percent=round(state.birth_rate_multiplier * 100),
        )
        self.records.append(rec)
        for listener in self._listeners:
            listener(rec)
        return rec

    def maybe_record(self, state: SimulationState) -> Optional[HistoryRecord]:
        """Record only on interval days."""
        if not self.should_record(state.day):
            return None
        return self.record(state)

    def as_arrays(self) -> Dict[str, np.ndarray]:
        """Columnar view (one int array per field), as the charts consume it."""
        return {
            col: np.array([getattr(r, col) for r in self.records], dtype=np.int64)
            for col in _COLUMNS
        }

    def save(self, path: str) -> None:
        """Save the columnar history to a compressed npz file."""
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        arrays = self.as_arrays()
        arrays['interval_days'] = np.array([self.interval_days], dtype=np.int64)
        np.savez_compressed(path, **arrays)

    @classmethod
    def load(cls, path: str) -> 'HistoryRecorder':
        """Load a history saved with save()."""
        data = np.load(path)
        recorder = cls(interval_days=int(data['interval_days'][0]))
        n = len(data['day'])
        for i in range(n):
            recorder.records.append(HistoryRecord(
                **{col: int(data[col][i]) for col in _COLUMNS}
            ))
        return recorder
