"""Tests for behavioral_sink.history — periodic snapshots and persistence."""

import numpy as np
import pytest

from behavioral_sink.history import HistoryRecorder
from behavioral_sink.types import HistoryRecord, initial_state


def _state_at(day, normal=100, beautiful=20, aggressive=5, mult=1.2):
    s = initial_state(3000, normal=normal, beautiful=beautiful, aggressive=aggressive)
    s.day = day
    s.birth_rate_multiplier = mult
    return s


class TestShouldRecord:
    def test_every_tenth_day(self):
        rec = HistoryRecorder()
        assert [d for d in range(1, 41) if rec.should_record(d)] == [10, 20, 30, 40]

    def test_custom_interval(self):
        rec = HistoryRecorder(interval_days=7)
        assert rec.should_record(14)
        assert not rec.should_record(10)

    def test_invalid_interval(self):
        with pytest.raises(ValueError):
            HistoryRecorder(interval_days=0)


class TestRecord:
    def test_record_fields(self):
        rec = HistoryRecorder()
        r = rec.record(_state_at(10, mult=0.64))
        assert r == HistoryRecord(10, 125, 100, 20, 5, 64)
        assert rec.records == [r]

    def test_maybe_record_skips_off_days(self):
        rec = HistoryRecorder()
        assert rec.maybe_record(_state_at(9)) is None
        assert rec.maybe_record(_state_at(10)) is not None
        assert len(rec.records) == 1

    def test_appends_to_shared_list(self):
        state = _state_at(20)
        rec = HistoryRecorder(records=state.history)
        rec.maybe_record(state)
        assert len(state.history) == 1

    def test_day_ascending_enforced(self):
        rec = HistoryRecorder()
        rec.record(_state_at(20))
        with pytest.raises(ValueError, match="day-ascending"):
            rec.record(_state_at(10))

    def test_listeners_notified(self):
        rec = HistoryRecorder()
        seen = []
        rec.add_listener(seen.append)
        rec.maybe_record(_state_at(10))
        rec.maybe_record(_state_at(15))
        rec.maybe_record(_state_at(20))
        assert [r.day for r in seen] == [10, 20]

        rec.remove_listener(seen.append)
        rec.maybe_record(_state_at(30))
        assert len(seen) == 2


class TestPersistence:
    def test_as_arrays(self):
        rec = HistoryRecorder()
        rec.record(_state_at(10, normal=8))
        rec.record(_state_at(20, normal=9))
        arrays = rec.as_arrays()
        np.testing.assert_array_equal(arrays['day'], [10, 20])
        np.testing.assert_array_equal(arrays['normal'], [8, 9])
        np.testing.assert_array_equal(arrays['birth_rate_percent'], [120, 120])

    def test_empty_arrays(self):
        arrays = HistoryRecorder().as_arrays()
        assert arrays['total'].size == 0

    def test_save_load(self, tmp_path):
        rec = HistoryRecorder(interval_days=5)
        for day in (5, 10, 15):
            rec.record(_state_at(day, normal=day))
        path = tmp_path / "sub" / "history.npz"
        rec.save(str(path))

        loaded = HistoryRecorder.load(str(path))
        assert loaded.interval_days == 5
        assert loaded.records == rec.records
