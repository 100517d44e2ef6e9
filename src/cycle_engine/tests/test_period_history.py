"""Tests for the period log and cycle statistics."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.cycle_engine.config_loader import EngineConfig
from src.cycle_engine.errors import EntryNotFoundError
from src.cycle_engine.period_history import PeriodHistory


@pytest.fixture
def history(engine_config: EngineConfig) -> PeriodHistory:
    return PeriodHistory(config=engine_config)


def log_starts(history: PeriodHistory, first: date, gaps: list[int], period_length: int = 5) -> None:
    start = first
    history.log_period_start(start, period_length)
    for gap in gaps:
        start = start + timedelta(days=gap)
        history.log_period_start(start, period_length)


class TestLogPeriodStart:
    def test_first_start_has_no_cycle_length(self, history: PeriodHistory) -> None:
        record = history.log_period_start("2026-01-01", 5, notes="light")
        assert record.start_date == date(2026, 1, 1)
        assert record.cycle_length is None
        assert record.notes == "light"

    def test_gap_from_previous_start(self, history: PeriodHistory) -> None:
        log_starts(history, date(2026, 1, 1), [28, 30])
        assert [r.cycle_length for r in history.records] == [None, 28, 30]

    def test_implausible_gap_ignored(self, history: PeriodHistory) -> None:
        history.log_period_start(date(2026, 1, 1), 5)
        record = history.log_period_start(date(2026, 6, 1), 5)
        assert record.cycle_length is None

    def test_same_date_returns_existing(self, history: PeriodHistory) -> None:
        first = history.log_period_start(date(2026, 1, 1), 5)
        again = history.log_period_start(date(2026, 1, 1), 6)
        assert again is first
        assert len(history) == 1

    def test_records_sorted_oldest_first(self, history: PeriodHistory) -> None:
        history.log_period_start(date(2026, 2, 1), 5)
        history.log_period_start(date(2026, 1, 1), 5)
        assert [r.start_date.month for r in history.records] == [1, 2]


class TestLogPeriodEnd:
    def test_sets_length(self, history: PeriodHistory) -> None:
        record = history.log_period_start(date(2026, 1, 1), 5)
        history.log_period_end(record.period_id, "2026-01-04")
        assert record.end_date == date(2026, 1, 4)
        assert record.period_length == 4

    @pytest.mark.parametrize(
        "end, expected",
        [(date(2026, 1, 30), 14), (date(2025, 12, 30), 1), (date(2026, 1, 1), 1)],
    )
    def test_length_is_clamped(self, history: PeriodHistory, end: date, expected: int) -> None:
        record = history.log_period_start(date(2026, 1, 1), 5)
        assert history.log_period_end(record.period_id, end).period_length == expected

    @pytest.mark.parametrize(
        "end, expected_end",
        [(date(2026, 1, 30), date(2026, 1, 14)), (date(2025, 12, 30), date(2026, 1, 1))],
    )
    def test_end_date_follows_clamped_length(
        self, history: PeriodHistory, end: date, expected_end: date
    ) -> None:
        record = history.log_period_start(date(2026, 1, 1), 5)
        history.log_period_end(record.period_id, end)
        assert record.end_date == expected_end
        assert record.contains(date(2026, 1, 1))
        assert history.period_for_date(date(2026, 1, 1)) is record

    def test_unknown_id(self, history: PeriodHistory) -> None:
        with pytest.raises(EntryNotFoundError):
            history.log_period_end("missing", date(2026, 1, 4))


class TestEditAndLookup:
    def test_period_for_date(self, history: PeriodHistory) -> None:
        record = history.log_period_start(date(2026, 1, 1), 5)
        assert history.period_for_date(date(2026, 1, 5)) is record
        assert history.period_for_date(date(2026, 1, 6)) is None
        history.log_period_end(record.period_id, date(2026, 1, 7))
        assert history.period_for_date("2026-01-07") is record

    def test_update_period(self, history: PeriodHistory) -> None:
        record = history.log_period_start(date(2026, 1, 1), 5)
        updated = history.update_period(record.period_id, notes="heavy")
        assert updated.notes == "heavy"
        assert history.get(record.period_id).notes == "heavy"

    def test_delete_period(self, history: PeriodHistory) -> None:
        record = history.log_period_start(date(2026, 1, 1), 5)
        history.delete_period(record.period_id)
        assert len(history) == 0
        with pytest.raises(EntryNotFoundError):
            history.get(record.period_id)


class TestCycleStats:
    def test_empty_history_uses_defaults(self, history: PeriodHistory) -> None:
        stats = history.cycle_stats(28, 5)
        assert stats.average_cycle_length == 28.0
        assert stats.average_period_length == 5.0
        assert stats.total_cycles_tracked == 0
        assert stats.is_irregular is False
        assert stats.last_cycle_length is None

    def test_regular_cycles(self, history: PeriodHistory) -> None:
        log_starts(history, date(2026, 1, 1), [28, 29, 27])
        stats = history.cycle_stats(28, 5)
        assert stats.average_cycle_length == pytest.approx(28.0)
        assert stats.min_cycle_length == 27
        assert stats.max_cycle_length == 29
        assert stats.cycle_length_variation == 2
        assert stats.is_irregular is False
        assert stats.total_cycles_tracked == 4
        assert stats.last_cycle_length == 27
        assert stats.last_period_length == 5

    def test_large_variation_is_irregular(self, history: PeriodHistory) -> None:
        log_starts(history, date(2026, 1, 1), [24, 33])
        assert history.cycle_stats(28, 5).is_irregular is True

    def test_out_of_range_cycle_is_irregular(self, history: PeriodHistory) -> None:
        log_starts(history, date(2026, 1, 1), [40])
        stats = history.cycle_stats(28, 5)
        assert stats.cycle_length_variation == 0
        assert stats.is_irregular is True

    def test_average_period_length(self, history: PeriodHistory) -> None:
        log_starts(history, date(2026, 1, 1), [28])
        first, second = history.records
        history.log_period_end(first.period_id, date(2026, 1, 4))   # 4 days
        history.log_period_end(second.period_id, date(2026, 2, 4))  # 7 days
        assert history.cycle_stats(28, 5).average_period_length == pytest.approx(5.5)

    def test_single_start_uses_default_cycle_length(self, history: PeriodHistory) -> None:
        history.log_period_start(date(2026, 1, 1), 6)
        stats = history.cycle_stats(30, 5)
        assert stats.average_cycle_length == 30.0
        assert stats.average_period_length == 6.0
        assert stats.total_cycles_tracked == 1
