"""Tests for the in-process cycle state."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from src.cycle_engine.config_loader import load_engine_config
from src.cycle_engine.errors import ProfileValidationError
from src.cycle_engine.profile import CyclePhase, LifeStage
from src.services.state import CycleState, get_state, reset_state


@pytest.fixture
def state() -> CycleState:
    return CycleState(load_engine_config())


class TestProfile:
    def test_update_profile_validates(self, state: CycleState) -> None:
        with pytest.raises(ProfileValidationError):
            state.update_profile(cycle_length=15)
        assert state.profile.cycle_length == 28

    def test_reset_keeps_symptoms(self, state: CycleState) -> None:
        state.update_profile(anchor_date=date(2026, 2, 1))
        state.log_period_start(date(2026, 2, 1))
        state.log_symptoms(date(2026, 2, 2), [("cramps", "mild")])
        state.reset()
        assert state.profile.anchor_date is None
        assert len(state.periods) == 0
        assert len(state.symptoms) == 1


class TestPeriodLearning:
    def test_first_start_sets_anchor(self, state: CycleState) -> None:
        state.log_period_start(date(2026, 1, 1))
        assert state.profile.anchor_date == date(2026, 1, 1)
        assert state.profile.cycle_length == 28

    def test_cycle_length_follows_average(self, state: CycleState) -> None:
        state.log_period_start(date(2026, 1, 1))
        state.log_period_start(date(2026, 1, 31))
        assert state.profile.anchor_date == date(2026, 1, 31)
        assert state.profile.cycle_length == 30

    def test_backdated_start_keeps_anchor(self, state: CycleState) -> None:
        state.log_period_start(date(2026, 2, 1))
        state.log_period_start(date(2025, 12, 1))
        assert state.profile.anchor_date == date(2026, 2, 1)

    def test_degenerate_average_is_ignored(self, state: CycleState) -> None:
        state.log_period_start(date(2026, 1, 1))
        state.log_period_start(date(2026, 1, 16))  # 15-day gap
        assert state.profile.cycle_length == 28
        assert state.profile.anchor_date == date(2026, 1, 16)

    def test_period_end_updates_period_length(self, state: CycleState) -> None:
        record = state.log_period_start(date(2026, 1, 1))
        state.log_period_end(record.period_id, date(2026, 1, 7))
        assert state.profile.period_length == 7


class TestSymptomTagging:
    def test_auto_tag_from_cycle(self, state: CycleState) -> None:
        state.update_profile(anchor_date=date(2026, 2, 1))
        entry = state.log_symptoms("2026-02-15", [("headache", "mild")])
        assert entry.cycle_phase_at_logging is CyclePhase.ovulatory
        assert entry.cycle_day_at_logging == 15

    def test_explicit_phase_wins(self, state: CycleState) -> None:
        state.update_profile(anchor_date=date(2026, 2, 1))
        entry = state.log_symptoms(
            "2026-02-15", [("headache", "mild")], phase=CyclePhase.luteal, cycle_day=20
        )
        assert entry.cycle_phase_at_logging is CyclePhase.luteal
        assert entry.cycle_day_at_logging == 20

    def test_no_anchor_leaves_entry_untagged(self, state: CycleState) -> None:
        entry = state.log_symptoms("2026-02-15", [("headache", "mild")])
        assert entry.cycle_phase_at_logging is None
        assert entry.cycle_day_at_logging is None

    def test_lunar_tag_for_menopause(self, state: CycleState) -> None:
        state.update_profile(life_stage=LifeStage.menopause)
        entry = state.log_symptoms(date(2026, 3, 4), [("hot_flashes", "moderate")])
        assert entry.cycle_phase_at_logging is CyclePhase.ovulatory
        assert entry.cycle_day_at_logging is None

    def test_auto_tag_off(self, state: CycleState) -> None:
        state.update_profile(anchor_date=date(2026, 2, 1))
        entry = state.log_symptoms("2026-02-15", [("headache", "mild")], auto_tag=False)
        assert entry.cycle_phase_at_logging is None

    def test_resolve_phase(self, state: CycleState) -> None:
        state.update_profile(anchor_date=date(2026, 2, 1))
        assert state.resolve_phase(datetime(2026, 2, 3, 12, 0)).phase is CyclePhase.menstrual


class TestSingleton:
    def test_reset_state_replaces_singleton(self) -> None:
        first = reset_state()
        assert get_state() is first
        second = reset_state()
        assert second is not first
        assert get_state() is second
