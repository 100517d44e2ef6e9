"""Pydantic models for the cycle profile, phase snapshots, moon phase,
period history and fertility endpoints."""

from __future__ import annotations

import datetime as dt

from pydantic import Field

from src.cycle_engine.lunar import LunarPhase
from src.cycle_engine.profile import CyclePhase, LifeStage
from src.cycle_engine.resolver import PhaseSource
from src.models.base import LunaBase


# ---------- Profile ----------

class CycleProfileRead(LunaBase):
    anchor_date: dt.date | None = None
    cycle_length: int
    period_length: int
    life_stage: LifeStage


class CycleProfileUpdate(LunaBase):
    """Partial settings update. Cross-field checks run in the engine."""

    anchor_date: dt.date | None = None
    cycle_length: int | None = Field(default=None, ge=1, le=99)
    period_length: int | None = Field(default=None, ge=1, le=14)
    life_stage: LifeStage | None = None


# ---------- Phase ----------

class PhaseInfoRead(LunaBase):
    name: str
    description: str
    energy: str


class PhaseSnapshotRead(LunaBase):
    day_of_cycle: int
    phase: CyclePhase
    progress: float
    next_occurrence_date: dt.date
    days_until_next_occurrence: int


class PhaseStatusRead(LunaBase):
    """Phase snapshot with an explicit "no anchor yet" state."""

    has_anchor: bool
    snapshot: PhaseSnapshotRead | None = None
    info: PhaseInfoRead | None = None


class ResolvedPhaseRead(LunaBase):
    phase: CyclePhase | None = None
    cycle_day: int | None = None
    source: PhaseSource


# ---------- Moon ----------

class MoonSnapshotRead(LunaBase):
    moon_age_days: float
    lunar_phase: LunarPhase
    corresponding_cycle_phase: CyclePhase
    name: str
    description: str
    energy: str


class MoonCorrespondenceRead(LunaBase):
    lunar_phase: LunarPhase
    cycle_phase: CyclePhase
    start_day: float
    end_day: float


# ---------- Periods ----------

class PeriodStartCreate(LunaBase):
    start_date: dt.date
    notes: str | None = None


class PeriodEndUpdate(LunaBase):
    end_date: dt.date


class PeriodRead(LunaBase):
    period_id: str
    start_date: dt.date
    period_length: int
    end_date: dt.date | None = None
    cycle_length: int | None = None
    notes: str | None = None


class CycleStatsRead(LunaBase):
    average_cycle_length: float
    average_period_length: float
    min_cycle_length: int
    max_cycle_length: int
    is_irregular: bool
    total_cycles_tracked: int
    last_cycle_length: int | None = None
    last_period_length: int | None = None


# ---------- Fertility ----------

class FertilityRead(LunaBase):
    fertile_window_start: dt.date | None = None
    fertile_window_end: dt.date | None = None
    ovulation_date: dt.date | None = None
    in_period: bool = False
    in_fertile_window: bool = False
    is_ovulation_day: bool = False
