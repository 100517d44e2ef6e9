"""Pydantic models for symptom logging, patterns and predictions."""

from __future__ import annotations

import datetime as dt

from pydantic import Field, field_validator

from src.cycle_engine.profile import CyclePhase
from src.cycle_engine.symptom_catalog import SymptomCategory
from src.cycle_engine.symptoms import Severity
from src.models.base import LunaBase, TimestampMixin


class LoggedSymptomIn(LunaBase):
    symptom_id: str = Field(min_length=1, max_length=64)
    severity: Severity


class LoggedSymptomRead(LunaBase):
    symptom_id: str
    severity: Severity


def _reject_duplicates(symptoms: list[LoggedSymptomIn]) -> list[LoggedSymptomIn]:
    ids = [s.symptom_id for s in symptoms]
    if len(ids) != len(set(ids)):
        raise ValueError("each symptom_id may appear only once per entry")
    return symptoms


class SymptomLogCreate(LunaBase):
    """Body of ``PUT /symptoms/{date}``.

    Leave ``cycle_phase`` out to have the server tag the entry from the
    profile (cycle arithmetic or lunar correspondence, by life stage).
    """

    symptoms: list[LoggedSymptomIn] = Field(default_factory=list)
    cycle_phase: CyclePhase | None = None
    cycle_day: int | None = Field(default=None, ge=1)
    notes: str | None = None

    @field_validator("symptoms")
    @classmethod
    def check_unique_symptoms(cls, symptoms: list[LoggedSymptomIn]) -> list[LoggedSymptomIn]:
        return _reject_duplicates(symptoms)


class SymptomEntryUpdate(LunaBase):
    symptoms: list[LoggedSymptomIn] = Field(default_factory=list)
    notes: str | None = None

    @field_validator("symptoms")
    @classmethod
    def check_unique_symptoms(cls, symptoms: list[LoggedSymptomIn]) -> list[LoggedSymptomIn]:
        return _reject_duplicates(symptoms)


class SymptomEntryRead(TimestampMixin):
    entry_id: str
    date: dt.date
    symptoms: list[LoggedSymptomRead]
    cycle_phase_at_logging: CyclePhase | None = None
    cycle_day_at_logging: int | None = None
    notes: str | None = None


class SymptomPatternRead(LunaBase):
    symptom_id: str
    phase: CyclePhase
    occurrence_count: int
    total_days_in_phase: int
    average_severity: float


class PredictedSymptomRead(LunaBase):
    symptom_id: str
    likelihood_percent: float
    average_severity: float


class SymptomCountRead(LunaBase):
    symptom_id: str
    count: int


class SymptomDefinitionRead(LunaBase):
    id: str
    name: str
    category: SymptomCategory
