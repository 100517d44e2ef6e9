"""Symptom log, pattern and prediction endpoints.

Entries are keyed by calendar date: ``PUT /symptoms/{date}`` creates the
day's entry or replaces its content.  Fixed paths are declared before the
``/{entry_date}`` routes so they are never parsed as dates.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Query, Response

from src.cycle_engine.errors import DateOutOfRangeError, EntryNotFoundError, SymptomLogError
from src.cycle_engine.profile import CyclePhase
from src.cycle_engine.symptom_catalog import AVAILABLE_SYMPTOMS, SymptomCategory, symptoms_by_category
from src.cycle_engine.symptoms import LoggedSymptom
from src.dependencies import Now, State
from src.models.base import ErrorDetail
from src.models.symptoms import (
    LoggedSymptomIn,
    PredictedSymptomRead,
    SymptomCountRead,
    SymptomDefinitionRead,
    SymptomEntryRead,
    SymptomEntryUpdate,
    SymptomLogCreate,
    SymptomPatternRead,
)

router = APIRouter(prefix="/symptoms", tags=["symptoms"])


def _to_logged(symptoms: list[LoggedSymptomIn]) -> list[LoggedSymptom]:
    return [LoggedSymptom(symptom_id=s.symptom_id, severity=s.severity) for s in symptoms]


# ---------- Catalog & analytics ----------


@router.get("/catalog", response_model=list[SymptomDefinitionRead])
async def catalog(category: SymptomCategory | None = Query(default=None)) -> Any:
    definitions = symptoms_by_category(category) if category else AVAILABLE_SYMPTOMS
    return [SymptomDefinitionRead.model_validate(d) for d in definitions]


@router.get("/patterns", response_model=list[SymptomPatternRead])
async def patterns(
    state: State,
    phase: CyclePhase | None = Query(default=None),
) -> Any:
    result = state.symptoms.patterns()
    if phase is not None:
        result = [p for p in result if p.phase is phase]
    return [SymptomPatternRead.model_validate(p) for p in result]


@router.get("/predictions/{phase}", response_model=list[PredictedSymptomRead])
async def predictions(phase: CyclePhase, state: State) -> Any:
    return [
        PredictedSymptomRead.model_validate(p)
        for p in state.symptoms.predicted_symptoms(phase)
    ]


@router.get("/most-common", response_model=list[SymptomCountRead])
async def most_common(
    state: State,
    limit: int | None = Query(default=None, ge=0, le=100),
) -> Any:
    return [
        SymptomCountRead(symptom_id=symptom_id, count=count)
        for symptom_id, count in state.symptoms.most_common(limit)
    ]


# ---------- Entries by id ----------


@router.patch(
    "/entries/{entry_id}",
    response_model=SymptomEntryRead,
    responses={404: {"model": ErrorDetail}},
)
async def update_entry(entry_id: str, state: State, body: SymptomEntryUpdate) -> Any:
    try:
        entry = state.symptoms.update_entry(
            entry_id, _to_logged(body.symptoms), notes=body.notes
        )
    except EntryNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Symptom entry not found") from exc
    except SymptomLogError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return SymptomEntryRead.model_validate(entry)


@router.delete(
    "/entries/{entry_id}",
    status_code=204,
    responses={404: {"model": ErrorDetail}},
)
async def delete_entry(entry_id: str, state: State) -> Response:
    try:
        state.symptoms.delete_entry(entry_id)
    except EntryNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Symptom entry not found") from exc
    return Response(status_code=204)


# ---------- Entries by date ----------


@router.get("", response_model=list[SymptomEntryRead])
async def list_entries(
    state: State,
    now: Now,
    days: int | None = Query(default=None, ge=0, le=3650),
    phase: CyclePhase | None = Query(default=None),
) -> Any:
    """Entries newest first, optionally limited to the last ``days`` and one phase."""
    if days is not None:
        entries = state.symptoms.entries_since(days, now)
    else:
        entries = state.symptoms.entries
    if phase is not None:
        entries = [e for e in entries if e.cycle_phase_at_logging is phase]
    return [SymptomEntryRead.model_validate(e) for e in entries]


@router.get(
    "/{entry_date}",
    response_model=SymptomEntryRead,
    responses={404: {"model": ErrorDetail}},
)
async def get_entry(entry_date: date, state: State) -> Any:
    entry = state.symptoms.entry_for_date(entry_date)
    if entry is None:
        raise HTTPException(status_code=404, detail="No symptoms logged for this date")
    return SymptomEntryRead.model_validate(entry)


@router.put(
    "/{entry_date}",
    response_model=SymptomEntryRead,
    responses={422: {"model": ErrorDetail}},
)
async def log_symptoms(entry_date: date, state: State, body: SymptomLogCreate) -> Any:
    """Create or replace the entry for ``entry_date``.

    When ``cycle_phase`` is omitted the entry is tagged with the phase
    resolved for that date; an explicit value (including null) is stored as-is.
    Tags are only set on the first write for a date.
    """
    auto_tag = "cycle_phase" not in body.model_fields_set
    try:
        entry = state.log_symptoms(
            entry_date,
            _to_logged(body.symptoms),
            phase=body.cycle_phase,
            cycle_day=body.cycle_day,
            notes=body.notes,
            auto_tag=auto_tag,
        )
    except (SymptomLogError, DateOutOfRangeError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return SymptomEntryRead.model_validate(entry)
