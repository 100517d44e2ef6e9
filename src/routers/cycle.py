"""Cycle profile, phase, period history and fertility endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Response

from src.cycle_engine.cycle_phase import PHASE_INFO
from src.cycle_engine.errors import DateOutOfRangeError, EntryNotFoundError, ProfileValidationError
from src.dependencies import Now, State
from src.models.base import ErrorDetail
from src.models.cycle import (
    CycleProfileRead,
    CycleProfileUpdate,
    CycleStatsRead,
    FertilityRead,
    PeriodEndUpdate,
    PeriodRead,
    PeriodStartCreate,
    PhaseInfoRead,
    PhaseSnapshotRead,
    PhaseStatusRead,
    ResolvedPhaseRead,
)

router = APIRouter(prefix="/cycle", tags=["cycle"])


# ---------- Profile ----------


@router.get("/profile", response_model=CycleProfileRead)
async def get_profile(state: State) -> Any:
    return CycleProfileRead.model_validate(state.profile)


@router.put(
    "/profile",
    response_model=CycleProfileRead,
    responses={422: {"model": ErrorDetail}},
)
async def update_profile(state: State, body: CycleProfileUpdate) -> Any:
    # An explicit null clears the anchor; other fields ignore null
    changes = {
        key: value
        for key, value in body.model_dump(exclude_unset=True).items()
        if value is not None or key == "anchor_date"
    }
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")

    try:
        profile = state.update_profile(**changes)
    except ProfileValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return CycleProfileRead.model_validate(profile)


@router.delete("/profile", status_code=204)
async def reset_profile(state: State) -> Response:
    state.reset()
    return Response(status_code=204)


# ---------- Phase ----------


@router.get("/phase", response_model=PhaseStatusRead)
async def current_phase(state: State, now: Now) -> Any:
    """Current cycle snapshot, or ``has_anchor: false`` when no period is known."""
    snapshot = state.cycle.snapshot(state.profile, now)
    if snapshot is None:
        return PhaseStatusRead(has_anchor=False)
    return PhaseStatusRead(
        has_anchor=True,
        snapshot=PhaseSnapshotRead.model_validate(snapshot),
        info=PhaseInfoRead.model_validate(PHASE_INFO[snapshot.phase]),
    )


@router.get(
    "/resolved-phase",
    response_model=ResolvedPhaseRead,
    responses={422: {"model": ErrorDetail}},
)
async def resolved_phase(state: State, now: Now) -> Any:
    """Phase driving content for this life stage (cycle or lunar proxy)."""
    try:
        resolved = state.resolve_phase(now)
    except DateOutOfRangeError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return ResolvedPhaseRead.model_validate(resolved)


@router.get("/fertility", response_model=FertilityRead)
async def fertility(state: State, now: Now) -> Any:
    window = state.fertility.current_fertile_window(state.profile, now)
    if window is None:
        return FertilityRead()
    return FertilityRead(
        fertile_window_start=window.start,
        fertile_window_end=window.end,
        ovulation_date=window.ovulation_date,
        in_period=state.fertility.is_date_in_period(state.profile, state.periods, now, now),
        in_fertile_window=state.fertility.is_date_in_fertile_window(state.profile, now, now),
        is_ovulation_day=state.fertility.is_ovulation_day(state.profile, now, now),
    )


# ---------- Period history ----------


@router.get("/periods", response_model=list[PeriodRead])
async def list_periods(state: State) -> Any:
    return [PeriodRead.model_validate(r) for r in state.periods.records]


@router.post("/periods", response_model=PeriodRead, status_code=201)
async def log_period_start(state: State, body: PeriodStartCreate) -> Any:
    record = state.log_period_start(body.start_date, notes=body.notes)
    return PeriodRead.model_validate(record)


@router.patch(
    "/periods/{period_id}/end",
    response_model=PeriodRead,
    responses={404: {"model": ErrorDetail}},
)
async def log_period_end(period_id: str, state: State, body: PeriodEndUpdate) -> Any:
    try:
        record = state.log_period_end(period_id, body.end_date)
    except EntryNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Period not found") from exc
    return PeriodRead.model_validate(record)


@router.delete(
    "/periods/{period_id}",
    status_code=204,
    responses={404: {"model": ErrorDetail}},
)
async def delete_period(period_id: str, state: State) -> Response:
    try:
        state.delete_period(period_id)
    except EntryNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Period not found") from exc
    return Response(status_code=204)


@router.get("/stats", response_model=CycleStatsRead)
async def cycle_stats(state: State) -> Any:
    return CycleStatsRead.model_validate(state.cycle_stats())
