"""Lunar phase endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException

from src.cycle_engine.errors import DateOutOfRangeError
from src.cycle_engine.lunar import MOON_PHASE_INFO, cycle_phase_equivalent, phase_windows
from src.dependencies import Now, State
from src.models.base import ErrorDetail
from src.models.cycle import MoonCorrespondenceRead, MoonSnapshotRead

router = APIRouter(prefix="/moon", tags=["moon"])


@router.get(
    "/phase",
    response_model=MoonSnapshotRead,
    responses={422: {"model": ErrorDetail}},
)
async def moon_phase(state: State, now: Now) -> Any:
    try:
        snap = state.lunar.snapshot(now)
    except DateOutOfRangeError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    info = MOON_PHASE_INFO[snap.lunar_phase]
    return MoonSnapshotRead(
        moon_age_days=snap.moon_age_days,
        lunar_phase=snap.lunar_phase,
        corresponding_cycle_phase=snap.corresponding_cycle_phase,
        name=info.name,
        description=info.description,
        energy=info.energy,
    )


@router.get("/correspondence", response_model=list[MoonCorrespondenceRead])
async def correspondence() -> Any:
    """Moon-age window of each lunar phase and the cycle phase it stands in for."""
    return [
        MoonCorrespondenceRead(
            lunar_phase=window.phase,
            cycle_phase=cycle_phase_equivalent(window.phase),
            start_day=window.start_day,
            end_day=window.end_day,
        )
        for window in phase_windows()
    ]
