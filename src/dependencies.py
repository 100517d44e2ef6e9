"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, Query

from src.config import Settings, get_settings
from src.services.state import CycleState, get_state


def get_now(
    now: datetime | None = Query(
        default=None,
        description="Moment to evaluate; defaults to the server clock (UTC).",
    ),
) -> datetime:
    """Resolve the caller-supplied "now", falling back to the server clock.

    The engine never reads the clock itself, so this is the only place the
    API introduces wall-clock time.
    """
    return now or datetime.now(timezone.utc)


# Annotated shortcuts for route signatures
AppSettings = Annotated[Settings, Depends(get_settings)]
State = Annotated[CycleState, Depends(get_state)]
Now = Annotated[datetime, Depends(get_now)]
