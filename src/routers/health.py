"""Health check endpoint — public, no auth required."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from src.cycle_engine.config_loader import get_engine_config
from src.dependencies import AppSettings

router = APIRouter(tags=["system"])
logger = logging.getLogger("lunaflow.health")


@router.get("/health")
async def health_check(settings: AppSettings) -> dict:
    """Liveness probe. Returns 200 if the API process is up.

    Reports ``degraded`` when the engine config cannot be loaded.
    """
    engine_version = None
    try:
        engine_version = get_engine_config().version
    except (OSError, ValueError) as exc:
        logger.warning("Health check engine config probe failed: %s", exc)

    return {
        "status": "healthy" if engine_version else "degraded",
        "version": settings.app_version,
        "environment": settings.environment,
        "engine_config": engine_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
