"""Luna Flow API — FastAPI application entry point.

Run locally:
    uvicorn src.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config import get_settings
from src.cycle_engine.config_loader import get_engine_config, reload_engine_config
from src.middleware.security import SecurityHeadersMiddleware
from src.routers import cycle, health, moon, symptoms
from src.services.state import reset_state

# ---------- Logging ----------

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("lunaflow")


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks."""
    settings = get_settings()
    logger.info(
        "Starting Luna Flow API v%s [%s]",
        settings.app_version,
        settings.environment,
    )
    if settings.engine_config_path:
        config = reload_engine_config(Path(settings.engine_config_path))
        reset_state(config)
    else:
        config = get_engine_config()
    logger.info(
        "Engine config v%s: phase boundaries %d/%d, prediction threshold %.0f%%",
        config.version,
        config.phase_boundaries.follicular_end_day,
        config.phase_boundaries.ovulatory_end_day,
        config.predictions.likelihood_threshold_pct,
    )
    yield
    logger.info("Luna Flow API shut down")


# ---------- App factory ----------

def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Luna Flow API",
        description=(
            "Cycle phase inference, lunar phase correspondence, and symptom "
            "pattern analytics."
        ),
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ---------- Middleware (order matters — outermost first) ----------

    app.add_middleware(
        SecurityHeadersMiddleware,
        enable_hsts=settings.environment != "development",
    )

    # CORS — must be the innermost middleware so it can handle preflight
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- Health check (outside v1 prefix — always at /health) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    v1_prefix = "/api/v1"

    app.include_router(cycle.router, prefix=v1_prefix)
    app.include_router(moon.router, prefix=v1_prefix)
    app.include_router(symptoms.router, prefix=v1_prefix)

    return app


app = create_app()
