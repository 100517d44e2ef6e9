"""Luna Flow cycle engine.

Pure computation behind every phase-dependent screen: no I/O, no clock.
Callers pass "now" explicitly.

Modules:
    cycle_phase     — Day of cycle, phase, progress, next period start
    lunar           — Moon age, 8-phase bucketing, lunar → cycle phase table
    symptoms        — Upsert-by-date symptom log, per-phase patterns, predictions
    period_history  — Logged periods and cycle statistics
    fertility       — Calendar ovulation and fertile window estimates
    resolver        — Life-stage dispatch between cycle and lunar phase
    config_loader   — Load/validate/hot-reload engine_config.yaml
"""

from src.cycle_engine.config_loader import EngineConfig, get_engine_config
from src.cycle_engine.cycle_phase import CyclePhaseCalculator, PhaseSnapshot
from src.cycle_engine.lunar import LunarPhase, LunarPhaseCalculator, MoonSnapshot
from src.cycle_engine.profile import CyclePhase, CycleProfile, LifeStage
from src.cycle_engine.resolver import PhaseResolver, ResolvedPhase
from src.cycle_engine.symptoms import (
    PredictedSymptom,
    Severity,
    SymptomEntry,
    SymptomPattern,
    SymptomPatternEngine,
)

__all__ = [
    "CyclePhase",
    "CyclePhaseCalculator",
    "CycleProfile",
    "EngineConfig",
    "LifeStage",
    "LunarPhase",
    "LunarPhaseCalculator",
    "MoonSnapshot",
    "PhaseResolver",
    "PhaseSnapshot",
    "PredictedSymptom",
    "ResolvedPhase",
    "Severity",
    "SymptomEntry",
    "SymptomPattern",
    "SymptomPatternEngine",
    "get_engine_config",
]
