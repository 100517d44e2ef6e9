"""Shared fixtures for the cycle engine test suite."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from src.cycle_engine.config_loader import EngineConfig, load_engine_config
from src.cycle_engine.cycle_phase import CyclePhaseCalculator
from src.cycle_engine.profile import CycleProfile, LifeStage
from src.cycle_engine.symptoms import SymptomPatternEngine

# Canonical anchor used across the suite: first day of a period
TEST_ANCHOR = date(2026, 2, 1)
TEST_DATE = date(2026, 2, 23)

# Mid-morning, so floor/ceil day arithmetic is exercised
TEST_NOW = datetime(2026, 2, 23, 9, 30)


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def engine_config() -> EngineConfig:
    """Load the real engine config for tests."""
    return load_engine_config()


# ---------------------------------------------------------------------------
# Profiles and calculators
# ---------------------------------------------------------------------------


@pytest.fixture
def profile() -> CycleProfile:
    """28-day cycle, 5-day period, anchored on TEST_ANCHOR."""
    return CycleProfile(anchor_date=TEST_ANCHOR, cycle_length=28, period_length=5)


@pytest.fixture
def unanchored_profile() -> CycleProfile:
    return CycleProfile()


@pytest.fixture
def menopause_profile() -> CycleProfile:
    return CycleProfile(life_stage=LifeStage.menopause)


@pytest.fixture
def calculator(engine_config: EngineConfig) -> CyclePhaseCalculator:
    return CyclePhaseCalculator(engine_config)


@pytest.fixture
def symptom_engine(engine_config: EngineConfig) -> SymptomPatternEngine:
    return SymptomPatternEngine(config=engine_config)
