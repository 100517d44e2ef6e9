"""Life-stage dispatch: which signal drives a user's phase.

Regular cycles are measured from the anchor date; every other life stage uses
the lunar correspondence as a proxy.  Dispatch is a lookup table, so a new
life stage is one entry in ``PHASE_SOURCES``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Callable

from src.cycle_engine.cycle_phase import CyclePhaseCalculator
from src.cycle_engine.lunar import LunarPhaseCalculator
from src.cycle_engine.profile import CyclePhase, CycleProfile, LifeStage


class PhaseSource(str, Enum):
    cycle = "cycle"
    lunar = "lunar"


@dataclass(frozen=True)
class ResolvedPhase:
    """Phase tag for a moment, with where it came from.

    ``phase`` is None when the profile has no anchor date and the life stage
    depends on one.  ``cycle_day`` is only set for cycle-derived phases.
    """

    phase: CyclePhase | None
    cycle_day: int | None
    source: PhaseSource


class PhaseResolver:
    """Resolve the phase tag used for phase-dependent content and symptom logs."""

    def __init__(
        self,
        cycle_calculator: CyclePhaseCalculator | None = None,
        lunar_calculator: LunarPhaseCalculator | None = None,
    ) -> None:
        self.cycle = cycle_calculator or CyclePhaseCalculator()
        self.lunar = lunar_calculator or LunarPhaseCalculator()

    def from_cycle(self, profile: CycleProfile, now: date | datetime) -> ResolvedPhase:
        snap = self.cycle.snapshot(profile, now)
        if snap is None:
            return ResolvedPhase(phase=None, cycle_day=None, source=PhaseSource.cycle)
        return ResolvedPhase(
            phase=snap.phase, cycle_day=snap.day_of_cycle, source=PhaseSource.cycle
        )

    def from_moon(self, profile: CycleProfile, now: date | datetime) -> ResolvedPhase:
        lunar_phase = self.lunar.moon_phase(now)
        return ResolvedPhase(
            phase=self.lunar.cycle_phase_equivalent(lunar_phase),
            cycle_day=None,
            source=PhaseSource.lunar,
        )

    def resolve(self, profile: CycleProfile, now: date | datetime) -> ResolvedPhase:
        return PHASE_SOURCES[profile.life_stage](self, profile, now)


PHASE_SOURCES: dict[
    LifeStage, Callable[[PhaseResolver, CycleProfile, date | datetime], ResolvedPhase]
] = {
    LifeStage.regular: PhaseResolver.from_cycle,
    LifeStage.perimenopause: PhaseResolver.from_moon,
    LifeStage.menopause: PhaseResolver.from_moon,
    LifeStage.postmenopause: PhaseResolver.from_moon,
}
