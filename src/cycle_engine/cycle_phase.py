"""Cycle phase calculator.

Derives day-of-cycle, phase, phase progress and the next period start from a
single anchor date and the profile's two lengths.  The arithmetic is closed
form over fixed boundaries:

    day_of_cycle = (floor(days since anchor) mod cycle_length) + 1

    1 .. period_length          menstrual
    .. follicular_end_day (13)  follicular
    .. ovulatory_end_day (17)   ovulatory
    .. cycle_length             luteal

The boundaries do not scale with cycle or period length.  Every operation
takes "now" explicitly; nothing here reads the clock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime

from src.cycle_engine.config_loader import EngineConfig, get_engine_config
from src.cycle_engine.dates import add_days, as_date, days_until, whole_days_since
from src.cycle_engine.profile import CyclePhase, CycleProfile

logger = logging.getLogger("lunaflow.cycle_engine.cycle_phase")

# Returned when the profile has no anchor date
DEFAULT_PHASE = CyclePhase.follicular


@dataclass(frozen=True)
class PhaseInfo:
    """Display metadata for a cycle phase."""

    name: str
    description: str
    energy: str


PHASE_INFO: dict[CyclePhase, PhaseInfo] = {
    CyclePhase.menstrual: PhaseInfo(
        name="Menstrual",
        description="Inner Winter - A time for rest, reflection, and gentle self-care.",
        energy="Low & Inward",
    ),
    CyclePhase.follicular: PhaseInfo(
        name="Follicular",
        description="Inner Spring - Fresh energy emerges. Perfect for new beginnings.",
        energy="Rising & Creative",
    ),
    CyclePhase.ovulatory: PhaseInfo(
        name="Ovulatory",
        description="Inner Summer - Peak energy and social magnetism.",
        energy="High & Outward",
    ),
    CyclePhase.luteal: PhaseInfo(
        name="Luteal",
        description="Inner Autumn - Time to complete tasks and turn inward.",
        energy="Winding Down",
    ),
}


@dataclass(frozen=True)
class PhaseSnapshot:
    """Where in the cycle a user is at one instant.

    Attributes:
        day_of_cycle:              1-indexed day within the current cycle.
        phase:                     Current cycle phase.
        progress:                  Fraction of the current phase elapsed.
                                   Not clamped to [0, 1].
        next_occurrence_date:      Next predicted period start.
        days_until_next_occurrence: Whole days until that start (ceil).
    """

    day_of_cycle: int
    phase: CyclePhase
    progress: float
    next_occurrence_date: date
    days_until_next_occurrence: int


class CyclePhaseCalculator:
    """Classify a moment in time against a cycle profile.

    The per-field methods keep the silent defaults for an unset anchor
    (follicular, day 1, no next date).  Use ``snapshot()`` when the caller
    needs to tell "no data" apart from "day 1".

    Usage::

        calc = CyclePhaseCalculator()
        snap = calc.snapshot(profile, now=datetime(2026, 3, 1, 9, 30))
        if snap is None:
            ...  # ask the user for their last period start
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or get_engine_config()

    @property
    def _boundaries(self):
        return self._config.phase_boundaries

    # ------------------------------------------------------------------
    # Day arithmetic
    # ------------------------------------------------------------------

    def days_since_anchor(self, profile: CycleProfile, now: date | datetime) -> int | None:
        if profile.anchor_date is None:
            return None
        return whole_days_since(profile.anchor_date, now)

    def day_of_cycle(self, profile: CycleProfile, now: date | datetime) -> int:
        """Return the 1-indexed cycle day, or 1 when the anchor is unset."""
        elapsed = self.days_since_anchor(profile, now)
        if elapsed is None:
            return 1
        return (elapsed % profile.cycle_length) + 1

    def classify_day(self, day_of_cycle: int, profile: CycleProfile) -> CyclePhase:
        """Map a cycle day onto its phase using the fixed boundaries."""
        b = self._boundaries
        if day_of_cycle <= profile.period_length:
            return CyclePhase.menstrual
        if day_of_cycle <= b.follicular_end_day:
            return CyclePhase.follicular
        if day_of_cycle <= b.ovulatory_end_day:
            return CyclePhase.ovulatory
        return CyclePhase.luteal

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def current_phase(self, profile: CycleProfile, now: date | datetime) -> CyclePhase:
        if profile.anchor_date is None:
            return DEFAULT_PHASE
        return self.classify_day(self.day_of_cycle(profile, now), profile)

    def phase_progress(self, profile: CycleProfile, now: date | datetime) -> float:
        """Fraction of the current phase elapsed.

        Uses phase-specific denominators and applies no clamping, so unusual
        period/cycle lengths can yield values outside [0, 1].  A zero-width
        phase reports 0.0 rather than dividing by zero.
        """
        if profile.anchor_date is None:
            return 0.0

        b = self._boundaries
        day = self.day_of_cycle(profile, now)
        phase = self.classify_day(day, profile)

        if phase is CyclePhase.menstrual:
            numerator, denominator = day, profile.period_length
        elif phase is CyclePhase.follicular:
            numerator = day - profile.period_length
            denominator = b.follicular_end_day - profile.period_length
        elif phase is CyclePhase.ovulatory:
            numerator, denominator = day - b.follicular_end_day, b.ovulatory_days
        else:
            numerator = day - b.ovulatory_end_day
            denominator = profile.cycle_length - b.ovulatory_end_day

        if denominator == 0:
            logger.debug("Zero-width %s phase for profile %s", phase.value, profile)
            return 0.0
        return numerator / denominator

    def current_cycle_start(self, profile: CycleProfile, now: date | datetime) -> date | None:
        """Start date of the cycle containing ``now``."""
        elapsed = self.days_since_anchor(profile, now)
        if elapsed is None:
            return None
        cycle_index = elapsed // profile.cycle_length
        return add_days(profile.anchor_date, cycle_index * profile.cycle_length)

    def next_occurrence_date(self, profile: CycleProfile, now: date | datetime) -> date | None:
        """Smallest ``anchor + k * cycle_length`` that lies after ``now``."""
        start = self.current_cycle_start(profile, now)
        if start is None:
            return None
        return add_days(start, profile.cycle_length)

    def days_until_next_occurrence(self, profile: CycleProfile, now: date | datetime) -> int:
        next_date = self.next_occurrence_date(profile, now)
        if next_date is None:
            return 0
        return days_until(next_date, now)

    def snapshot(self, profile: CycleProfile, now: date | datetime) -> PhaseSnapshot | None:
        """Return the full phase snapshot, or None when the anchor is unset."""
        if profile.anchor_date is None:
            return None

        day = self.day_of_cycle(profile, now)
        next_date = self.next_occurrence_date(profile, now)
        snap = PhaseSnapshot(
            day_of_cycle=day,
            phase=self.classify_day(day, profile),
            progress=self.phase_progress(profile, now),
            next_occurrence_date=next_date,
            days_until_next_occurrence=days_until(next_date, now),
        )
        logger.debug(
            "Phase snapshot for %s: day %d (%s)", as_date(now), snap.day_of_cycle, snap.phase.value
        )
        return snap
