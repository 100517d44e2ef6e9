"""Lunar phase calculator and lunar → cycle phase correspondence.

Moon age is the time since a reference new moon modulo the mean synodic
month.  The age is bucketed into eight named phases whose widths, in
sixteenths of the lunar cycle, follow the pattern 1-3-1-3-1-3-1-3: the four
principal phases (new, first quarter, full, last quarter) get a narrow
1/16 window and the four intermediate phases the 3/16 windows between them.

For life stages without a measurable cycle, each lunar phase stands in for one
cycle phase (two lunar phases per cycle phase).
"""

from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from src.cycle_engine.dates import as_datetime, fractional_days_between
from src.cycle_engine.errors import DateOutOfRangeError
from src.cycle_engine.profile import CyclePhase

logger = logging.getLogger("lunaflow.cycle_engine.lunar")

# A historical new moon used as the reference epoch
KNOWN_NEW_MOON = datetime(2000, 1, 6, 18, 14, 0)

# Mean synodic month in days
LUNAR_CYCLE_DAYS = 29.53058867


class LunarPhase(str, Enum):
    new_moon = "new_moon"
    waxing_crescent = "waxing_crescent"
    first_quarter = "first_quarter"
    waxing_gibbous = "waxing_gibbous"
    full_moon = "full_moon"
    waning_gibbous = "waning_gibbous"
    last_quarter = "last_quarter"
    waning_crescent = "waning_crescent"


# Phases in cycle order
LUNAR_PHASES: tuple[LunarPhase, ...] = tuple(LunarPhase)

# Lower edge of every phase after new_moon, in sixteenths of the cycle
_BOUNDARY_SIXTEENTHS = (1, 4, 5, 8, 9, 12, 13)

PHASE_BOUNDARIES_DAYS: tuple[float, ...] = tuple(
    LUNAR_CYCLE_DAYS * k / 16 for k in _BOUNDARY_SIXTEENTHS
)

CYCLE_PHASE_EQUIVALENTS: dict[LunarPhase, CyclePhase] = {
    LunarPhase.new_moon: CyclePhase.menstrual,
    LunarPhase.waxing_crescent: CyclePhase.follicular,
    LunarPhase.first_quarter: CyclePhase.follicular,
    LunarPhase.waxing_gibbous: CyclePhase.ovulatory,
    LunarPhase.full_moon: CyclePhase.ovulatory,
    LunarPhase.waning_gibbous: CyclePhase.luteal,
    LunarPhase.last_quarter: CyclePhase.luteal,
    LunarPhase.waning_crescent: CyclePhase.menstrual,
}


@dataclass(frozen=True)
class MoonPhaseInfo:
    """Display metadata for a lunar phase."""

    name: str
    description: str
    energy: str


MOON_PHASE_INFO: dict[LunarPhase, MoonPhaseInfo] = {
    LunarPhase.new_moon: MoonPhaseInfo(
        "New Moon",
        "A time for rest, reflection, and setting intentions.",
        "Inward & Restorative",
    ),
    LunarPhase.waxing_crescent: MoonPhaseInfo(
        "Waxing Crescent",
        "Fresh energy emerges. Plant seeds for new beginnings.",
        "Rising & Hopeful",
    ),
    LunarPhase.first_quarter: MoonPhaseInfo(
        "First Quarter",
        "Take action on your intentions. Build momentum.",
        "Active & Determined",
    ),
    LunarPhase.waxing_gibbous: MoonPhaseInfo(
        "Waxing Gibbous",
        "Refine and adjust. Trust the process.",
        "Building & Refining",
    ),
    LunarPhase.full_moon: MoonPhaseInfo(
        "Full Moon",
        "Peak energy and illumination. Celebrate your progress.",
        "High & Radiant",
    ),
    LunarPhase.waning_gibbous: MoonPhaseInfo(
        "Waning Gibbous",
        "Share your wisdom. Practice gratitude.",
        "Generous & Grateful",
    ),
    LunarPhase.last_quarter: MoonPhaseInfo(
        "Last Quarter",
        "Release what no longer serves you. Forgive and let go.",
        "Releasing & Clearing",
    ),
    LunarPhase.waning_crescent: MoonPhaseInfo(
        "Waning Crescent",
        "Rest and surrender. Prepare for renewal.",
        "Restful & Surrendering",
    ),
}


@dataclass(frozen=True)
class MoonSnapshot:
    """Lunar state at one instant.

    Attributes:
        moon_age_days:             Days since the last new moon, in [0, LUNAR_CYCLE_DAYS).
        lunar_phase:               Named phase bucket.
        corresponding_cycle_phase: Cycle phase this lunar phase stands in for.
    """

    moon_age_days: float
    lunar_phase: LunarPhase
    corresponding_cycle_phase: CyclePhase


@dataclass(frozen=True)
class PhaseWindow:
    """The half-open moon-age interval ``[start_day, end_day)`` of one phase."""

    phase: LunarPhase
    start_day: float
    end_day: float

    @property
    def width_days(self) -> float:
        return self.end_day - self.start_day


def cycle_phase_equivalent(lunar_phase: LunarPhase) -> CyclePhase:
    """Cycle phase a lunar phase stands in for when there is no cycle to measure."""
    return CYCLE_PHASE_EQUIVALENTS[lunar_phase]


def phase_windows() -> list[PhaseWindow]:
    """Moon-age interval of every phase, in cycle order."""
    edges = (0.0, *PHASE_BOUNDARIES_DAYS, LUNAR_CYCLE_DAYS)
    return [
        PhaseWindow(phase=phase, start_day=edges[i], end_day=edges[i + 1])
        for i, phase in enumerate(LUNAR_PHASES)
    ]


def phase_for_age(moon_age_days: float) -> LunarPhase:
    """Bucket a moon age into its named phase."""
    return LUNAR_PHASES[bisect.bisect_right(PHASE_BOUNDARIES_DAYS, moon_age_days)]


class LunarPhaseCalculator:
    """Compute the moon's phase for any moment after the reference epoch.

    Usage::

        lunar = LunarPhaseCalculator()
        snap = lunar.snapshot(datetime(2026, 3, 4, 12, 0))
        snap.lunar_phase                # LunarPhase.full_moon
        snap.corresponding_cycle_phase  # CyclePhase.ovulatory
    """

    epoch = KNOWN_NEW_MOON
    cycle_days = LUNAR_CYCLE_DAYS

    def moon_age(self, when: date | datetime) -> float:
        """Days since the most recent new moon.

        Raises:
            DateOutOfRangeError: If ``when`` precedes the reference new moon.
        """
        moment = as_datetime(when)
        if moment < self.epoch:
            raise DateOutOfRangeError(
                f"{moment.isoformat()} is before the lunar reference epoch "
                f"{self.epoch.isoformat()}"
            )
        return fractional_days_between(self.epoch, moment) % self.cycle_days

    def moon_phase(self, when: date | datetime) -> LunarPhase:
        return phase_for_age(self.moon_age(when))

    def cycle_phase_equivalent(self, lunar_phase: LunarPhase) -> CyclePhase:
        return cycle_phase_equivalent(lunar_phase)

    def snapshot(self, when: date | datetime) -> MoonSnapshot:
        age = self.moon_age(when)
        phase = phase_for_age(age)
        return MoonSnapshot(
            moon_age_days=age,
            lunar_phase=phase,
            corresponding_cycle_phase=cycle_phase_equivalent(phase),
        )

