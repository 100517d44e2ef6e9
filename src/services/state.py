"""In-process cycle state: the profile, period log and symptom log.

The API holds one ``CycleState`` per process.  Durable storage and sync with
a remote copy belong to a collaborating persistence layer; this module only
keeps the materialized in-memory representation the engine reads.

Usage::

    from src.services.state import get_state

    state = get_state()
    state.update_profile(anchor_date=date(2026, 2, 1))
    state.log_symptoms("2026-02-02", [("cramps", "mild")])
"""

from __future__ import annotations

import logging
import threading
from datetime import date, datetime
from typing import Any, Iterable

from src.cycle_engine.config_loader import EngineConfig, get_engine_config
from src.cycle_engine.cycle_phase import CyclePhaseCalculator
from src.cycle_engine.dates import parse_iso_date
from src.cycle_engine.fertility import FertilityCalculator
from src.cycle_engine.lunar import LunarPhaseCalculator
from src.cycle_engine.period_history import CycleStats, PeriodHistory, PeriodRecord
from src.cycle_engine.profile import CyclePhase, CycleProfile
from src.cycle_engine.resolver import PhaseResolver, ResolvedPhase
from src.cycle_engine.symptoms import LoggedSymptom, SymptomEntry, SymptomPatternEngine

logger = logging.getLogger("lunaflow.state")


class CycleState:
    """Everything the engine reads for one user, plus the calculators over it."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or get_engine_config()
        self.cycle = CyclePhaseCalculator(self.config)
        self.lunar = LunarPhaseCalculator()
        self.resolver = PhaseResolver(self.cycle, self.lunar)
        self.fertility = FertilityCalculator(self.config, self.cycle)

        self.profile = CycleProfile.default(self.config)
        self.periods = PeriodHistory(config=self.config)
        self.symptoms = SymptomPatternEngine(config=self.config)
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    def update_profile(self, **changes: Any) -> CycleProfile:
        """Apply settings changes; the profile is validated before it is stored.

        Raises:
            ProfileValidationError: If the result would be degenerate.
        """
        with self._lock:
            self.profile = self.profile.updated(self.config, **changes)
        return self.profile

    def reset(self) -> None:
        """Clear the profile and period history (onboarding reset).

        Symptom entries are never removed automatically and survive a reset.
        """
        with self._lock:
            self.profile = CycleProfile.default(self.config)
            self.periods = PeriodHistory(config=self.config)
        logger.info("Cycle profile and period history reset")

    def resolve_phase(self, now: date | datetime) -> ResolvedPhase:
        return self.resolver.resolve(self.profile, now)

    # ------------------------------------------------------------------
    # Periods
    # ------------------------------------------------------------------

    def log_period_start(self, start: date, notes: str | None = None) -> PeriodRecord:
        """Log a period start and move the anchor to it.

        Once enough cycles are tracked, the profile's cycle length follows
        the history average.
        """
        with self._lock:
            record = self.periods.log_period_start(
                start, self.profile.period_length, notes=notes
            )
            changes: dict[str, Any] = {}
            anchor = self.profile.anchor_date
            if anchor is None or record.start_date > anchor:
                changes["anchor_date"] = record.start_date

            stats = self.cycle_stats()
            if stats.total_cycles_tracked >= self.config.period_history.average_update_min_cycles:
                changes["cycle_length"] = round(stats.average_cycle_length)
            self.profile = self._apply_learned(changes)
        return record

    def log_period_end(self, period_id: str, end: date) -> PeriodRecord:
        """Log a period end; the profile's period length follows the history average."""
        with self._lock:
            record = self.periods.log_period_end(period_id, end)
            stats = self.cycle_stats()
            if stats.total_cycles_tracked >= 1:
                self.profile = self._apply_learned(
                    {"period_length": round(stats.average_period_length)}
                )
        return record

    def delete_period(self, period_id: str) -> PeriodRecord:
        with self._lock:
            return self.periods.delete_period(period_id)

    def cycle_stats(self) -> CycleStats:
        return self.periods.cycle_stats(
            self.profile.cycle_length, self.profile.period_length
        )

    def _apply_learned(self, changes: dict[str, Any]) -> CycleProfile:
        """Apply history-derived values, dropping any that would be degenerate."""
        profile = self.profile
        for key, value in changes.items():
            try:
                profile = profile.updated(self.config, **{key: value})
            except ValueError as exc:
                logger.warning("Ignoring learned %s=%s: %s", key, value, exc)
        return profile

    # ------------------------------------------------------------------
    # Symptoms
    # ------------------------------------------------------------------

    def log_symptoms(
        self,
        entry_date: str | date,
        symptoms: Iterable[LoggedSymptom | tuple[str, str]],
        phase: CyclePhase | None = None,
        cycle_day: int | None = None,
        notes: str | None = None,
        auto_tag: bool = True,
    ) -> SymptomEntry:
        """Log symptoms, tagging the entry with the phase resolved for its date.

        An explicit ``phase`` wins over the resolved one.  With ``auto_tag``
        off, the entry is stored with whatever tags were passed.
        """
        if auto_tag and phase is None:
            resolved = self.resolve_phase(parse_iso_date(entry_date))
            phase = resolved.phase
            if cycle_day is None:
                cycle_day = resolved.cycle_day
        return self.symptoms.log_symptoms(
            entry_date, symptoms, phase, cycle_day, notes
        )


# ---------------------------------------------------------------------------
# Global singleton
# ---------------------------------------------------------------------------

_state: CycleState | None = None
_state_lock = threading.Lock()


def get_state() -> CycleState:
    """Return the process-wide CycleState, creating it on first call."""
    global _state
    if _state is None:
        with _state_lock:
            if _state is None:  # double-checked locking
                _state = CycleState()
    return _state


def reset_state(config: EngineConfig | None = None) -> CycleState:
    """Replace the process-wide state with a fresh one."""
    global _state
    with _state_lock:
        _state = CycleState(config)
    logger.info("In-process cycle state replaced")
    return _state
