"""Calendar-based ovulation and fertile window estimates.

Ovulation is placed a fixed luteal length (14 days) before the next period
start; the fertile window spans five days before ovulation to one day after.
These are calendar estimates only, with no temperature or hormone input.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from src.cycle_engine.config_loader import EngineConfig, get_engine_config
from src.cycle_engine.cycle_phase import CyclePhaseCalculator
from src.cycle_engine.dates import add_days, as_date
from src.cycle_engine.period_history import PeriodHistory
from src.cycle_engine.profile import CycleProfile


@dataclass(frozen=True)
class FertileWindow:
    start: date
    end: date
    ovulation_date: date

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end


class FertilityCalculator:
    """Ovulation and period-day checks relative to the cycle containing ``now``."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        cycle_calculator: CyclePhaseCalculator | None = None,
    ) -> None:
        self._config = config or get_engine_config()
        self._cycle = cycle_calculator or CyclePhaseCalculator(self._config)

    def ovulation_estimate(self, profile: CycleProfile, cycle_start: date) -> date:
        return add_days(
            cycle_start, profile.cycle_length - self._config.fertility.luteal_phase_days
        )

    def fertile_window(self, profile: CycleProfile, cycle_start: date) -> FertileWindow:
        fc = self._config.fertility
        ovulation = self.ovulation_estimate(profile, cycle_start)
        return FertileWindow(
            start=add_days(ovulation, -fc.window_days_before_ovulation),
            end=add_days(ovulation, fc.window_days_after_ovulation),
            ovulation_date=ovulation,
        )

    def current_fertile_window(
        self, profile: CycleProfile, now: date | datetime
    ) -> FertileWindow | None:
        start = self._cycle.current_cycle_start(profile, now)
        if start is None:
            return None
        return self.fertile_window(profile, start)

    def is_date_in_period(
        self,
        profile: CycleProfile,
        history: PeriodHistory,
        day: date | datetime,
        now: date | datetime,
    ) -> bool:
        """True if ``day`` falls in a logged period or the predicted current one."""
        target = as_date(day)
        if history.period_for_date(target) is not None:
            return True

        start = self._cycle.current_cycle_start(profile, now)
        if start is None:
            return False
        return start <= target <= add_days(start, profile.period_length - 1)

    def is_date_in_fertile_window(
        self, profile: CycleProfile, day: date | datetime, now: date | datetime
    ) -> bool:
        window = self.current_fertile_window(profile, now)
        return window is not None and as_date(day) in window

    def is_ovulation_day(
        self, profile: CycleProfile, day: date | datetime, now: date | datetime
    ) -> bool:
        window = self.current_fertile_window(profile, now)
        return window is not None and window.ovulation_date == as_date(day)
