"""Period log and cycle statistics.

Each logged period start yields a ``PeriodRecord``; the cycle length of a
record is the gap from the previous start.  ``cycle_stats()`` averages those
gaps and flags irregularity when cycles vary by more than a week or fall
outside the 21–35 day range.
"""

from __future__ import annotations

import dataclasses
import logging
import statistics
import uuid
from dataclasses import dataclass
from datetime import date

from src.cycle_engine.config_loader import EngineConfig, get_engine_config
from src.cycle_engine.dates import add_days, parse_iso_date
from src.cycle_engine.errors import EntryNotFoundError

logger = logging.getLogger("lunaflow.cycle_engine.period_history")


@dataclass
class PeriodRecord:
    """A single logged period.

    Attributes:
        period_id:     Stable identifier.
        start_date:    First day of bleeding.
        period_length: Days of bleeding (profile default until an end is logged).
        end_date:      Last day of bleeding, when logged.
        cycle_length:  Days since the previous logged start, if plausible.
        notes:         Free text.
    """

    period_id: str
    start_date: date
    period_length: int
    end_date: date | None = None
    cycle_length: int | None = None
    notes: str | None = None

    @property
    def last_day(self) -> date:
        if self.end_date is not None:
            return self.end_date
        return add_days(self.start_date, self.period_length - 1)

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.last_day


@dataclass(frozen=True)
class CycleStats:
    """Summary of the logged period history.

    Attributes:
        average_cycle_length:  Mean gap between consecutive starts.
        average_period_length: Mean logged period length.
        min_cycle_length:      Shortest gap.
        max_cycle_length:      Longest gap.
        is_irregular:          Variation above threshold or any gap out of range.
        total_cycles_tracked:  Number of logged periods.
        last_cycle_length:     Most recent gap.
        last_period_length:    Most recent period length.
    """

    average_cycle_length: float
    average_period_length: float
    min_cycle_length: int
    max_cycle_length: int
    is_irregular: bool
    total_cycles_tracked: int
    last_cycle_length: int | None = None
    last_period_length: int | None = None

    @property
    def cycle_length_variation(self) -> int:
        return self.max_cycle_length - self.min_cycle_length


class PeriodHistory:
    """In-memory period log."""

    def __init__(
        self,
        records: list[PeriodRecord] | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self._config = config or get_engine_config()
        self._records: list[PeriodRecord] = list(records or [])

    @property
    def _ph_config(self):
        return self._config.period_history

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> list[PeriodRecord]:
        """All records, oldest start first."""
        return sorted(self._records, key=lambda r: r.start_date)

    def get(self, period_id: str) -> PeriodRecord:
        for record in self._records:
            if record.period_id == period_id:
                return record
        raise EntryNotFoundError(f"Period {period_id} not found")

    def _plausible_gap(self, days: int) -> bool:
        return 0 < days < self._ph_config.max_plausible_cycle_days

    def log_period_start(
        self,
        start: str | date,
        period_length: int,
        notes: str | None = None,
    ) -> PeriodRecord:
        """Record a period start.

        A start already logged for the same date is returned unchanged.

        Args:
            start:         First day of bleeding.
            period_length: Provisional length until an end is logged.
            notes:         Free text.
        """
        day = parse_iso_date(start)
        for record in self._records:
            if record.start_date == day:
                logger.debug("Period start %s already logged", day.isoformat())
                return record

        cycle_length = None
        if self._records:
            latest = max(self._records, key=lambda r: r.start_date)
            gap = (day - latest.start_date).days
            if self._plausible_gap(gap):
                cycle_length = gap

        record = PeriodRecord(
            period_id=str(uuid.uuid4()),
            start_date=day,
            period_length=period_length,
            cycle_length=cycle_length,
            notes=notes,
        )
        self._records.append(record)
        logger.info(
            "Logged period start %s (cycle length %s)", day.isoformat(), cycle_length
        )
        return record

    def log_period_end(self, period_id: str, end: str | date) -> PeriodRecord:
        """Record the last day of a period, clamping its length to [1, max_period_days].

        The stored ``end_date`` always matches the clamped length.
        """
        record = self.get(period_id)
        end_day = parse_iso_date(end)
        length = (end_day - record.start_date).days + 1
        clamped = max(1, min(length, self._ph_config.max_period_days))
        if clamped != length:
            logger.warning(
                "Period %s length %d clamped to %d", period_id, length, clamped
            )
        record.end_date = add_days(record.start_date, clamped - 1)
        record.period_length = clamped
        return record

    def update_period(self, period_id: str, **changes) -> PeriodRecord:
        record = self.get(period_id)
        updated = dataclasses.replace(record, **changes)
        self._records[self._records.index(record)] = updated
        return updated

    def delete_period(self, period_id: str) -> PeriodRecord:
        record = self.get(period_id)
        self._records.remove(record)
        logger.info("Deleted period %s", period_id)
        return record

    def period_for_date(self, day: str | date) -> PeriodRecord | None:
        target = parse_iso_date(day)
        for record in self._records:
            if record.contains(target):
                return record
        return None

    def cycle_stats(
        self, default_cycle_length: int, default_period_length: int
    ) -> CycleStats:
        """Compute averages and irregularity over the whole history.

        Args:
            default_cycle_length:  Used when fewer than two starts are logged.
            default_period_length: Used when no period lengths are logged.
        """
        ph = self._ph_config
        ordered = self.records

        if not ordered:
            return CycleStats(
                average_cycle_length=float(default_cycle_length),
                average_period_length=float(default_period_length),
                min_cycle_length=default_cycle_length,
                max_cycle_length=default_cycle_length,
                is_irregular=False,
                total_cycles_tracked=0,
            )

        cycle_lengths = [
            gap
            for gap in (
                (later.start_date - earlier.start_date).days
                for earlier, later in zip(ordered, ordered[1:])
            )
            if self._plausible_gap(gap)
        ]
        period_lengths = [r.period_length for r in ordered if r.period_length > 0]

        avg_cycle = statistics.mean(cycle_lengths) if cycle_lengths else float(default_cycle_length)
        avg_period = (
            statistics.mean(period_lengths) if period_lengths else float(default_period_length)
        )
        min_cycle = min(cycle_lengths) if cycle_lengths else default_cycle_length
        max_cycle = max(cycle_lengths) if cycle_lengths else default_cycle_length

        out_of_range = any(
            c < ph.regular_cycle_min_days or c > ph.regular_cycle_max_days
            for c in cycle_lengths
        )
        is_irregular = (max_cycle - min_cycle) > ph.irregular_variation_days or out_of_range

        return CycleStats(
            average_cycle_length=float(avg_cycle),
            average_period_length=float(avg_period),
            min_cycle_length=min_cycle,
            max_cycle_length=max_cycle,
            is_irregular=is_irregular,
            total_cycles_tracked=len(ordered),
            last_cycle_length=cycle_lengths[-1] if cycle_lengths else None,
            last_period_length=ordered[-1].period_length,
        )
