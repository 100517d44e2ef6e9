"""Symptom log and per-phase pattern analytics.

Keeps one ``SymptomEntry`` per calendar date and aggregates the log into
per-(symptom, phase) statistics:

- occurrence_count:    tagged entries in which the symptom appears
- total_days_in_phase: tagged entries for that phase, whatever was logged
- average_severity:    running mean of mild=1 / moderate=2 / severe=3

Predictions surface every symptom whose likelihood within a phase
(occurrence_count / total_days_in_phase) reaches the configured threshold.

Entries logged without a phase tag are kept and counted by ``most_common()``
but never take part in pattern computation.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Iterable

from src.cycle_engine.config_loader import EngineConfig, get_engine_config
from src.cycle_engine.dates import as_date, parse_iso_date
from src.cycle_engine.errors import EntryNotFoundError, SymptomLogError
from src.cycle_engine.profile import CyclePhase

logger = logging.getLogger("lunaflow.cycle_engine.symptoms")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Severity(str, Enum):
    mild = "mild"
    moderate = "moderate"
    severe = "severe"

    @property
    def score(self) -> int:
        return SEVERITY_SCORES[self]


SEVERITY_SCORES: dict[Severity, int] = {
    Severity.mild: 1,
    Severity.moderate: 2,
    Severity.severe: 3,
}


@dataclass(frozen=True)
class LoggedSymptom:
    symptom_id: str
    severity: Severity


@dataclass
class SymptomEntry:
    """One day's symptom log.

    Attributes:
        entry_id:               Stable identifier, survives upserts.
        date:                   Calendar date; unique across the log.
        symptoms:               Logged symptoms, at most one per symptom_id.
        cycle_phase_at_logging: Phase tag from the first write for this date.
        cycle_day_at_logging:   Cycle day tag from the first write for this date.
        notes:                  Free text.
        created_at:             First write.
        updated_at:             Most recent write.
    """

    entry_id: str
    date: date
    symptoms: list[LoggedSymptom]
    cycle_phase_at_logging: CyclePhase | None = None
    cycle_day_at_logging: int | None = None
    notes: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def symptom_ids(self) -> list[str]:
        return [s.symptom_id for s in self.symptoms]


@dataclass(frozen=True)
class SymptomPattern:
    symptom_id: str
    phase: CyclePhase
    occurrence_count: int
    total_days_in_phase: int
    average_severity: float

    @property
    def relative_frequency(self) -> float:
        if self.total_days_in_phase == 0:
            return 0.0
        return self.occurrence_count / self.total_days_in_phase


@dataclass(frozen=True)
class PredictedSymptom:
    symptom_id: str
    likelihood_percent: float
    average_severity: float


def _normalize_symptoms(symptoms: Iterable[LoggedSymptom | tuple[str, str]]) -> list[LoggedSymptom]:
    """Coerce ``(symptom_id, severity)`` pairs and reject duplicate ids."""
    normalized: list[LoggedSymptom] = []
    seen: set[str] = set()
    for item in symptoms:
        if isinstance(item, LoggedSymptom):
            logged = item
        else:
            symptom_id, severity = item
            try:
                logged = LoggedSymptom(symptom_id=symptom_id, severity=Severity(severity))
            except ValueError as exc:
                raise SymptomLogError(
                    f"Unknown severity {severity!r} for symptom {symptom_id!r}"
                ) from exc
        if not logged.symptom_id:
            raise SymptomLogError("symptom_id must not be empty")
        if logged.symptom_id in seen:
            raise SymptomLogError(f"Symptom {logged.symptom_id!r} logged twice in one entry")
        seen.add(logged.symptom_id)
        normalized.append(logged)
    return normalized


class SymptomPatternEngine:
    """Upsert-by-date symptom log with pattern and prediction queries.

    ``log_symptoms``, ``update_entry`` and ``delete_entry`` are the only
    mutators; each runs under a lock and drops the memoized pattern
    aggregate, which is rebuilt on the next read.

    Usage::

        engine = SymptomPatternEngine()
        engine.log_symptoms("2026-02-01", [("cramps", "mild")], CyclePhase.menstrual, 1)
        engine.predicted_symptoms(CyclePhase.menstrual)
    """

    def __init__(
        self,
        entries: Iterable[SymptomEntry] | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self._config = config or get_engine_config()
        self._entries: dict[date, SymptomEntry] = {}
        self._lock = threading.Lock()
        self._patterns: list[SymptomPattern] | None = None
        for entry in entries or []:
            if entry.date in self._entries:
                raise SymptomLogError(f"Duplicate entry for {entry.date.isoformat()}")
            self._entries[entry.date] = entry

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[SymptomEntry]:
        """All entries, newest date first."""
        return sorted(self._entries.values(), key=lambda e: e.date, reverse=True)

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def log_symptoms(
        self,
        entry_date: str | date,
        symptoms: Iterable[LoggedSymptom | tuple[str, str]],
        phase: CyclePhase | None = None,
        cycle_day: int | None = None,
        notes: str | None = None,
        logged_at: datetime | None = None,
    ) -> SymptomEntry:
        """Create or replace the entry for ``entry_date``.

        Content is last-write-wins: symptoms, notes and updated_at are
        replaced.  The phase and cycle-day tags, created_at and entry_id are
        kept from the first write for that date.

        Raises:
            SymptomLogError: On duplicate symptom ids or an unknown severity.
        """
        day = parse_iso_date(entry_date)
        logged = _normalize_symptoms(symptoms)
        stamp = logged_at or utc_now()

        with self._lock:
            existing = self._entries.get(day)
            if existing is not None:
                existing.symptoms = logged
                existing.notes = notes
                existing.updated_at = stamp
                entry = existing
                logger.debug("Updated symptom entry for %s", day.isoformat())
            else:
                entry = SymptomEntry(
                    entry_id=str(uuid.uuid4()),
                    date=day,
                    symptoms=logged,
                    cycle_phase_at_logging=phase,
                    cycle_day_at_logging=cycle_day,
                    notes=notes,
                    created_at=stamp,
                    updated_at=stamp,
                )
                self._entries[day] = entry
                logger.debug(
                    "Created symptom entry for %s (phase=%s)",
                    day.isoformat(),
                    phase.value if phase else None,
                )
            self._patterns = None
        return entry

    def update_entry(
        self,
        entry_id: str,
        symptoms: Iterable[LoggedSymptom | tuple[str, str]],
        notes: str | None = None,
        updated_at: datetime | None = None,
    ) -> SymptomEntry:
        """Replace the symptoms and notes of an entry addressed by id.

        Raises:
            EntryNotFoundError: If no entry has ``entry_id``.
        """
        logged = _normalize_symptoms(symptoms)
        with self._lock:
            entry = self._find(entry_id)
            entry.symptoms = logged
            entry.notes = notes
            entry.updated_at = updated_at or utc_now()
            self._patterns = None
        return entry

    def delete_entry(self, entry_id: str) -> SymptomEntry:
        """Remove an entry by id and return it.

        Raises:
            EntryNotFoundError: If no entry has ``entry_id``.
        """
        with self._lock:
            entry = self._find(entry_id)
            del self._entries[entry.date]
            self._patterns = None
        logger.info("Deleted symptom entry %s (%s)", entry_id, entry.date.isoformat())
        return entry

    def _find(self, entry_id: str) -> SymptomEntry:
        for entry in self._entries.values():
            if entry.entry_id == entry_id:
                return entry
        raise EntryNotFoundError(f"Symptom entry {entry_id} not found")

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    def phase_day_counts(self) -> dict[CyclePhase, int]:
        """Number of tagged entries per phase."""
        counts: dict[CyclePhase, int] = {}
        for entry in list(self._entries.values()):
            if entry.cycle_phase_at_logging is not None:
                phase = entry.cycle_phase_at_logging
                counts[phase] = counts.get(phase, 0) + 1
        return counts

    def patterns(self) -> list[SymptomPattern]:
        """Per-(symptom, phase) statistics, most frequent within phase first."""
        with self._lock:
            if self._patterns is None:
                self._patterns = self._compute_patterns()
            return list(self._patterns)

    def _compute_patterns(self) -> list[SymptomPattern]:
        day_counts = self.phase_day_counts()

        counts: dict[tuple[str, CyclePhase], int] = {}
        averages: dict[tuple[str, CyclePhase], float] = {}
        for entry in self.entries:
            phase = entry.cycle_phase_at_logging
            if phase is None:
                continue
            for symptom in entry.symptoms:
                key = (symptom.symptom_id, phase)
                n = counts.get(key, 0) + 1
                previous = averages.get(key, 0.0)
                counts[key] = n
                averages[key] = (previous * (n - 1) + symptom.severity.score) / n

        patterns = [
            SymptomPattern(
                symptom_id=symptom_id,
                phase=phase,
                occurrence_count=count,
                total_days_in_phase=day_counts[phase],
                average_severity=averages[(symptom_id, phase)],
            )
            for (symptom_id, phase), count in counts.items()
        ]
        patterns.sort(key=lambda p: p.relative_frequency, reverse=True)
        logger.debug(
            "Computed %d symptom patterns from %d entries", len(patterns), len(self._entries)
        )
        return patterns

    def predicted_symptoms(self, phase: CyclePhase) -> list[PredictedSymptom]:
        """Symptoms likely in ``phase``, most likely first.

        Returns an empty list when no entry has been tagged with ``phase``.
        """
        if self.phase_day_counts().get(phase, 0) == 0:
            return []

        threshold = self._config.predictions.likelihood_threshold_pct
        predictions = []
        for pattern in self.patterns():
            if pattern.phase is not phase:
                continue
            likelihood = min(
                pattern.occurrence_count * 100 / pattern.total_days_in_phase, 100.0
            )
            if likelihood >= threshold:
                predictions.append(
                    PredictedSymptom(
                        symptom_id=pattern.symptom_id,
                        likelihood_percent=likelihood,
                        average_severity=pattern.average_severity,
                    )
                )
        predictions.sort(key=lambda p: p.likelihood_percent, reverse=True)
        return predictions

    def most_common(self, limit: int | None = None) -> list[tuple[str, int]]:
        """Raw occurrence counts across every entry, tagged or not."""
        if limit is None:
            limit = self._config.predictions.most_common_limit
        counter: Counter[str] = Counter()
        for entry in self.entries:
            counter.update(entry.symptom_ids)
        return counter.most_common(max(limit, 0))

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def entries_in_phase(self, phase: CyclePhase) -> list[SymptomEntry]:
        return [e for e in self.entries if e.cycle_phase_at_logging is phase]

    def entry_for_date(self, entry_date: str | date) -> SymptomEntry | None:
        return self._entries.get(parse_iso_date(entry_date))

    def entries_since(self, days: int, today: date | datetime) -> list[SymptomEntry]:
        """Entries dated on or after ``today - days``."""
        cutoff = as_date(today) - timedelta(days=days)
        return [e for e in self.entries if e.date >= cutoff]
