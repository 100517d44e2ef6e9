"""Load, validate, and hot-reload the Luna Flow engine configuration.

The config lives in ``engine_config.yaml`` alongside this module.  At startup
it is loaded once and cached.  Call ``reload_engine_config()`` to re-read from
disk after an admin update; no restart is required.

Usage::

    from src.cycle_engine.config_loader import get_engine_config

    config = get_engine_config()
    config.phase_boundaries.follicular_end_day   # 13
    config.predictions.likelihood_threshold_pct  # 30.0
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from src.cycle_engine.errors import CycleEngineError

logger = logging.getLogger("lunaflow.cycle_engine.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "engine_config.yaml"

SUPPORTED_BOUNDARY_POLICIES = ("fixed",)


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass
class CycleDefaultsConfig:
    """Profile values used before the user has configured anything."""

    cycle_length: int = 28
    period_length: int = 5


@dataclass
class PhaseBoundaryConfig:
    """Cycle-day boundaries between the four phases.

    Menstrual runs to the profile's period length, follicular to
    ``follicular_end_day``, ovulatory to ``ovulatory_end_day``, and luteal to
    the end of the cycle.
    """

    policy: str = "fixed"
    follicular_end_day: int = 13
    ovulatory_end_day: int = 17

    @property
    def ovulatory_days(self) -> int:
        return self.ovulatory_end_day - self.follicular_end_day


@dataclass
class PredictionConfig:
    """Symptom prediction settings."""

    likelihood_threshold_pct: float = 30.0
    most_common_limit: int = 5


@dataclass
class PeriodHistoryConfig:
    """Period log and cycle statistics settings."""

    max_period_days: int = 14
    max_plausible_cycle_days: int = 100
    regular_cycle_min_days: int = 21
    regular_cycle_max_days: int = 35
    irregular_variation_days: int = 7
    average_update_min_cycles: int = 2


@dataclass
class FertilityConfig:
    """Calendar-based ovulation and fertile window settings."""

    luteal_phase_days: int = 14
    window_days_before_ovulation: int = 5
    window_days_after_ovulation: int = 1


@dataclass
class EngineConfig:
    """Complete, validated engine configuration.

    This is the single in-memory representation of engine_config.yaml.
    All calculators and the symptom engine read from this object.

    Attributes:
        version:          Config schema version string.
        cycle_defaults:   Default cycle and period lengths.
        phase_boundaries: Fixed phase boundary days.
        predictions:      Symptom prediction threshold and limits.
        period_history:   Period log clamping and irregularity rules.
        fertility:        Ovulation / fertile window offsets.
    """

    version: str
    cycle_defaults: CycleDefaultsConfig = field(default_factory=CycleDefaultsConfig)
    phase_boundaries: PhaseBoundaryConfig = field(default_factory=PhaseBoundaryConfig)
    predictions: PredictionConfig = field(default_factory=PredictionConfig)
    period_history: PeriodHistoryConfig = field(default_factory=PeriodHistoryConfig)
    fertility: FertilityConfig = field(default_factory=FertilityConfig)
    _raw: dict = field(default_factory=dict, repr=False)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(CycleEngineError, ValueError):
    """Raised when engine_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Engine config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> EngineConfig:
    """Validate the raw YAML dict and construct an EngineConfig.

    Collects every problem before failing so one bad deploy reports all of
    them at once.

    Args:
        raw: Parsed YAML dict.

    Returns:
        Validated EngineConfig instance.

    Raises:
        ConfigValidationError: If any field is missing or invalid.
    """
    errors: list[str] = []

    def _section(name: str) -> dict:
        value = raw.get(name, {})
        if value is None:
            return {}
        if not isinstance(value, dict):
            errors.append(f"'{name}' must be a mapping")
            return {}
        return value

    def _int(section: dict, key: str, default: int, name: str, minimum: int = 1) -> int:
        value = section.get(key, default)
        try:
            number = int(value)
        except (TypeError, ValueError):
            errors.append(f"{name}.{key} must be an integer, got {value!r}")
            return default
        if number < minimum:
            errors.append(f"{name}.{key} = {number} must be >= {minimum}")
        return number

    version = str(raw.get("version", "1.0"))

    # ── Cycle defaults ──
    cd_raw = _section("cycle_defaults")
    cycle_defaults = CycleDefaultsConfig(
        cycle_length=_int(cd_raw, "cycle_length", 28, "cycle_defaults"),
        period_length=_int(cd_raw, "period_length", 5, "cycle_defaults"),
    )
    if cycle_defaults.period_length >= cycle_defaults.cycle_length:
        errors.append(
            "cycle_defaults.period_length must be shorter than cycle_defaults.cycle_length"
        )

    # ── Phase boundaries ──
    pb_raw = _section("phase_boundaries")
    policy = str(pb_raw.get("policy", "fixed"))
    if policy not in SUPPORTED_BOUNDARY_POLICIES:
        errors.append(
            f"phase_boundaries.policy {policy!r} is not supported "
            f"(expected one of {', '.join(SUPPORTED_BOUNDARY_POLICIES)})"
        )
    boundaries = PhaseBoundaryConfig(
        policy=policy,
        follicular_end_day=_int(pb_raw, "follicular_end_day", 13, "phase_boundaries"),
        ovulatory_end_day=_int(pb_raw, "ovulatory_end_day", 17, "phase_boundaries"),
    )
    if boundaries.ovulatory_end_day <= boundaries.follicular_end_day:
        errors.append(
            "phase_boundaries.ovulatory_end_day must be after follicular_end_day"
        )
    if cycle_defaults.cycle_length <= boundaries.ovulatory_end_day:
        errors.append(
            "cycle_defaults.cycle_length must leave room for a luteal phase "
            f"(> {boundaries.ovulatory_end_day} days)"
        )

    # ── Predictions ──
    pr_raw = _section("predictions")
    threshold_val = pr_raw.get("likelihood_threshold_pct", 30)
    try:
        threshold = float(threshold_val)
    except (TypeError, ValueError):
        errors.append(
            f"predictions.likelihood_threshold_pct must be a number, got {threshold_val!r}"
        )
        threshold = 30.0
    if not (0.0 <= threshold <= 100.0):
        errors.append(
            f"predictions.likelihood_threshold_pct = {threshold} is out of range [0, 100]"
        )
    predictions = PredictionConfig(
        likelihood_threshold_pct=threshold,
        most_common_limit=_int(pr_raw, "most_common_limit", 5, "predictions"),
    )

    # ── Period history ──
    ph_raw = _section("period_history")
    period_history = PeriodHistoryConfig(
        max_period_days=_int(ph_raw, "max_period_days", 14, "period_history"),
        max_plausible_cycle_days=_int(
            ph_raw, "max_plausible_cycle_days", 100, "period_history"
        ),
        regular_cycle_min_days=_int(ph_raw, "regular_cycle_min_days", 21, "period_history"),
        regular_cycle_max_days=_int(ph_raw, "regular_cycle_max_days", 35, "period_history"),
        irregular_variation_days=_int(
            ph_raw, "irregular_variation_days", 7, "period_history", minimum=0
        ),
        average_update_min_cycles=_int(
            ph_raw, "average_update_min_cycles", 2, "period_history"
        ),
    )
    if period_history.regular_cycle_min_days > period_history.regular_cycle_max_days:
        errors.append(
            "period_history.regular_cycle_min_days must not exceed regular_cycle_max_days"
        )

    # ── Fertility ──
    fe_raw = _section("fertility")
    fertility = FertilityConfig(
        luteal_phase_days=_int(fe_raw, "luteal_phase_days", 14, "fertility"),
        window_days_before_ovulation=_int(
            fe_raw, "window_days_before_ovulation", 5, "fertility", minimum=0
        ),
        window_days_after_ovulation=_int(
            fe_raw, "window_days_after_ovulation", 1, "fertility", minimum=0
        ),
    )

    if errors:
        raise ConfigValidationError(
            f"engine_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return EngineConfig(
        version=version,
        cycle_defaults=cycle_defaults,
        phase_boundaries=boundaries,
        predictions=predictions,
        period_history=period_history,
        fertility=fertility,
        _raw=raw,
    )


def load_engine_config(path: Path | None = None) -> EngineConfig:
    """Load and validate the engine config from disk.

    Args:
        path: Override path to YAML. Uses the bundled engine_config.yaml by default.

    Returns:
        Validated EngineConfig instance.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded engine config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Process-wide config
# ---------------------------------------------------------------------------

_config: EngineConfig | None = None
_config_lock = threading.Lock()


def get_engine_config() -> EngineConfig:
    """Shared EngineConfig, loaded from the bundled YAML on first use."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = load_engine_config()
    return _config


def reload_engine_config(path: Path | None = None) -> EngineConfig:
    """Load ``path`` (or the bundled YAML) and make it the shared config.

    The file is parsed and validated first, so a bad file raises
    ``ConfigValidationError`` or ``FileNotFoundError`` and the running
    config stays in place.
    """
    global _config
    new_config = load_engine_config(path)
    with _config_lock:
        previous = _config.version if _config else "none"
        _config = new_config
    logger.info("Engine config replaced: v%s -> v%s", previous, new_config.version)
    return new_config
