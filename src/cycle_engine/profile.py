"""Cycle profile, phase and life-stage types.

The profile is the only user-configured input of the calculators.  It is
immutable; settings actions produce a new profile through ``updated()``, which
is also where boundary validation happens.  The calculators themselves accept
any profile and never raise.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum

from src.cycle_engine.config_loader import EngineConfig, get_engine_config
from src.cycle_engine.errors import ProfileValidationError

logger = logging.getLogger("lunaflow.cycle_engine.profile")


class CyclePhase(str, Enum):
    menstrual = "menstrual"
    follicular = "follicular"
    ovulatory = "ovulatory"
    luteal = "luteal"


class LifeStage(str, Enum):
    regular = "regular"
    perimenopause = "perimenopause"
    menopause = "menopause"
    postmenopause = "postmenopause"


@dataclass(frozen=True)
class CycleProfile:
    """A user's cycle settings.

    Attributes:
        anchor_date:   First day of the most recent period. None = unknown.
        cycle_length:  Days from one period start to the next.
        period_length: Days of bleeding.
        life_stage:    Selects cycle arithmetic (regular) or lunar correspondence.
    """

    anchor_date: date | None = None
    cycle_length: int = 28
    period_length: int = 5
    life_stage: LifeStage = LifeStage.regular

    @classmethod
    def default(cls, config: EngineConfig | None = None) -> CycleProfile:
        """Profile used at onboarding, before anything has been entered."""
        cfg = config or get_engine_config()
        return cls(
            cycle_length=cfg.cycle_defaults.cycle_length,
            period_length=cfg.cycle_defaults.period_length,
        )

    @property
    def has_anchor(self) -> bool:
        return self.anchor_date is not None

    def validate(self, config: EngineConfig | None = None) -> CycleProfile:
        """Check that the lengths leave every phase a positive width.

        Returns:
            ``self``, so calls can be chained.

        Raises:
            ProfileValidationError: Listing every violated constraint.
        """
        boundaries = (config or get_engine_config()).phase_boundaries
        errors: list[str] = []

        if self.period_length < 1:
            errors.append(f"period_length must be at least 1 day, got {self.period_length}")
        if self.period_length >= self.cycle_length:
            errors.append(
                f"period_length ({self.period_length}) must be shorter than "
                f"cycle_length ({self.cycle_length})"
            )
        if self.period_length >= boundaries.follicular_end_day:
            errors.append(
                f"period_length ({self.period_length}) must end before cycle day "
                f"{boundaries.follicular_end_day} to leave a follicular phase"
            )
        if self.cycle_length <= boundaries.ovulatory_end_day:
            errors.append(
                f"cycle_length ({self.cycle_length}) must exceed "
                f"{boundaries.ovulatory_end_day} days to leave a luteal phase"
            )

        if errors:
            raise ProfileValidationError("; ".join(errors))
        return self

    def updated(self, config: EngineConfig | None = None, **changes) -> CycleProfile:
        """Return a validated copy with ``changes`` applied.

        Raises:
            ProfileValidationError: If the resulting profile is degenerate.
        """
        profile = dataclasses.replace(self, **changes)
        profile.validate(config)
        logger.debug("Profile updated: %s", ", ".join(sorted(changes)))
        return profile
