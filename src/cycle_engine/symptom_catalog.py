"""Built-in symptom definitions users can log."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SymptomCategory(str, Enum):
    physical = "physical"
    emotional = "emotional"
    energy = "energy"
    digestive = "digestive"
    sleep = "sleep"
    skin = "skin"
    other = "other"


@dataclass(frozen=True)
class SymptomDefinition:
    id: str
    name: str
    category: SymptomCategory


def _defs(category: SymptomCategory, *pairs: tuple[str, str]) -> list[SymptomDefinition]:
    return [SymptomDefinition(id=i, name=n, category=category) for i, n in pairs]


AVAILABLE_SYMPTOMS: tuple[SymptomDefinition, ...] = tuple(
    _defs(
        SymptomCategory.physical,
        ("cramps", "Cramps"),
        ("headache", "Headache"),
        ("backache", "Back Pain"),
        ("breast_tenderness", "Breast Tenderness"),
        ("bloating", "Bloating"),
        ("joint_pain", "Joint Pain"),
        ("hot_flashes", "Hot Flashes"),
        ("night_sweats", "Night Sweats"),
    )
    + _defs(
        SymptomCategory.emotional,
        ("mood_swings", "Mood Swings"),
        ("irritability", "Irritability"),
        ("anxiety", "Anxiety"),
        ("sadness", "Sadness"),
        ("sensitivity", "Sensitivity"),
        ("happy", "Happy"),
        ("confident", "Confident"),
        ("brain_fog", "Brain Fog"),
    )
    + _defs(
        SymptomCategory.energy,
        ("fatigue", "Fatigue"),
        ("low_energy", "Low Energy"),
        ("high_energy", "High Energy"),
        ("restless", "Restless"),
    )
    + _defs(
        SymptomCategory.digestive,
        ("cravings", "Cravings"),
        ("increased_appetite", "Increased Appetite"),
        ("decreased_appetite", "Decreased Appetite"),
        ("nausea", "Nausea"),
        ("digestive_issues", "Digestive Issues"),
    )
    + _defs(
        SymptomCategory.sleep,
        ("insomnia", "Insomnia"),
        ("oversleeping", "Oversleeping"),
        ("vivid_dreams", "Vivid Dreams"),
        ("difficulty_waking", "Difficulty Waking"),
    )
    + _defs(
        SymptomCategory.skin,
        ("acne", "Acne"),
        ("dry_skin", "Dry Skin"),
        ("oily_skin", "Oily Skin"),
        ("glowing_skin", "Glowing Skin"),
    )
    + _defs(
        SymptomCategory.other,
        ("libido_high", "High Libido"),
        ("libido_low", "Low Libido"),
        ("water_retention", "Water Retention"),
        ("dizziness", "Dizziness"),
    )
)

_BY_ID: dict[str, SymptomDefinition] = {s.id: s for s in AVAILABLE_SYMPTOMS}


def symptom_by_id(symptom_id: str) -> SymptomDefinition | None:
    return _BY_ID.get(symptom_id)


def symptoms_by_category(category: SymptomCategory) -> list[SymptomDefinition]:
    return [s for s in AVAILABLE_SYMPTOMS if s.category is category]
