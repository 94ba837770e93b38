"""Medical constraint filtering.

Health data is turned into a set of lower-case exclusion tokens. An exercise
is excluded when its name, slug or movement pattern contains any token as a
substring. Excluded exercises are dropped outright, never down-scored.

Substring matching over-excludes on coincidental matches ("jump" also hits
"jumping jack") and under-excludes on spelling variants. Exercises also carry
structured ``contraindications`` tags; those are used by the daily generator's
catalog query in addition to, not instead of, the substring rule.
"""

from __future__ import annotations

import logging
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable, Mapping

if TYPE_CHECKING:
    from fitplan.models.exercise import Exercise
    from fitplan.models.user import UserHealth

logger = logging.getLogger(__name__)


class InjuryArea(str, Enum):
    NECK = "neck"
    SHOULDER = "shoulder"
    UPPER_BACK = "upper_back"
    LOWER_BACK = "lower_back"
    ELBOW = "elbow"
    WRIST = "wrist"
    HIP = "hip"
    KNEE = "knee"
    ANKLE = "ankle"


INJURY_EXCLUSIONS: Mapping[InjuryArea, frozenset[str]] = MappingProxyType({
    InjuryArea.NECK: frozenset({"vertical_push", "shoulder_press", "behind_neck"}),
    InjuryArea.SHOULDER: frozenset({"vertical_push", "horizontal_push", "overhead", "lateral_raise"}),
    InjuryArea.UPPER_BACK: frozenset({"vertical_pull", "horizontal_pull", "deadlift", "row"}),
    InjuryArea.LOWER_BACK: frozenset({"hinge", "deadlift", "squat", "good_morning", "bent_over"}),
    InjuryArea.ELBOW: frozenset({"flexion", "extension", "curl", "tricep", "push_up"}),
    InjuryArea.WRIST: frozenset({"push_up", "front_squat", "clean", "plank"}),
    InjuryArea.HIP: frozenset({"hinge", "squat", "lunge", "hip_thrust", "deadlift"}),
    InjuryArea.KNEE: frozenset({"squat", "lunge", "leg_press", "leg_extension", "jump"}),
    InjuryArea.ANKLE: frozenset({"squat", "lunge", "calf_raise", "jump", "running"}),
})

# Structured catalog tags matched against Exercise.contraindications
INJURY_CONTRAINDICATION_TAGS: Mapping[InjuryArea, frozenset[str]] = MappingProxyType({
    InjuryArea.NECK: frozenset({"neck_injury"}),
    InjuryArea.SHOULDER: frozenset({"shoulder_injury"}),
    InjuryArea.UPPER_BACK: frozenset({"upper_back_injury"}),
    InjuryArea.LOWER_BACK: frozenset({"lower_back_injury"}),
    InjuryArea.ELBOW: frozenset({"elbow_injury"}),
    InjuryArea.WRIST: frozenset({"wrist_injury"}),
    InjuryArea.HIP: frozenset({"hip_injury"}),
    InjuryArea.KNEE: frozenset({"knee_injury"}),
    InjuryArea.ANKLE: frozenset({"ankle_injury"}),
})

PREGNANCY_EXCLUSIONS = frozenset({"lying_on_back", "high_impact", "twisting"})
RECENT_SURGERY_EXCLUSIONS = frozenset({"heavy_compound"})


def _injury_areas(injuries: Iterable[str] | None) -> list[InjuryArea]:
    areas = []
    for injury in injuries or []:
        try:
            areas.append(InjuryArea(str(injury).strip().lower()))
        except ValueError:
            logger.debug(f"Unknown injury token '{injury}' ignored")
    return areas


def derive_exclusions(health: UserHealth | None) -> frozenset[str]:
    """Build the lower-case exclusion token set for a user's health record.

    Rules are additive: injury expansions, explicit movement and exercise
    overrides, pregnancy tokens and the recent-surgery token are unioned.
    Unknown injury tokens contribute nothing.
    """
    if health is None:
        return frozenset()

    tokens: set[str] = set()
    for area in _injury_areas(health.injuries):
        tokens |= INJURY_EXCLUSIONS[area]

    for override in (health.contraindicated_movements or []) + (health.contraindicated_exercises or []):
        if override:
            tokens.add(str(override).lower())

    if health.is_pregnant:
        tokens |= PREGNANCY_EXCLUSIONS
    if health.recent_surgery:
        tokens |= RECENT_SURGERY_EXCLUSIONS

    return frozenset(tokens)


def contraindication_tags(health: UserHealth | None) -> frozenset[str]:
    """Structured catalog tags that rule an exercise out for this user."""
    if health is None:
        return frozenset()
    tags: set[str] = set()
    for area in _injury_areas(health.injuries):
        tags |= INJURY_CONTRAINDICATION_TAGS[area]
    return frozenset(tags)


def _enum_value(value) -> str:
    return value.value if isinstance(value, Enum) else str(value or "")


def is_excluded(exercise: Exercise, exclusions: frozenset[str] | set[str]) -> bool:
    if not exclusions:
        return False
    haystacks = (
        (exercise.name or "").lower(),
        (exercise.slug or "").lower(),
        _enum_value(exercise.movement_pattern).lower(),
    )
    return any(token in haystack for token in exclusions for haystack in haystacks)
