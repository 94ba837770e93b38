"""Weekly split templates.

The table is product configuration: which muscles get trained on which day
for each supported number of training days. It is not derived from anything.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from fitplan.models.enums import SplitName, SplitType

DEFAULT_DAYS_PER_WEEK = 3


@dataclass(frozen=True)
class SplitDay:
    split_type: SplitType
    focus_muscles: tuple[str, ...]
    day_label: str


@dataclass(frozen=True)
class SplitTemplate:
    name: SplitName
    days: tuple[SplitDay, ...]

    @property
    def days_per_week(self) -> int:
        return len(self.days)


_ALL_MAJOR = ("chest", "back", "legs", "shoulders", "arms", "core")
_UPPER = ("chest", "back", "shoulders", "triceps", "biceps")
_LOWER = ("quadriceps", "hamstrings", "glutes", "calves")
_PUSH = ("chest", "shoulders", "triceps")
_PULL = ("back", "biceps", "rear_delts")
_CORE = ("abs", "obliques", "lower_back")

SPLIT_TEMPLATES: Mapping[int, SplitTemplate] = MappingProxyType({
    2: SplitTemplate(SplitName.FULL_BODY, (
        SplitDay(SplitType.FULL_BODY, _ALL_MAJOR, "Full Body A"),
        SplitDay(SplitType.FULL_BODY, _ALL_MAJOR, "Full Body B"),
    )),
    3: SplitTemplate(SplitName.FULL_BODY, (
        SplitDay(SplitType.FULL_BODY, ("chest", "back", "legs", "shoulders"), "Full Body A"),
        SplitDay(SplitType.FULL_BODY, ("chest", "back", "legs", "arms"), "Full Body B"),
        SplitDay(SplitType.FULL_BODY, ("chest", "back", "legs", "core"), "Full Body C"),
    )),
    4: SplitTemplate(SplitName.UPPER_LOWER, (
        SplitDay(SplitType.UPPER_BODY, _UPPER, "Upper Body A"),
        SplitDay(SplitType.LOWER_BODY, _LOWER, "Lower Body A"),
        SplitDay(SplitType.UPPER_BODY, _UPPER, "Upper Body B"),
        SplitDay(SplitType.LOWER_BODY, _LOWER, "Lower Body B"),
    )),
    5: SplitTemplate(SplitName.PUSH_PULL_LEGS, (
        SplitDay(SplitType.PUSH, _PUSH, "Push"),
        SplitDay(SplitType.PULL, _PULL, "Pull"),
        SplitDay(SplitType.LEGS, _LOWER, "Legs"),
        SplitDay(SplitType.UPPER_BODY, ("chest", "back", "shoulders"), "Upper"),
        SplitDay(SplitType.CORE, _CORE, "Core & Conditioning"),
    )),
    6: SplitTemplate(SplitName.PPL_2X, (
        SplitDay(SplitType.PUSH, _PUSH, "Push A"),
        SplitDay(SplitType.PULL, _PULL, "Pull A"),
        SplitDay(SplitType.LEGS, _LOWER, "Legs A"),
        SplitDay(SplitType.PUSH, _PUSH, "Push B"),
        SplitDay(SplitType.PULL, _PULL, "Pull B"),
        SplitDay(SplitType.LEGS, _LOWER, "Legs B"),
    )),
    7: SplitTemplate(SplitName.BRO_SPLIT, (
        SplitDay(SplitType.CHEST_TRICEPS, ("chest", "triceps"), "Chest & Triceps"),
        SplitDay(SplitType.BACK_BICEPS, ("back", "biceps"), "Back & Biceps"),
        SplitDay(SplitType.LEGS, _LOWER, "Legs"),
        SplitDay(SplitType.SHOULDERS_ARMS, ("shoulders", "triceps", "biceps"), "Shoulders & Arms"),
        SplitDay(SplitType.CORE, _CORE, "Core"),
        SplitDay(SplitType.CARDIO, (), "Cardio"),
        SplitDay(SplitType.ACTIVE_RECOVERY, (), "Active Recovery"),
    )),
})


def plan_for(days_per_week: int | None) -> SplitTemplate:
    """Template for the given number of training days; 3 days when unsupported."""
    return SPLIT_TEMPLATES.get(days_per_week, SPLIT_TEMPLATES[DEFAULT_DAYS_PER_WEEK])
