"""Sets, reps, rest and duration rules for planned exercises.

All functions are pure. Lookup tables are keyed by enum members so a new
goal or rest preference shows up as a missing key in the coverage tests.
"""
from __future__ import annotations

import math
from types import MappingProxyType
from typing import Iterable, Mapping

from fitplan.models.enums import (
    ExerciseCategory,
    ExperienceLevel,
    FitnessGoal,
    RestPreference,
    SplitType,
)

WORK_SECONDS_PER_SET = 45
CARDIO_REPS = "30-60 sec"
CARDIO_REST_SECONDS = 30
DEFAULT_SETS = 3
DEFAULT_REPS = "10-12"

MINUTES_PER_EXERCISE: Mapping[RestPreference, int] = MappingProxyType({
    RestPreference.MINIMAL: 5,
    RestPreference.MODERATE: 6,
    RestPreference.FULL: 8,
})

REST_SECONDS: Mapping[RestPreference, int] = MappingProxyType({
    RestPreference.MINIMAL: 45,
    RestPreference.MODERATE: 90,
    RestPreference.FULL: 120,
})

SETS_BY_GOAL: Mapping[FitnessGoal, int] = MappingProxyType({
    FitnessGoal.STRENGTH: 4,
    FitnessGoal.MUSCLE_GAIN: 4,
    FitnessGoal.WEIGHT_LOSS: 3,
    FitnessGoal.ENDURANCE: 3,
    FitnessGoal.FLEXIBILITY: DEFAULT_SETS,
    FitnessGoal.GENERAL_FITNESS: DEFAULT_SETS,
    FitnessGoal.SPORT_SPECIFIC: DEFAULT_SETS,
    FitnessGoal.MAINTAIN: DEFAULT_SETS,
    FitnessGoal.REHABILITATION: DEFAULT_SETS,
})

REPS_BY_GOAL: Mapping[FitnessGoal, str] = MappingProxyType({
    FitnessGoal.STRENGTH: "4-6",
    FitnessGoal.MUSCLE_GAIN: "8-12",
    FitnessGoal.WEIGHT_LOSS: "12-15",
    FitnessGoal.ENDURANCE: "15-20",
    FitnessGoal.FLEXIBILITY: DEFAULT_REPS,
    FitnessGoal.GENERAL_FITNESS: DEFAULT_REPS,
    FitnessGoal.SPORT_SPECIFIC: DEFAULT_REPS,
    FitnessGoal.MAINTAIN: DEFAULT_REPS,
    FitnessGoal.REHABILITATION: DEFAULT_REPS,
})

BASE_RPE: Mapping[ExperienceLevel, int] = MappingProxyType({
    ExperienceLevel.NEVER: 6,
    ExperienceLevel.BEGINNER: 6,
    ExperienceLevel.INTERMEDIATE: 7,
    ExperienceLevel.ADVANCED: 8,
    ExperienceLevel.EXPERT: 8,
})

WORKOUT_TITLES: Mapping[SplitType, str] = MappingProxyType({
    SplitType.PUSH: "Push Day - Chest, Shoulders & Triceps",
    SplitType.PULL: "Pull Day - Back & Biceps",
    SplitType.LEGS: "Leg Day - Quads, Hamstrings & Glutes",
    SplitType.UPPER_BODY: "Upper Body Workout",
    SplitType.LOWER_BODY: "Lower Body Workout",
    SplitType.FULL_BODY: "Full Body Workout",
    SplitType.CHEST_TRICEPS: "Chest & Triceps",
    SplitType.BACK_BICEPS: "Back & Biceps",
    SplitType.SHOULDERS_ARMS: "Shoulders & Arms",
    SplitType.CORE: "Core Workout",
    SplitType.CARDIO: "Cardio Session",
    SplitType.HIIT: "HIIT Workout",
    SplitType.ACTIVE_RECOVERY: "Active Recovery",
})


def _rest_pref(rest_preference: RestPreference | None) -> RestPreference:
    return RestPreference(rest_preference) if rest_preference else RestPreference.MODERATE


def exercises_per_day(session_duration_min: int, rest_preference: RestPreference | None) -> int:
    minutes = MINUTES_PER_EXERCISE[_rest_pref(rest_preference)]
    return max(1, session_duration_min // minutes)


def sets_for_goal(goal: FitnessGoal | None) -> int:
    if goal is None:
        return DEFAULT_SETS
    return SETS_BY_GOAL[FitnessGoal(goal)]


def reps_for_goal(goal: FitnessGoal | None, category: ExerciseCategory | None) -> str:
    if category == ExerciseCategory.CARDIO:
        return CARDIO_REPS
    if goal is None:
        return DEFAULT_REPS
    return REPS_BY_GOAL[FitnessGoal(goal)]


def rest_seconds(rest_preference: RestPreference | None, category: ExerciseCategory | None) -> int:
    if category == ExerciseCategory.CARDIO:
        return CARDIO_REST_SECONDS
    return REST_SECONDS[_rest_pref(rest_preference)]


def estimate_duration_minutes(sets_and_rest: Iterable[tuple[int, int]]) -> int:
    """Sum of sets x (45s work + rest seconds), rounded up to whole minutes."""
    total_seconds = sum(sets * (WORK_SECONDS_PER_SET + rest) for sets, rest in sets_and_rest)
    return math.ceil(total_seconds / 60)


def target_rpe(experience: ExperienceLevel | None, index: int) -> int:
    """Target RPE for the exercise at zero-based ``index`` in a workout.

    Exercises after the fifth get one point less to account for fatigue.
    """
    rpe = BASE_RPE.get(experience, 7) if experience is not None else 7
    if index > 4:
        rpe -= 1
    return max(5, min(9, rpe))


def workout_title(split_type: SplitType) -> str:
    return WORKOUT_TITLES.get(split_type, "Workout")
