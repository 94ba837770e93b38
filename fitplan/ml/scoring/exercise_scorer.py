"""Multi-criteria exercise scorer.

Each candidate gets six sub-scores in [0, 1] that are combined with the
weights in ``ScoreWeights`` into a composite score:

- goal: how effective the exercise is for the user's primary goal
- difficulty: distance between exercise difficulty and the user's target
- equipment: whether the user owns what the exercise needs
- location: compatibility with the preferred training location
- experience: catalog suitability rating for the user's experience level
- semantic: similarity of the exercise to the retrieval query

Constraint filtering runs first; an excluded exercise is never scored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from fitplan.ml.scoring.constants import (
    EQUIPMENT_FULL_GYM,
    EQUIPMENT_NONE,
    Defaults,
    ScoreWeights,
)
from fitplan.ml.scoring.constraint_filter import derive_exclusions, is_excluded
from fitplan.models.enums import (
    ExperienceLevel,
    FitnessGoal,
    FitnessLevel,
    WorkoutLocation,
)

if TYPE_CHECKING:
    from fitplan.models.exercise import Exercise
    from fitplan.models.user import UserHealth, UserPreferences, UserProfile

logger = logging.getLogger(__name__)


GOAL_KEYS: Mapping[FitnessGoal, str] = MappingProxyType({
    FitnessGoal.WEIGHT_LOSS: "weight_loss",
    FitnessGoal.MUSCLE_GAIN: "muscle_gain",
    FitnessGoal.STRENGTH: "strength",
    FitnessGoal.ENDURANCE: "endurance",
    FitnessGoal.FLEXIBILITY: "flexibility",
    FitnessGoal.GENERAL_FITNESS: "general_fitness",
    FitnessGoal.SPORT_SPECIFIC: "general_fitness",
    FitnessGoal.MAINTAIN: "general_fitness",
    FitnessGoal.REHABILITATION: "flexibility",
})

EXPERIENCE_KEYS: Mapping[ExperienceLevel, str] = MappingProxyType({
    ExperienceLevel.NEVER: "never",
    ExperienceLevel.BEGINNER: "less_than_6mo",
    ExperienceLevel.INTERMEDIATE: "six_to_24mo",
    ExperienceLevel.ADVANCED: "two_to_5yr",
    ExperienceLevel.EXPERT: "five_plus_yr",
})

EXPERIENCE_MAX_DIFFICULTY: Mapping[ExperienceLevel, int] = MappingProxyType({
    ExperienceLevel.NEVER: 2,
    ExperienceLevel.BEGINNER: 2,
    ExperienceLevel.INTERMEDIATE: 3,
    ExperienceLevel.ADVANCED: 4,
    ExperienceLevel.EXPERT: 5,
})

DIFFICULTY_LABELS: Mapping[int, str] = MappingProxyType({
    1: "beginner",
    2: "beginner",
    3: "intermediate",
    4: "advanced",
    5: "advanced",
})


@dataclass(frozen=True)
class ScoreBreakdown:
    goal: float
    difficulty: float
    equipment: float
    location: float
    experience: float
    semantic: float

    def composite(self) -> float:
        total = (
            self.goal * ScoreWeights.GOAL
            + self.difficulty * ScoreWeights.DIFFICULTY
            + self.equipment * ScoreWeights.EQUIPMENT
            + self.location * ScoreWeights.LOCATION
            + self.experience * ScoreWeights.EXPERIENCE
            + self.semantic * ScoreWeights.SEMANTIC
        )
        return _clamp(total)

    def to_dict(self) -> dict[str, float]:
        return {
            "goal_match": self.goal,
            "difficulty_match": self.difficulty,
            "equipment_match": self.equipment,
            "location_match": self.location,
            "experience_match": self.experience,
            "semantic_match": self.semantic,
        }


@dataclass
class ScoredExercise:
    """An exercise paired with its composite score and sub-score breakdown."""

    exercise: Exercise
    score: float
    breakdown: ScoreBreakdown

    @property
    def exercise_id(self) -> int:
        return self.exercise.id

    @property
    def movement_pattern(self) -> str | None:
        pattern = self.exercise.movement_pattern
        return pattern.value if isinstance(pattern, Enum) else pattern


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def experience_difficulty_cap(experience: ExperienceLevel | None) -> int:
    if experience is None:
        return Defaults.TARGET_DIFFICULTY
    return EXPERIENCE_MAX_DIFFICULTY.get(experience, Defaults.TARGET_DIFFICULTY)


def target_difficulty(profile: UserProfile) -> int:
    """Maximum comfortable difficulty for a user.

    Starts from the experience cap, then fitness level can lower it
    (sedentary, lightly active) or raise it (athlete), and users over 60
    are capped at 3.
    """
    target = experience_difficulty_cap(profile.experience_level)

    if profile.fitness_level == FitnessLevel.SEDENTARY:
        target = min(target, 2)
    elif profile.fitness_level == FitnessLevel.LIGHTLY_ACTIVE:
        target = min(target, 3)
    elif profile.fitness_level == FitnessLevel.ATHLETE:
        target = max(target, 4)

    if profile.age is not None and profile.age > 60:
        target = min(target, 3)

    return target


def equipment_matches(required: list[str], available: list[str]) -> bool:
    """True when every required item is covered by something the user owns.

    Matching is case-insensitive substring in either direction so "dumbbell"
    covers "dumbbells" and vice versa.
    """
    owned = [item.lower() for item in available]
    for item in required:
        needed = item.lower()
        if not any(needed in have or have in needed for have in owned):
            return False
    return True


class ExerciseScorer:
    """Scores catalog exercises against one user's profile and preferences."""

    def score(
        self,
        exercise: Exercise,
        profile: UserProfile,
        preferences: UserPreferences,
        health: UserHealth | None = None,
        exclusions: frozenset[str] | None = None,
        semantic_score: float = 0.0,
    ) -> ScoredExercise | None:
        """Score one exercise.

        Args:
            exercise: Catalog exercise to evaluate.
            profile: User's fitness profile.
            preferences: User's training preferences.
            health: User's health record, used when ``exclusions`` is not given.
            exclusions: Precomputed tokens from ``derive_exclusions``. Callers
                scoring many exercises should derive them once and pass them in.
            semantic_score: Similarity from retrieval, clamped to [0, 1].

        Returns:
            The scored exercise, or None when the exercise is excluded.
        """
        if exclusions is None:
            exclusions = derive_exclusions(health)
        if exclusions and is_excluded(exercise, exclusions):
            logger.debug(f"Exercise {exercise.id} excluded by health constraints")
            return None

        breakdown = ScoreBreakdown(
            goal=_clamp(self.goal_match(exercise, profile)),
            difficulty=_clamp(self.difficulty_match(exercise, profile)),
            equipment=_clamp(self.equipment_match(exercise, preferences)),
            location=_clamp(self.location_match(exercise, preferences)),
            experience=_clamp(self.experience_match(exercise, profile)),
            semantic=_clamp(semantic_score),
        )
        return ScoredExercise(
            exercise=exercise,
            score=breakdown.composite(),
            breakdown=breakdown,
        )

    def goal_match(self, exercise: Exercise, profile: UserProfile) -> float:
        if profile.primary_goal is None:
            return Defaults.NEUTRAL_SCORE
        key = GOAL_KEYS[FitnessGoal(profile.primary_goal)]
        value = (exercise.goal_effectiveness or {}).get(key)
        return Defaults.NEUTRAL_SCORE if value is None else float(value)

    def difficulty_match(self, exercise: Exercise, profile: UserProfile) -> float:
        target = target_difficulty(profile)
        difficulty = exercise.difficulty_level or 1
        if difficulty <= target:
            return 1 - Defaults.EASIER_PENALTY * abs(target - difficulty)
        return max(0.0, 1 - Defaults.HARDER_PENALTY * (difficulty - target))

    def equipment_match(self, exercise: Exercise, preferences: UserPreferences) -> float:
        required = exercise.equipment_required or []
        available = preferences.available_equipment or []

        if not required or EQUIPMENT_FULL_GYM in available:
            return 1.0
        if EQUIPMENT_NONE in available:
            return 0.0
        return 1.0 if equipment_matches(required, available) else Defaults.EQUIPMENT_PARTIAL_MATCH

    def location_match(self, exercise: Exercise, preferences: UserPreferences) -> float:
        location = preferences.workout_location
        if location is None:
            return Defaults.NEUTRAL_SCORE

        if WorkoutLocation(location) == WorkoutLocation.MIXED:
            values = [v for v in (exercise.home_compatibility, exercise.gym_compatibility) if v is not None]
            return max(values) if values else Defaults.NEUTRAL_SCORE

        value = exercise.compatibility_for(WorkoutLocation(location).value)
        return Defaults.NEUTRAL_SCORE if value is None else float(value)

    def experience_match(self, exercise: Exercise, profile: UserProfile) -> float:
        suitability = Defaults.EXPERIENCE_SUITABILITY
        if profile.experience_level is not None:
            key = EXPERIENCE_KEYS[ExperienceLevel(profile.experience_level)]
            rating = (exercise.experience_suitability or {}).get(key)
            if rating is not None:
                suitability = rating
        return float(suitability) / Defaults.MAX_SUITABILITY

