"""Exercise scoring package.

Main exports:
    - ExerciseScorer: Six-factor scorer producing ScoredExercise results
    - ScoreBreakdown: Per-factor sub-scores and weighted composite
    - derive_exclusions / is_excluded: Health-based constraint filter
    - ScoreWeights, Thresholds, Defaults: Scoring constants
"""
from .constants import Defaults, ScoreWeights, Thresholds
from .constraint_filter import (
    INJURY_CONTRAINDICATION_TAGS,
    INJURY_EXCLUSIONS,
    InjuryArea,
    contraindication_tags,
    derive_exclusions,
    is_excluded,
)
from .exercise_scorer import (
    ExerciseScorer,
    ScoreBreakdown,
    ScoredExercise,
    experience_difficulty_cap,
    target_difficulty,
)

__all__ = [
    "Defaults",
    "ExerciseScorer",
    "INJURY_CONTRAINDICATION_TAGS",
    "INJURY_EXCLUSIONS",
    "InjuryArea",
    "ScoreBreakdown",
    "ScoreWeights",
    "ScoredExercise",
    "Thresholds",
    "contraindication_tags",
    "derive_exclusions",
    "experience_difficulty_cap",
    "is_excluded",
    "target_difficulty",
]
