from fitplan.models.enums import (
    ExerciseCategory,
    ExerciseType,
    ExperienceLevel,
    FitnessGoal,
    FitnessLevel,
    MovementPattern,
    RestPreference,
    SplitName,
    SplitType,
    SuggestionType,
    WorkoutLocation,
    WorkoutStatus,
)
from fitplan.models.exercise import Exercise
from fitplan.models.user import User, UserHealth, UserPreferences, UserProfile
from fitplan.models.workout import ExerciseSuggestion, WeeklyPlan, Workout, WorkoutExercise

__all__ = [
    "Exercise",
    "ExerciseCategory",
    "ExerciseSuggestion",
    "ExerciseType",
    "ExperienceLevel",
    "FitnessGoal",
    "FitnessLevel",
    "MovementPattern",
    "RestPreference",
    "SplitName",
    "SplitType",
    "SuggestionType",
    "User",
    "UserHealth",
    "UserPreferences",
    "UserProfile",
    "WeeklyPlan",
    "Workout",
    "WorkoutExercise",
    "WorkoutLocation",
    "WorkoutStatus",
]
