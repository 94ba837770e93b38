"""Enumerations shared by models, services and schemas."""
from enum import Enum


class FitnessGoal(str, Enum):
    WEIGHT_LOSS = "weight_loss"
    MUSCLE_GAIN = "muscle_gain"
    STRENGTH = "strength"
    ENDURANCE = "endurance"
    FLEXIBILITY = "flexibility"
    GENERAL_FITNESS = "general_fitness"
    SPORT_SPECIFIC = "sport_specific"
    MAINTAIN = "maintain"
    REHABILITATION = "rehabilitation"


class FitnessLevel(str, Enum):
    SEDENTARY = "sedentary"
    LIGHTLY_ACTIVE = "lightly_active"
    MODERATELY_ACTIVE = "moderately_active"
    VERY_ACTIVE = "very_active"
    ATHLETE = "athlete"


class ExperienceLevel(str, Enum):
    NEVER = "never"
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class WorkoutLocation(str, Enum):
    HOME = "home"
    GYM = "gym"
    OUTDOOR = "outdoor"
    MIXED = "mixed"


class RestPreference(str, Enum):
    MINIMAL = "minimal"
    MODERATE = "moderate"
    FULL = "full"


class ExerciseCategory(str, Enum):
    STRENGTH = "strength"
    CARDIO = "cardio"
    FLEXIBILITY = "flexibility"
    BALANCE = "balance"
    PLYOMETRIC = "plyometric"
    MOBILITY = "mobility"


class MovementPattern(str, Enum):
    HORIZONTAL_PUSH = "horizontal_push"
    VERTICAL_PUSH = "vertical_push"
    HORIZONTAL_PULL = "horizontal_pull"
    VERTICAL_PULL = "vertical_pull"
    SQUAT = "squat"
    HINGE = "hinge"
    LUNGE = "lunge"
    CARRY = "carry"
    ROTATION = "rotation"
    ANTI_ROTATION = "anti_rotation"
    FLEXION = "flexion"
    EXTENSION = "extension"
    LOCOMOTION = "locomotion"
    ISOMETRIC = "isometric"


class ExerciseType(str, Enum):
    # Declaration order is the daily generator's sort order: compound first
    COMPOUND = "compound"
    ISOLATION = "isolation"
    CARDIO = "cardio"


class SplitType(str, Enum):
    FULL_BODY = "full_body"
    UPPER_BODY = "upper_body"
    LOWER_BODY = "lower_body"
    PUSH = "push"
    PULL = "pull"
    LEGS = "legs"
    CHEST_TRICEPS = "chest_triceps"
    BACK_BICEPS = "back_biceps"
    SHOULDERS_ARMS = "shoulders_arms"
    CORE = "core"
    CARDIO = "cardio"
    HIIT = "hiit"
    ACTIVE_RECOVERY = "active_recovery"


class SplitName(str, Enum):
    FULL_BODY = "full_body"
    UPPER_LOWER = "upper_lower"
    PUSH_PULL_LEGS = "push_pull_legs"
    PPL_2X = "ppl_2x"
    BRO_SPLIT = "bro_split"


class WorkoutStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"


class SuggestionType(str, Enum):
    INITIAL_PLAN = "initial_plan"
    DAILY_WORKOUT = "daily_workout"
    SWAP = "swap"
