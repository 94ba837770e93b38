"""Response schemas for suggestions, plans and workouts."""
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from fitplan.ml.scoring.exercise_scorer import ScoredExercise
from fitplan.models.enums import ExerciseCategory, SplitName, SplitType, WorkoutLocation, WorkoutStatus
from fitplan.services.plan_assembler import WeeklyPlanResult


class ScoreBreakdownResponse(BaseModel):
    goal_match: float
    difficulty_match: float
    equipment_match: float
    location_match: float
    experience_match: float
    semantic_match: float


class ScoredExerciseResponse(BaseModel):
    exercise_id: int
    name: str
    slug: str
    category: ExerciseCategory
    movement_pattern: str | None = None
    primary_muscles: list[str] = Field(default_factory=list)
    difficulty_level: int
    score: float
    breakdown: ScoreBreakdownResponse

    @classmethod
    def from_scored(cls, scored: ScoredExercise) -> "ScoredExerciseResponse":
        exercise = scored.exercise
        return cls(
            exercise_id=exercise.id,
            name=exercise.name,
            slug=exercise.slug,
            category=exercise.category,
            movement_pattern=scored.movement_pattern,
            primary_muscles=list(exercise.primary_muscles or []),
            difficulty_level=exercise.difficulty_level,
            score=round(scored.score, 4),
            breakdown=ScoreBreakdownResponse(**scored.breakdown.to_dict()),
        )


class PlannedExerciseResponse(BaseModel):
    exercise_id: int
    name: str
    sets: int
    reps: str
    rest_seconds: int
    order: int


class WorkoutDayResponse(BaseModel):
    day_index: int
    day_label: str
    split_type: SplitType
    focus_muscles: list[str]
    exercises: list[PlannedExerciseResponse]
    estimated_duration: int


class WeeklyPlanResponse(BaseModel):
    plan_id: int | None = None
    split_name: SplitName
    days_per_week: int
    days: list[WorkoutDayResponse]
    total_exercises: int
    generated_at: datetime

    @classmethod
    def from_result(cls, plan: WeeklyPlanResult, plan_id: int | None = None) -> "WeeklyPlanResponse":
        return cls(
            plan_id=plan_id,
            split_name=plan.split_name,
            days_per_week=plan.days_per_week,
            days=[WorkoutDayResponse(**day.to_dict()) for day in plan.days],
            total_exercises=plan.total_exercises,
            generated_at=plan.generated_at,
        )


class ExerciseSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    category: ExerciseCategory
    primary_muscles: list[str] = Field(default_factory=list)


class WorkoutExerciseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    exercise_id: int
    order_index: int
    target_sets: int
    target_reps: str
    target_rpe: int | None = None
    rest_seconds: int
    exercise: ExerciseSummary | None = None


class WorkoutResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    scheduled_date: date
    day_of_week: int
    week_number: int
    workout_type: SplitType
    focus_muscles: list[str]
    title: str
    description: str | None = None
    estimated_duration: int
    status: WorkoutStatus
    exercises: list[WorkoutExerciseResponse] = Field(default_factory=list)


class SearchHitResponse(BaseModel):
    exercise_id: int
    similarity: float
    fallback: bool = False


class ProviderInfoResponse(BaseModel):
    name: str
    model: str
    dimensions: int
    available: bool


class RecommendRequest(BaseModel):
    """Structured criteria for ``POST /suggestions/recommend``."""

    target_muscles: list[str] = Field(default_factory=list)
    goals: list[str] = Field(default_factory=list)
    difficulty: int | None = Field(None, ge=1, le=5)
    location: WorkoutLocation | None = None
    equipment: list[str] = Field(default_factory=list)
    exclude_exercise_ids: list[int] = Field(default_factory=list)
    limit: int = Field(10, ge=1, le=50)
