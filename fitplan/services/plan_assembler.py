"""Weekly plan assembly.

For every day of the user's split the assembler runs semantic retrieval,
constraint filtering, scoring and balanced selection, then attaches sets,
reps and rest. Saving a plan replaces the user's active plan in a single
transaction and schedules one workout per day starting next Monday.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Callable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from fitplan.config.settings import Settings, get_settings
from fitplan.core.exceptions import NotFoundError
from fitplan.core.logging import get_logger
from fitplan.core.transactions import transactional
from fitplan.db.database import utcnow
from fitplan.ml.scoring.constants import Thresholds
from fitplan.ml.scoring.constraint_filter import derive_exclusions
from fitplan.ml.scoring.exercise_scorer import ExerciseScorer, ScoredExercise
from fitplan.models.enums import SplitName, SplitType, SuggestionType, WorkoutStatus
from fitplan.models.workout import ExerciseSuggestion, WeeklyPlan, Workout, WorkoutExercise
from fitplan.repositories.exercise_repository import ExerciseRepository
from fitplan.repositories.plan_repository import PlanRepository
from fitplan.repositories.user_repository import UserContext, UserRepository
from fitplan.services import prescription
from fitplan.services.exercise_selector import select_balanced
from fitplan.services.similarity_search import SimilaritySearchService
from fitplan.services.split_planner import plan_for

logger = get_logger(__name__)


@dataclass
class PlannedExercise:
    exercise_id: int
    name: str
    sets: int
    reps: str
    rest_seconds: int
    order: int


@dataclass
class WorkoutDay:
    day_index: int
    day_label: str
    split_type: SplitType
    focus_muscles: list[str]
    exercises: list[PlannedExercise]
    estimated_duration: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "day_index": self.day_index,
            "day_label": self.day_label,
            "split_type": self.split_type.value,
            "focus_muscles": list(self.focus_muscles),
            "exercises": [vars(ex).copy() for ex in self.exercises],
            "estimated_duration": self.estimated_duration,
        }


@dataclass
class WeeklyPlanResult:
    split_name: SplitName
    days_per_week: int
    days: list[WorkoutDay]
    generated_at: datetime = field(default_factory=utcnow)

    @property
    def total_exercises(self) -> int:
        return sum(len(day.exercises) for day in self.days)


def next_monday(today: date) -> date:
    """The Monday after ``today``. A Monday maps to the following Monday."""
    return today + timedelta(days=7 - today.weekday())


def _enum_text(value, default: str) -> str:
    return getattr(value, "value", value).replace("_", " ") if value else default


def build_day_query(context: UserContext, muscles: Sequence[str]) -> str:
    """One-sentence retrieval query combining focus, goal, experience, location and equipment."""
    profile, preferences = context.profile, context.preferences

    query = f"{' and '.join(muscles)} exercises for {_enum_text(profile.primary_goal, 'general fitness')}".strip()
    parts = [query]
    if profile.experience_level:
        parts.append(f"{_enum_text(profile.experience_level, '')} experience")
    if preferences.workout_location:
        parts.append(f"at {_enum_text(preferences.workout_location, '')}")
    if preferences.available_equipment:
        parts.append(f"using {' or '.join(preferences.available_equipment)}")
    return ", ".join(parts)


class PlanAssemblerService:
    def __init__(
        self,
        session: AsyncSession | None,
        search: SimilaritySearchService,
        *,
        users: UserRepository | None = None,
        exercises: ExerciseRepository | None = None,
        plans: PlanRepository | None = None,
        scorer: ExerciseScorer | None = None,
        settings: Settings | None = None,
        today: Callable[[], date] = date.today,
    ):
        self._session = session
        self._users = users or UserRepository(session)
        self._exercises = exercises or ExerciseRepository(session)
        self._plans = plans or PlanRepository(session)
        self._search = search
        self._scorer = scorer or ExerciseScorer()
        self._settings = settings or get_settings()
        self._today = today

    async def get_exercises_for_muscles(
        self,
        user_id: int,
        muscles: Sequence[str],
        limit: int = 20,
    ) -> list[ScoredExercise]:
        """Best-scoring safe exercises for the given muscles, best first.

        Raises:
            NotFoundError: If the user does not exist.
            PreconditionFailedError: If onboarding is incomplete.
        """
        context = await self._users.get_context(user_id)
        return await self._scored_for_muscles(context, muscles, limit)

    async def generate_weekly_plan(self, user_id: int) -> WeeklyPlanResult:
        context = await self._users.get_context(user_id)
        preferences = context.preferences

        template = plan_for(preferences.workout_days_per_week)
        count = prescription.exercises_per_day(
            preferences.session_duration_min, preferences.rest_preference
        )

        days = []
        for index, split_day in enumerate(template.days):
            candidates = await self._scored_for_muscles(context, split_day.focus_muscles, count * 2)
            selected = select_balanced(candidates, count, split_day.focus_muscles)
            planned = [
                self._prescribe(context, scored, order)
                for order, scored in enumerate(selected, start=1)
            ]
            days.append(WorkoutDay(
                day_index=index,
                day_label=split_day.day_label,
                split_type=split_day.split_type,
                focus_muscles=list(split_day.focus_muscles),
                exercises=planned,
                estimated_duration=prescription.estimate_duration_minutes(
                    (ex.sets, ex.rest_seconds) for ex in planned
                ),
            ))

        plan = WeeklyPlanResult(
            split_name=template.name,
            days_per_week=template.days_per_week,
            days=days,
        )
        logger.info(
            "weekly_plan_generated",
            user_id=user_id,
            split=plan.split_name.value,
            days=plan.days_per_week,
            total_exercises=plan.total_exercises,
        )
        return plan

    @transactional
    async def save_weekly_plan(self, user_id: int, plan: WeeklyPlanResult) -> int:
        """Persist ``plan`` as the user's only active plan.

        Runs as one unit of work: prior active plans are deactivated, the new
        plan gets the next week number, and one scheduled workout per day is
        created from next Monday onward together with suggestion records.

        Returns:
            The new plan's id.
        """
        if await self._users.get(user_id) is None:
            raise NotFoundError("user", details={"user_id": user_id})

        deactivated = await self._plans.deactivate_active(user_id)
        week_number = await self._plans.next_week_number(user_id)
        start_date = next_monday(self._today())

        weekly_plan = await self._plans.create(WeeklyPlan(
            user_id=user_id,
            week_number=week_number,
            start_date=start_date,
            split_name=plan.split_name,
            days=[day.to_dict() for day in plan.days],
            is_active=True,
        ))

        suggestions = []
        for day in plan.days:
            await self._plans.add_workout(Workout(
                user_id=user_id,
                weekly_plan_id=weekly_plan.id,
                scheduled_date=start_date + timedelta(days=day.day_index),
                day_of_week=day.day_index,
                week_number=week_number,
                workout_type=day.split_type,
                focus_muscles=list(day.focus_muscles),
                title=day.day_label,
                estimated_duration=day.estimated_duration,
                status=WorkoutStatus.SCHEDULED,
                exercises=[
                    WorkoutExercise(
                        exercise_id=ex.exercise_id,
                        order_index=ex.order,
                        target_sets=ex.sets,
                        target_reps=ex.reps,
                        rest_seconds=ex.rest_seconds,
                        status=WorkoutStatus.SCHEDULED,
                    )
                    for ex in day.exercises
                ],
            ))
            suggestions.extend(
                ExerciseSuggestion(
                    user_id=user_id,
                    exercise_id=ex.exercise_id,
                    suggestion_type=SuggestionType.INITIAL_PLAN,
                    day_of_week=day.day_index,
                    week_number=week_number,
                )
                for ex in day.exercises
            )
        await self._plans.add_suggestions(suggestions)

        logger.info(
            "weekly_plan_saved",
            user_id=user_id,
            plan_id=weekly_plan.id,
            week_number=week_number,
            deactivated=deactivated,
        )
        return weekly_plan.id

    async def _scored_for_muscles(
        self,
        context: UserContext,
        muscles: Sequence[str],
        limit: int,
    ) -> list[ScoredExercise]:
        query = build_day_query(context, muscles)
        hits = await self._search.search_for_muscles(
            query,
            muscles,
            threshold=self._settings.day_plan_similarity_threshold,
            limit=limit * 2,
        )
        similarity = {hit.exercise_id: hit.similarity for hit in hits}
        exercises = await self._exercises.list_by_ids([hit.exercise_id for hit in hits])

        exclusions = derive_exclusions(context.health)
        scored = []
        for exercise in exercises:
            result = self._scorer.score(
                exercise,
                context.profile,
                context.preferences,
                context.health,
                exclusions=exclusions,
                semantic_score=similarity[exercise.id],
            )
            if result is not None and result.score > Thresholds.MIN_COMPOSITE_SCORE:
                scored.append(result)

        # sort() is stable: equal scores keep retrieval order
        scored.sort(key=lambda s: s.score, reverse=True)
        return scored[:limit]

    def _prescribe(self, context: UserContext, scored: ScoredExercise, order: int) -> PlannedExercise:
        exercise = scored.exercise
        return PlannedExercise(
            exercise_id=exercise.id,
            name=exercise.name,
            sets=prescription.sets_for_goal(context.profile.primary_goal),
            reps=prescription.reps_for_goal(context.profile.primary_goal, exercise.category),
            rest_seconds=prescription.rest_seconds(context.preferences.rest_preference, exercise.category),
            order=order,
        )
