"""Single-day workout generation, today's workout and exercise swaps.

Unlike the weekly assembler, candidates come from a structured catalog query
(difficulty, location, equipment, target muscles, contraindication tags)
ordered compound first and by popularity, without semantic re-ranking. The
substring constraint filter still applies on top of the query.
"""
from __future__ import annotations

from datetime import date
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from fitplan.core.exceptions import NoAlternativeFoundError, NotFoundError
from fitplan.core.logging import get_logger
from fitplan.core.transactions import transactional
from fitplan.ml.scoring.constraint_filter import contraindication_tags, derive_exclusions, is_excluded
from fitplan.ml.scoring.exercise_scorer import experience_difficulty_cap
from fitplan.models.enums import SuggestionType, WorkoutStatus
from fitplan.models.exercise import Exercise
from fitplan.models.workout import ExerciseSuggestion, Workout, WorkoutExercise
from fitplan.repositories.exercise_repository import ExerciseRepository, SearchFilters
from fitplan.repositories.plan_repository import PlanRepository
from fitplan.repositories.user_repository import UserRepository
from fitplan.services import prescription
from fitplan.services.exercise_selector import select_covering_muscles
from fitplan.services.split_planner import plan_for

logger = get_logger(__name__)


def iso_week_number(day: date) -> int:
    return day.isocalendar()[1]


class DailyWorkoutGenerator:
    def __init__(
        self,
        session: AsyncSession | None,
        *,
        users: UserRepository | None = None,
        exercises: ExerciseRepository | None = None,
        plans: PlanRepository | None = None,
        today: Callable[[], date] = date.today,
    ):
        self._session = session
        self._users = users or UserRepository(session)
        self._exercises = exercises or ExerciseRepository(session)
        self._plans = plans or PlanRepository(session)
        self._today = today

    @transactional
    async def generate_workout(self, user_id: int, day_of_week: int, week_number: int) -> Workout:
        """Generate and persist a workout for one day of the user's split.

        Args:
            user_id: User to generate for.
            day_of_week: Day index, mapped onto the split with modulo.
            week_number: Week the workout belongs to.

        Returns:
            The persisted workout with its exercises loaded.

        Raises:
            NotFoundError: If the user does not exist.
            PreconditionFailedError: If onboarding is incomplete.
        """
        context = await self._users.get_context(user_id)
        profile, preferences = context.profile, context.preferences

        template = plan_for(preferences.workout_days_per_week)
        split_day = template.days[day_of_week % len(template.days)]
        muscles = list(split_day.focus_muscles)
        count = prescription.exercises_per_day(
            preferences.session_duration_min, preferences.rest_preference
        )

        candidates = await self._exercises.find_for_workout(
            target_muscles=muscles,
            max_difficulty=experience_difficulty_cap(profile.experience_level),
            location=preferences.workout_location,
            available_equipment=preferences.available_equipment or [],
            excluded_tags=contraindication_tags(context.health),
        )
        exclusions = derive_exclusions(context.health)
        candidates = [e for e in candidates if not is_excluded(e, exclusions)][: count * 2]
        selected = select_covering_muscles(candidates, count, muscles)

        workout_exercises = []
        for index, exercise in enumerate(selected):
            workout_exercises.append(WorkoutExercise(
                exercise_id=exercise.id,
                order_index=index + 1,
                target_sets=prescription.sets_for_goal(profile.primary_goal),
                target_reps=prescription.reps_for_goal(profile.primary_goal, exercise.category),
                target_rpe=prescription.target_rpe(profile.experience_level, index),
                rest_seconds=prescription.rest_seconds(preferences.rest_preference, exercise.category),
                status=WorkoutStatus.SCHEDULED,
            ))

        split_text = split_day.split_type.value.replace("_", " ")
        workout = await self._plans.add_workout(Workout(
            user_id=user_id,
            scheduled_date=self._today(),
            day_of_week=day_of_week,
            week_number=week_number,
            workout_type=split_day.split_type,
            focus_muscles=muscles,
            title=prescription.workout_title(split_day.split_type),
            description=f"Generated {split_text} workout targeting {', '.join(muscles[:3]) or 'full body'}",
            estimated_duration=prescription.estimate_duration_minutes(
                (we.target_sets, we.rest_seconds) for we in workout_exercises
            ),
            status=WorkoutStatus.SCHEDULED,
            exercises=workout_exercises,
        ))
        await self._plans.add_suggestions([
            ExerciseSuggestion(
                user_id=user_id,
                exercise_id=exercise.id,
                suggestion_type=SuggestionType.DAILY_WORKOUT,
                day_of_week=day_of_week,
                week_number=week_number,
            )
            for exercise in selected
        ])

        logger.info(
            "workout_generated",
            user_id=user_id,
            workout_id=workout.id,
            split_type=split_day.split_type.value,
            exercises=len(selected),
        )
        return await self._plans.get_workout(workout.id)

    async def get_todays_workout(self, user_id: int) -> Workout:
        """Return the workout scheduled today, generating one if there is none."""
        today = self._today()
        existing = await self._plans.get_workout_for_date(user_id, today)
        if existing is not None:
            return existing

        return await self.generate_workout(user_id, today.weekday(), iso_week_number(today))

    @transactional
    async def swap_exercise(self, workout_exercise_id: int, user_id: int) -> WorkoutExercise:
        """Replace a workout exercise with the most popular safe alternative.

        The alternative shares the movement pattern and at least one primary
        muscle, is active, is not the current exercise and is not excluded by
        the user's health constraints. Ties on popularity go to the lower id.

        Raises:
            NotFoundError: If the workout exercise does not exist or belongs
                to another user.
            NoAlternativeFoundError: If no exercise qualifies.
        """
        workout_exercise = await self._plans.get_workout_exercise(workout_exercise_id)
        if workout_exercise is None or workout_exercise.workout.user_id != user_id:
            raise NotFoundError("workout_exercise", details={"workout_exercise_id": workout_exercise_id})

        current = workout_exercise.exercise
        user = await self._users.get(user_id)
        exclusions = derive_exclusions(user.health if user else None)

        alternative = self._pick_alternative(
            current,
            await self._exercises.list_catalog(SearchFilters(exclude_ids={current.id})),
            exclusions,
        )
        if alternative is None:
            raise NoAlternativeFoundError(details={
                "workout_exercise_id": workout_exercise_id,
                "exercise_id": current.id,
            })

        workout_exercise.exercise = alternative
        workout_exercise.exercise_id = alternative.id
        await self._plans.add_suggestions([
            ExerciseSuggestion(
                user_id=user_id,
                exercise_id=alternative.id,
                suggestion_type=SuggestionType.SWAP,
                day_of_week=workout_exercise.workout.day_of_week,
                week_number=workout_exercise.workout.week_number,
            )
        ])

        logger.info(
            "exercise_swapped",
            user_id=user_id,
            workout_exercise_id=workout_exercise_id,
            old_exercise_id=current.id,
            new_exercise_id=alternative.id,
        )
        return workout_exercise

    @staticmethod
    def _pick_alternative(
        current: Exercise,
        candidates: list[Exercise],
        exclusions: frozenset[str],
    ) -> Exercise | None:
        muscles = set(current.primary_muscles or [])
        eligible = [
            candidate for candidate in candidates
            if candidate.id != current.id
            and candidate.movement_pattern == current.movement_pattern
            and muscles & set(candidate.primary_muscles or [])
            and not is_excluded(candidate, exclusions)
        ]
        if not eligible:
            return None
        return min(eligible, key=lambda e: (-(e.popularity_score or 0.0), e.id))

