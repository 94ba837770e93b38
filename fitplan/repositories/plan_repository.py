from __future__ import annotations

from datetime import date

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fitplan.db.database import utcnow
from fitplan.models.workout import ExerciseSuggestion, WeeklyPlan, Workout, WorkoutExercise
from fitplan.repositories.base import Repository


class PlanRepository(Repository[WeeklyPlan, int]):
    """Weekly plans, their scheduled workouts and suggestion tracking."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> WeeklyPlan | None:
        result = await self._session.execute(
            select(WeeklyPlan)
            .options(selectinload(WeeklyPlan.workouts).selectinload(Workout.exercises))
            .where(WeeklyPlan.id == id)
        )
        return result.scalar_one_or_none()

    async def create(self, entity: WeeklyPlan) -> WeeklyPlan:
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def deactivate_active(self, user_id: int) -> int:
        """Mark every active plan of the user inactive. Returns how many changed."""
        result = await self._session.execute(
            update(WeeklyPlan)
            .where(WeeklyPlan.user_id == user_id, WeeklyPlan.is_active.is_(True))
            .values(is_active=False, deactivated_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    async def next_week_number(self, user_id: int) -> int:
        result = await self._session.execute(
            select(func.max(WeeklyPlan.week_number)).where(WeeklyPlan.user_id == user_id)
        )
        return (result.scalar() or 0) + 1

    async def add_workout(self, workout: Workout) -> Workout:
        self._session.add(workout)
        await self._session.flush()
        return workout

    async def add_suggestions(self, suggestions: list[ExerciseSuggestion]) -> None:
        self._session.add_all(suggestions)
        await self._session.flush()

    async def get_workout(self, workout_id: int) -> Workout | None:
        result = await self._session.execute(
            select(Workout)
            .options(selectinload(Workout.exercises).selectinload(WorkoutExercise.exercise))
            .where(Workout.id == workout_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_workout_for_date(self, user_id: int, day: date) -> Workout | None:
        result = await self._session.execute(
            select(Workout)
            .options(selectinload(Workout.exercises).selectinload(WorkoutExercise.exercise))
            .where(Workout.user_id == user_id, Workout.scheduled_date == day)
            .order_by(Workout.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_workout_exercise(self, workout_exercise_id: int) -> WorkoutExercise | None:
        result = await self._session.execute(
            select(WorkoutExercise)
            .options(selectinload(WorkoutExercise.workout))
            .options(selectinload(WorkoutExercise.exercise))
            .where(WorkoutExercise.id == workout_exercise_id)
        )
        return result.scalar_one_or_none()
