"""Persistence tests for weekly plans, daily workouts and swaps on SQLite."""
from datetime import date

import pytest
from sqlalchemy import func, select

from fitplan.core.exceptions import NoAlternativeFoundError, NotFoundError, PreconditionFailedError
from fitplan.models.enums import MovementPattern, SplitType, SuggestionType
from fitplan.models.exercise import Exercise
from fitplan.models.workout import ExerciseSuggestion, WeeklyPlan, Workout, WorkoutExercise
from fitplan.repositories.exercise_repository import ExerciseRepository
from fitplan.services.plan_assembler import PlanAssemblerService
from fitplan.services.similarity_search import SimilaritySearchService
from fitplan.services.workout_generator import DailyWorkoutGenerator
from tests.conftest import make_exercise


@pytest.fixture
def assembler(seeded_session, null_gateway):
    search = SimilaritySearchService(ExerciseRepository(seeded_session), null_gateway)
    return PlanAssemblerService(seeded_session, search, today=lambda: date(2024, 1, 3))


@pytest.fixture
def generator(seeded_session):
    return DailyWorkoutGenerator(seeded_session, today=lambda: date(2024, 1, 8))


async def _count(session, model, *where):
    result = await session.execute(select(func.count()).select_from(model).where(*where))
    return result.scalar()


class TestUserContext:

    @pytest.mark.asyncio
    async def test_incomplete_onboarding(self, assembler):
        with pytest.raises(PreconditionFailedError) as exc_info:
            await assembler.generate_weekly_plan(3)
        assert exc_info.value.code == "PRE_ONBOARDING_001"
        assert exc_info.value.details["has_profile"] is False

    @pytest.mark.asyncio
    async def test_unknown_user(self, assembler):
        with pytest.raises(NotFoundError) as exc_info:
            await assembler.generate_weekly_plan(999)
        assert exc_info.value.code == "NF_USER_001"


class TestSaveWeeklyPlan:

    @pytest.mark.asyncio
    async def test_save_creates_plan_workouts_and_suggestions(self, seeded_session, assembler):
        plan = await assembler.generate_weekly_plan(1)
        plan_id = await assembler.save_weekly_plan(1, plan)
        await seeded_session.commit()

        saved = await seeded_session.get(WeeklyPlan, plan_id)
        assert saved.is_active
        assert saved.week_number == 1
        assert saved.start_date == date(2024, 1, 8)
        assert [day["day_label"] for day in saved.days] == ["Full Body A", "Full Body B", "Full Body C"]

        workouts = (await seeded_session.execute(
            select(Workout).where(Workout.weekly_plan_id == plan_id).order_by(Workout.day_of_week)
        )).scalars().all()
        assert [w.scheduled_date for w in workouts] == [date(2024, 1, 8), date(2024, 1, 9), date(2024, 1, 10)]
        assert [w.title for w in workouts] == ["Full Body A", "Full Body B", "Full Body C"]
        assert all(w.workout_type == SplitType.FULL_BODY for w in workouts)

        suggestions = await _count(
            seeded_session, ExerciseSuggestion,
            ExerciseSuggestion.user_id == 1,
            ExerciseSuggestion.suggestion_type == SuggestionType.INITIAL_PLAN,
        )
        assert suggestions == plan.total_exercises
        assert await _count(seeded_session, WorkoutExercise) == plan.total_exercises

    @pytest.mark.asyncio
    async def test_new_plan_deactivates_previous(self, seeded_session, assembler):
        first_id = await assembler.save_weekly_plan(1, await assembler.generate_weekly_plan(1))
        second_id = await assembler.save_weekly_plan(1, await assembler.generate_weekly_plan(1))
        await seeded_session.commit()

        first = await seeded_session.get(WeeklyPlan, first_id)
        second = await seeded_session.get(WeeklyPlan, second_id)
        assert not first.is_active
        assert first.deactivated_at is not None
        assert second.is_active
        assert second.week_number == 2
        assert await _count(seeded_session, WeeklyPlan, WeeklyPlan.user_id == 1, WeeklyPlan.is_active.is_(True)) == 1

    @pytest.mark.asyncio
    async def test_other_users_plans_are_untouched(self, seeded_session, assembler):
        other_id = await assembler.save_weekly_plan(2, await assembler.generate_weekly_plan(2))
        await assembler.save_weekly_plan(1, await assembler.generate_weekly_plan(1))
        await seeded_session.commit()

        assert (await seeded_session.get(WeeklyPlan, other_id)).is_active

    @pytest.mark.asyncio
    async def test_save_for_unknown_user(self, assembler):
        plan = await assembler.generate_weekly_plan(1)
        with pytest.raises(NotFoundError):
            await assembler.save_weekly_plan(999, plan)


class TestGenerateWorkout:

    @pytest.mark.asyncio
    async def test_structured_selection_and_prescription(self, generator):
        workout = await generator.generate_workout(2, day_of_week=0, week_number=2)

        assert workout.title == "Full Body Workout"
        assert workout.workout_type == SplitType.FULL_BODY
        assert workout.scheduled_date == date(2024, 1, 8)
        assert [we.exercise_id for we in workout.exercises] == [5, 7, 1, 9, 2, 6, 3]
        assert [we.order_index for we in workout.exercises] == list(range(1, 8))
        assert [we.target_rpe for we in workout.exercises] == [7, 7, 7, 7, 7, 6, 6]
        assert all(we.target_sets == 4 and we.target_reps == "4-6" for we in workout.exercises)
        assert workout.estimated_duration == 63

    @pytest.mark.asyncio
    async def test_injured_user_never_gets_excluded_exercises(self, generator):
        workout = await generator.generate_workout(1, day_of_week=0, week_number=2)

        ids = {we.exercise_id for we in workout.exercises}
        assert ids
        assert ids.isdisjoint({1, 2, 3, 4, 14})

    @pytest.mark.asyncio
    async def test_day_of_week_wraps_around_split(self, generator):
        workout = await generator.generate_workout(2, day_of_week=4, week_number=2)
        assert workout.focus_muscles == ["chest", "back", "legs", "arms"]

    @pytest.mark.asyncio
    async def test_todays_workout_is_generated_once(self, seeded_session, generator):
        first = await generator.get_todays_workout(2)
        second = await generator.get_todays_workout(2)

        assert first.id == second.id
        assert first.week_number == 2
        assert first.day_of_week == 0
        assert await _count(seeded_session, Workout, Workout.user_id == 2) == 1


class TestSwapExercise:

    @pytest.mark.asyncio
    async def test_swap_picks_same_pattern_shared_muscle(self, seeded_session, generator):
        workout = await generator.generate_workout(2, day_of_week=0, week_number=2)
        push_up = next(we for we in workout.exercises if we.exercise_id == 5)

        swapped = await generator.swap_exercise(push_up.id, 2)

        assert swapped.exercise_id == 6
        assert swapped.exercise.name == "Incline Push-Up"
        assert await _count(
            seeded_session, ExerciseSuggestion, ExerciseSuggestion.suggestion_type == SuggestionType.SWAP
        ) == 1

    @pytest.mark.asyncio
    async def test_no_alternative(self, generator):
        workout = await generator.generate_workout(2, day_of_week=0, week_number=2)
        row = next(we for we in workout.exercises if we.exercise_id == 7)

        with pytest.raises(NoAlternativeFoundError) as exc_info:
            await generator.swap_exercise(row.id, 2)
        assert exc_info.value.code == "BR_NO_ALTERNATIVE"

    @pytest.mark.asyncio
    async def test_other_users_exercise_is_not_found(self, generator):
        workout = await generator.generate_workout(2, day_of_week=0, week_number=2)

        with pytest.raises(NotFoundError):
            await generator.swap_exercise(workout.exercises[0].id, 1)

    @pytest.mark.asyncio
    async def test_missing_workout_exercise(self, generator):
        with pytest.raises(NotFoundError):
            await generator.swap_exercise(12345, 2)


class TestPickAlternative:

    def _candidates(self):
        return [
            make_exercise(2, "Split Squat Hold", movement_pattern=MovementPattern.LUNGE,
                          primary_muscles=["legs"], popularity_score=0.7),
            make_exercise(3, "Step Back", movement_pattern=MovementPattern.LUNGE,
                          primary_muscles=["legs"], popularity_score=0.9),
            make_exercise(4, "Curtsy Step", movement_pattern=MovementPattern.LUNGE,
                          primary_muscles=["legs"], popularity_score=0.9),
            make_exercise(5, "Hamstring Hold", movement_pattern=MovementPattern.LUNGE,
                          primary_muscles=["hamstrings"], popularity_score=1.0),
        ]

    def test_highest_popularity_then_lowest_id(self):
        current = make_exercise(1, "Reverse Step", movement_pattern=MovementPattern.LUNGE, primary_muscles=["legs"])
        alternative = DailyWorkoutGenerator._pick_alternative(current, self._candidates(), frozenset())
        assert alternative.id == 3

    def test_exclusions_apply(self):
        current = make_exercise(1, "Reverse Step", movement_pattern=MovementPattern.LUNGE, primary_muscles=["legs"])
        alternative = DailyWorkoutGenerator._pick_alternative(current, self._candidates(), frozenset({"lunge"}))
        assert alternative is None


class TestEmbeddingBackfillQuery:

    @pytest.mark.asyncio
    async def test_lists_active_exercises_without_vectors(self, seeded_session):
        exercise = await seeded_session.get(Exercise, 4)
        exercise.is_active = False
        await seeded_session.flush()

        missing = await ExerciseRepository(seeded_session).list_missing_embeddings("text-embedding-3-small")

        ids = [e.id for e in missing]
        assert ids == sorted(ids)
        assert 4 not in ids
        assert len(ids) == 13
