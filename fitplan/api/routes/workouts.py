"""
Daily workout routes: today's workout, on-demand generation and swaps.
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from fitplan.api.routes.dependencies import get_current_user_id, get_workout_generator
from fitplan.schemas.plan import WorkoutExerciseResponse, WorkoutResponse
from fitplan.services.workout_generator import DailyWorkoutGenerator

router = APIRouter()


class GenerateWorkoutRequest(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6)
    week_number: int = Field(..., ge=1)


@router.get("/today", response_model=WorkoutResponse)
async def get_todays_workout(
    user_id: int = Depends(get_current_user_id),
    generator: DailyWorkoutGenerator = Depends(get_workout_generator),
):
    """Today's scheduled workout, generated on first request of the day."""
    return await generator.get_todays_workout(user_id)


@router.post("/generate", response_model=WorkoutResponse, status_code=201)
async def generate_workout(
    request: GenerateWorkoutRequest,
    user_id: int = Depends(get_current_user_id),
    generator: DailyWorkoutGenerator = Depends(get_workout_generator),
):
    return await generator.generate_workout(user_id, request.day_of_week, request.week_number)


@router.post("/exercises/{workout_exercise_id}/swap", response_model=WorkoutExerciseResponse)
async def swap_exercise(
    workout_exercise_id: int,
    user_id: int = Depends(get_current_user_id),
    generator: DailyWorkoutGenerator = Depends(get_workout_generator),
):
    """Replace an exercise with a similar, safe alternative."""
    return await generator.swap_exercise(workout_exercise_id, user_id)
