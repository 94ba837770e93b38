"""Shared dependencies for API routes."""
from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from fitplan.config.settings import get_settings
from fitplan.core.exceptions import ValidationError
from fitplan.core.logging import add_log_context
from fitplan.db.database import get_db
from fitplan.llm.embedding_gateway import EmbeddingGateway
from fitplan.repositories.exercise_repository import ExerciseRepository
from fitplan.services.plan_assembler import PlanAssemblerService
from fitplan.services.similarity_search import SimilaritySearchService
from fitplan.services.workout_generator import DailyWorkoutGenerator

settings = get_settings()


async def get_current_user_id(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
) -> int:
    """Caller's user id from the X-User-Id header.

    Authentication happens upstream. Without the header the configured
    default user is used.
    """
    if x_user_id is None:
        user_id = settings.default_user_id
    else:
        try:
            user_id = int(x_user_id)
        except ValueError:
            raise ValidationError("x_user_id", "must be an integer")

    add_log_context(user_id=user_id)
    return user_id


def get_embedding_gateway(request: Request) -> EmbeddingGateway:
    return request.app.state.embedding_gateway


def get_search_service(
    db: AsyncSession = Depends(get_db),
    gateway: EmbeddingGateway = Depends(get_embedding_gateway),
) -> SimilaritySearchService:
    return SimilaritySearchService(ExerciseRepository(db), gateway)


def get_plan_assembler(
    db: AsyncSession = Depends(get_db),
    search: SimilaritySearchService = Depends(get_search_service),
) -> PlanAssemblerService:
    return PlanAssemblerService(db, search)


def get_workout_generator(db: AsyncSession = Depends(get_db)) -> DailyWorkoutGenerator:
    return DailyWorkoutGenerator(db)
