"""
Exercise suggestion and weekly plan routes.
"""
from fastapi import APIRouter, Depends, Query

from fitplan.api.routes.dependencies import (
    get_current_user_id,
    get_embedding_gateway,
    get_plan_assembler,
    get_search_service,
)
from fitplan.llm.embedding_gateway import EmbeddingGateway
from fitplan.config.settings import get_settings
from fitplan.models.enums import ExerciseCategory, WorkoutLocation
from fitplan.repositories.exercise_repository import SearchFilters
from fitplan.schemas.plan import (
    ProviderInfoResponse,
    RecommendRequest,
    ScoredExerciseResponse,
    SearchHitResponse,
    WeeklyPlanResponse,
)
from fitplan.services.plan_assembler import PlanAssemblerService
from fitplan.services.similarity_search import RecommendationCriteria, SimilaritySearchService

router = APIRouter()


@router.get("/exercises", response_model=list[ScoredExerciseResponse])
async def get_exercises_for_muscles(
    muscles: list[str] = Query(..., description="Target muscles, e.g. ?muscles=chest&muscles=triceps"),
    limit: int = Query(20, ge=1, le=100),
    user_id: int = Depends(get_current_user_id),
    assembler: PlanAssemblerService = Depends(get_plan_assembler),
):
    """Ranked, constraint-safe exercises for the given muscles."""
    scored = await assembler.get_exercises_for_muscles(user_id, muscles, limit)
    return [ScoredExerciseResponse.from_scored(s) for s in scored]


@router.get("/weekly-plan/preview", response_model=WeeklyPlanResponse)
async def preview_weekly_plan(
    user_id: int = Depends(get_current_user_id),
    assembler: PlanAssemblerService = Depends(get_plan_assembler),
):
    """Generate a weekly plan without saving it."""
    plan = await assembler.generate_weekly_plan(user_id)
    return WeeklyPlanResponse.from_result(plan)


@router.post("/weekly-plan", response_model=WeeklyPlanResponse, status_code=201)
async def create_weekly_plan(
    user_id: int = Depends(get_current_user_id),
    assembler: PlanAssemblerService = Depends(get_plan_assembler),
):
    """Generate a weekly plan and make it the user's active plan."""
    plan = await assembler.generate_weekly_plan(user_id)
    plan_id = await assembler.save_weekly_plan(user_id, plan)
    return WeeklyPlanResponse.from_result(plan, plan_id=plan_id)


@router.get("/search", response_model=list[SearchHitResponse])
async def search_exercises(
    q: str = Query(..., min_length=1, description="Natural-language query"),
    limit: int | None = Query(None, ge=1, le=50),
    threshold: float | None = Query(None, ge=-1.0, le=1.0, description="Minimum cosine similarity"),
    category: ExerciseCategory | None = Query(None),
    max_difficulty: int | None = Query(None, ge=1, le=5),
    location: WorkoutLocation | None = Query(None),
    search: SimilaritySearchService = Depends(get_search_service),
):
    settings = get_settings()
    filters = SearchFilters(category=category, max_difficulty=max_difficulty, location=location)
    hits = await search.search_text(
        q,
        threshold=settings.search_similarity_threshold if threshold is None else threshold,
        limit=limit or settings.search_default_limit,
        filters=filters,
    )
    return [SearchHitResponse(exercise_id=h.exercise_id, similarity=h.similarity, fallback=h.fallback) for h in hits]


@router.post("/recommend", response_model=list[SearchHitResponse])
async def recommend_exercises(
    request: RecommendRequest,
    search: SimilaritySearchService = Depends(get_search_service),
):
    """Recommendations from structured criteria instead of free text."""
    hits = await search.recommend(RecommendationCriteria(
        target_muscles=request.target_muscles,
        goals=request.goals,
        difficulty=request.difficulty,
        location=request.location,
        equipment=request.equipment,
        exclude_ids=set(request.exclude_exercise_ids),
        limit=request.limit,
    ))
    return [SearchHitResponse(exercise_id=h.exercise_id, similarity=h.similarity, fallback=h.fallback) for h in hits]


@router.get("/exercises/{exercise_id}/similar", response_model=list[SearchHitResponse])
async def similar_exercises(
    exercise_id: int,
    limit: int = Query(5, ge=1, le=50),
    search: SimilaritySearchService = Depends(get_search_service),
):
    hits = await search.search_by_exercise_id(exercise_id, limit)
    return [SearchHitResponse(exercise_id=h.exercise_id, similarity=h.similarity, fallback=h.fallback) for h in hits]


@router.get("/provider", response_model=ProviderInfoResponse)
async def embedding_provider_info(gateway: EmbeddingGateway = Depends(get_embedding_gateway)):
    info = gateway.provider_info()
    return ProviderInfoResponse(
        name=info.name,
        model=info.model,
        dimensions=info.dimensions,
        available=info.available,
    )
