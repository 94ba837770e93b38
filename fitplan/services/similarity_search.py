"""Semantic exercise search with a keyword fallback.

Vector search runs through the embedding gateway and pgvector. Whenever the
gateway cannot produce a usable query vector (no provider configured, HTTP
failure, timeout, wrong dimensionality) the call degrades to a keyword match
over the catalog. Fallback hits all carry the same fixed similarity, so their
scores are not comparable with vector hits or across requests.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Sequence

from fitplan.core.exceptions import EmbeddingError, NotFoundError
from fitplan.core.logging import get_logger
from fitplan.llm.embedding_gateway import EmbeddingGateway
from fitplan.ml.scoring.constants import Thresholds
from fitplan.ml.scoring.exercise_scorer import DIFFICULTY_LABELS
from fitplan.models.enums import WorkoutLocation
from fitplan.models.exercise import Exercise
from fitplan.repositories.exercise_repository import ExerciseRepository, SearchFilters

logger = get_logger(__name__)

LEXICAL_FALLBACK_SIMILARITY = Thresholds.LEXICAL_FALLBACK_SIMILARITY

_WORD = re.compile(r"[a-z0-9_]+")


@dataclass(frozen=True)
class SearchHit:
    exercise_id: int
    similarity: float
    fallback: bool = False


@dataclass
class RecommendationCriteria:
    target_muscles: list[str] = field(default_factory=list)
    goals: list[str] = field(default_factory=list)
    difficulty: int | None = None
    location: WorkoutLocation | None = None
    equipment: list[str] = field(default_factory=list)
    exclude_ids: set[int] = field(default_factory=set)
    limit: int = 10


def _enum_text(value) -> str:
    return getattr(value, "value", value) or ""


def lexical_match(exercise: Exercise, query: str, words: set[str]) -> bool:
    """Keyword rule used when no query vector is available.

    Matches when the whole query is a case-insensitive substring of the
    name, description or search text, or when any query word equals one of
    the exercise's primary muscles or tags.
    """
    needle = query.lower()
    for text in (exercise.name, exercise.description, exercise.search_text):
        if text and needle in text.lower():
            return True

    keywords = {str(m).lower() for m in (exercise.primary_muscles or [])}
    keywords |= {str(t).lower() for t in (exercise.tags or [])}
    return bool(words & keywords)


class SimilaritySearchService:
    def __init__(self, exercises: ExerciseRepository, gateway: EmbeddingGateway):
        self._exercises = exercises
        self._gateway = gateway

    async def search(
        self,
        query_vector: Sequence[float],
        threshold: float = Thresholds.SEARCH_SIMILARITY,
        limit: int = 10,
        filters: SearchFilters | None = None,
    ) -> list[SearchHit]:
        """Nearest catalog exercises to ``query_vector``, most similar first.

        Raises:
            EmbeddingDimensionMismatchError: If the vector's length differs
                from the active provider's dimensionality.
        """
        if self._gateway.is_available():
            self._gateway.verify_dimensions(query_vector)

        rows = await self._exercises.nearest_by_embedding(
            query_vector, threshold=threshold, limit=limit, filters=filters
        )
        return [SearchHit(exercise_id=id, similarity=similarity) for id, similarity in rows]

    async def search_text(
        self,
        query: str,
        threshold: float = Thresholds.SEARCH_SIMILARITY,
        limit: int = 10,
        filters: SearchFilters | None = None,
    ) -> list[SearchHit]:
        """Embed ``query`` and search; fall back to keyword matching on failure."""
        try:
            vector = await self._gateway.embed(query)
        except EmbeddingError as e:
            logger.info("semantic_search_fallback", reason=e.code, query=query[:80])
            return await self.lexical_search(query, limit=limit, filters=filters)

        return await self.search(vector, threshold=threshold, limit=limit, filters=filters)

    async def search_for_muscles(
        self,
        query: str,
        muscles: Sequence[str],
        threshold: float = Thresholds.DAY_PLAN_SIMILARITY,
        limit: int = 10,
        filters: SearchFilters | None = None,
    ) -> list[SearchHit]:
        """Semantic search for a muscle-focused query.

        Without a usable query vector the fallback keeps the muscle focus:
        exercises whose primary or secondary muscles overlap ``muscles``.
        A query with no muscles uses the keyword fallback instead.
        """
        try:
            vector = await self._gateway.embed(query)
        except EmbeddingError as e:
            logger.info("muscle_search_fallback", reason=e.code, muscles=list(muscles))
            if not muscles:
                return await self.lexical_search(query, limit=limit, filters=filters)
            return await self.muscle_overlap_search(muscles, limit=limit, filters=filters)

        return await self.search(vector, threshold=threshold, limit=limit, filters=filters)

    async def muscle_overlap_search(
        self,
        muscles: Sequence[str],
        limit: int = 10,
        filters: SearchFilters | None = None,
    ) -> list[SearchHit]:
        wanted = {m.lower() for m in muscles}
        hits = []
        for exercise in await self._exercises.list_catalog(filters):
            worked = {str(m).lower() for m in (exercise.primary_muscles or [])}
            worked |= {str(m).lower() for m in (exercise.secondary_muscles or [])}
            if wanted & worked:
                hits.append(SearchHit(exercise.id, LEXICAL_FALLBACK_SIMILARITY, fallback=True))
                if len(hits) >= limit:
                    break
        return hits

    async def lexical_search(
        self,
        query: str,
        limit: int = 10,
        filters: SearchFilters | None = None,
    ) -> list[SearchHit]:
        words = set(_WORD.findall(query.lower()))
        hits = []
        for exercise in await self._exercises.list_catalog(filters):
            if lexical_match(exercise, query, words):
                hits.append(SearchHit(exercise.id, LEXICAL_FALLBACK_SIMILARITY, fallback=True))
                if len(hits) >= limit:
                    break
        return hits

    async def search_by_exercise_id(self, exercise_id: int, limit: int = 5) -> list[SearchHit]:
        """Exercises most similar to an existing catalog exercise.

        Uses the stored vector when there is one of the current provider's
        dimensionality. Otherwise returns exercises sharing the movement
        pattern or a primary muscle, tagged with a fixed similarity.

        Raises:
            NotFoundError: If the exercise does not exist.
        """
        exercise = await self._exercises.get(exercise_id)
        if exercise is None:
            raise NotFoundError("exercise", details={"exercise_id": exercise_id})

        embedding = exercise.embedding
        if embedding is not None and len(embedding) > 0 and len(embedding) == self._gateway.dimensions:
            rows = await self._exercises.nearest_by_embedding(
                list(embedding), threshold=-1.0, limit=limit, exclude_id=exercise_id
            )
            return [SearchHit(exercise_id=id, similarity=similarity) for id, similarity in rows]

        return await self._related_exercises(exercise, limit)

    async def _related_exercises(self, exercise: Exercise, limit: int) -> list[SearchHit]:
        muscles = set(exercise.primary_muscles or [])
        hits = []
        for candidate in await self._exercises.list_catalog(SearchFilters(exclude_ids={exercise.id})):
            same_pattern = (
                exercise.movement_pattern is not None
                and candidate.movement_pattern == exercise.movement_pattern
            )
            if same_pattern or muscles & set(candidate.primary_muscles or []):
                hits.append(SearchHit(
                    candidate.id, Thresholds.RELATED_EXERCISE_FALLBACK_SIMILARITY, fallback=True
                ))
                if len(hits) >= limit:
                    break
        return hits

    async def recommend(self, criteria: RecommendationCriteria) -> list[SearchHit]:
        """Search from structured criteria, dropping excluded exercise ids."""
        parts = []
        if criteria.target_muscles:
            parts.append(f"exercises for {' and '.join(criteria.target_muscles)}")
        if criteria.goals:
            parts.append(f"good for {' and '.join(criteria.goals)}")
        if criteria.difficulty:
            parts.append(f"{DIFFICULTY_LABELS.get(criteria.difficulty, 'advanced')} level")
        if criteria.location:
            parts.append(f"suitable for {_enum_text(criteria.location)}")
        if criteria.equipment:
            parts.append(f"using {' or '.join(criteria.equipment)}")
        query = ", ".join(parts) if parts else "effective exercise"

        filters = SearchFilters(
            max_difficulty=criteria.difficulty,
            location=criteria.location,
            exclude_ids=set(criteria.exclude_ids),
        )
        return await self.search_text(
            query,
            threshold=Thresholds.DAY_PLAN_SIMILARITY,
            limit=criteria.limit,
            filters=filters,
        )
