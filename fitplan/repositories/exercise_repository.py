from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fitplan.ml.scoring.constants import EQUIPMENT_FULL_GYM, EQUIPMENT_NONE, Thresholds
from fitplan.ml.scoring.exercise_scorer import equipment_matches
from fitplan.models.enums import ExerciseCategory, ExerciseType, WorkoutLocation
from fitplan.models.exercise import Exercise
from fitplan.repositories.base import Repository


@dataclass
class SearchFilters:
    """Structured filters applied alongside similarity or keyword matching."""

    category: ExerciseCategory | None = None
    max_difficulty: int | None = None
    location: WorkoutLocation | None = None
    exclude_ids: set[int] = field(default_factory=set)


_COMPATIBILITY_COLUMNS = {
    WorkoutLocation.HOME: Exercise.home_compatibility,
    WorkoutLocation.GYM: Exercise.gym_compatibility,
    WorkoutLocation.OUTDOOR: Exercise.outdoor_compatibility,
}


def _apply_filters(query, filters: SearchFilters | None):
    if filters is None:
        return query
    if filters.category is not None:
        query = query.where(Exercise.category == filters.category)
    if filters.max_difficulty is not None:
        query = query.where(Exercise.difficulty_level <= filters.max_difficulty)
    if filters.location is not None and filters.location != WorkoutLocation.MIXED:
        column = _COMPATIBILITY_COLUMNS[WorkoutLocation(filters.location)]
        query = query.where(column >= Thresholds.LOCATION_COMPATIBILITY_MIN)
    if filters.exclude_ids:
        query = query.where(Exercise.id.notin_(sorted(filters.exclude_ids)))
    return query


class ExerciseRepository(Repository[Exercise, int]):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> Exercise | None:
        return await self._session.get(Exercise, id)

    async def create(self, entity: Exercise) -> Exercise:
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def list_by_ids(self, ids: Sequence[int]) -> list[Exercise]:
        """Fetch exercises by id, returned in the order of ``ids``.

        Unknown ids are skipped.
        """
        if not ids:
            return []

        result = await self._session.execute(select(Exercise).where(Exercise.id.in_(ids)))
        by_id = {exercise.id: exercise for exercise in result.scalars().all()}
        return [by_id[id] for id in ids if id in by_id]

    async def nearest_by_embedding(
        self,
        vector: Sequence[float],
        threshold: float,
        limit: int,
        filters: SearchFilters | None = None,
        exclude_id: int | None = None,
    ) -> list[tuple[int, float]]:
        """Cosine nearest neighbours among active exercises.

        Only stored vectors with the same dimensionality as ``vector`` are
        compared. Similarity is ``1 - cosine distance``; rows below
        ``threshold`` are dropped. Ties on distance are broken by id.

        Returns:
            List of ``(exercise_id, similarity)`` pairs, most similar first.
        """
        distance = Exercise.embedding.cosine_distance(list(vector))
        similarity = (1 - distance).label("similarity")

        query = (
            select(Exercise.id, similarity)
            .where(Exercise.is_active.is_(True))
            .where(Exercise.embedding.isnot(None))
            .where(func.vector_dims(Exercise.embedding) == len(vector))
            .where(1 - distance >= threshold)
        )
        if exclude_id is not None:
            query = query.where(Exercise.id != exclude_id)
        query = _apply_filters(query, filters)
        query = query.order_by(distance, Exercise.id).limit(limit)

        result = await self._session.execute(query)
        return [(row.id, float(row.similarity)) for row in result.all()]

    async def list_catalog(self, filters: SearchFilters | None = None) -> list[Exercise]:
        """Active exercises matching the structured filters, in catalog order."""
        query = select(Exercise).where(Exercise.is_active.is_(True))
        query = _apply_filters(query, filters).order_by(Exercise.id)
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def list_missing_embeddings(self, model: str | None = None) -> list[Exercise]:
        """Exercises with no vector, or one produced by a different model."""
        query = select(Exercise).where(Exercise.is_active.is_(True))
        if model:
            query = query.where((Exercise.embedding.is_(None)) | (Exercise.embedding_model != model))
        else:
            query = query.where(Exercise.embedding.is_(None))
        result = await self._session.execute(query.order_by(Exercise.id))
        return list(result.scalars().all())

    async def find_for_workout(
        self,
        target_muscles: Sequence[str],
        max_difficulty: int,
        location: WorkoutLocation | None,
        available_equipment: Sequence[str],
        excluded_tags: frozenset[str] | set[str] = frozenset(),
    ) -> list[Exercise]:
        """Catalog candidates for a single generated workout.

        Difficulty and location are filtered in SQL; primary-muscle overlap,
        equipment and contraindication tags are checked on the loaded rows
        since they live in JSON columns. An empty ``target_muscles`` skips
        the muscle check.

        Results are ordered compound first, then by popularity, then id.
        """
        filters = SearchFilters(max_difficulty=max_difficulty, location=location)
        targets = set(target_muscles)

        candidates = []
        for exercise in await self.list_catalog(filters):
            if targets and not targets & set(exercise.primary_muscles or []):
                continue
            if not _has_equipment(exercise, available_equipment):
                continue
            if excluded_tags and set(exercise.contraindications or []) & set(excluded_tags):
                continue
            candidates.append(exercise)

        type_order = {value: index for index, value in enumerate(ExerciseType)}
        candidates.sort(key=lambda e: (
            type_order.get(e.exercise_type, len(type_order)),
            -(e.popularity_score or 0.0),
            e.id,
        ))
        return candidates


def _has_equipment(exercise: Exercise, available: Sequence[str]) -> bool:
    required = exercise.equipment_required or []
    if not available or EQUIPMENT_FULL_GYM in available:
        return True
    if EQUIPMENT_NONE in available:
        return not required
    return not required or equipment_matches(required, available)
