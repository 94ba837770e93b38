"""Greedy exercise selection for a single training day."""
from __future__ import annotations

from typing import Callable, Sequence, TypeVar

from fitplan.core.logging import get_logger
from fitplan.ml.scoring.exercise_scorer import ScoredExercise
from fitplan.models.enums import ExerciseType
from fitplan.models.exercise import Exercise

logger = get_logger(__name__)

T = TypeVar("T")


def _warn_short(selected: list, count: int, available: int, strategy: str) -> None:
    if len(selected) < count:
        logger.warning(
            "no_candidates",
            strategy=strategy,
            requested=count,
            selected=len(selected),
            available=available,
        )


def select_balanced(
    ranked: Sequence[ScoredExercise],
    count: int,
    target_muscles: Sequence[str] = (),
) -> list[ScoredExercise]:
    """Pick ``count`` exercises from candidates sorted best first.

    Pass 1 takes the first candidate of every movement pattern not yet seen,
    in rank order. Pass 2 fills the remaining slots by rank. Ties within a
    pattern go to the earlier candidate. Fewer than ``count`` items are
    returned only when there are fewer candidates.

    ``target_muscles`` is accepted so callers can pass the day focus; pattern
    variety, not muscle coverage, drives this selector.
    """
    if count <= 0:
        return []

    selected: list[ScoredExercise] = []
    chosen: set[int] = set()
    seen_patterns: set[str | None] = set()

    for candidate in ranked:
        if len(selected) >= count:
            break
        if candidate.movement_pattern not in seen_patterns:
            selected.append(candidate)
            chosen.add(id(candidate))
            seen_patterns.add(candidate.movement_pattern)

    for candidate in ranked:
        if len(selected) >= count:
            break
        if id(candidate) not in chosen:
            selected.append(candidate)
            chosen.add(id(candidate))

    _warn_short(selected, count, len(ranked), "pattern_variety")
    return selected


def _is_compound(exercise: Exercise) -> bool:
    return exercise.exercise_type == ExerciseType.COMPOUND


def select_covering_muscles(
    candidates: Sequence[T],
    count: int,
    target_muscles: Sequence[str],
    exercise_of: Callable[[T], Exercise] = lambda item: item,
) -> list[T]:
    """Pick ``count`` items so each target muscle gets at least one exercise.

    Pass 1 walks the target muscles in order and takes the first unchosen
    candidate whose primary muscles include it. Pass 2 fills by candidate
    order. The result is reordered compound first, keeping relative order
    otherwise.
    """
    if count <= 0:
        return []

    selected: list[T] = []
    chosen: set[int] = set()

    for muscle in target_muscles:
        if len(selected) >= count:
            break
        for candidate in candidates:
            if id(candidate) in chosen:
                continue
            if muscle in (exercise_of(candidate).primary_muscles or []):
                selected.append(candidate)
                chosen.add(id(candidate))
                break

    for candidate in candidates:
        if len(selected) >= count:
            break
        if id(candidate) not in chosen:
            selected.append(candidate)
            chosen.add(id(candidate))

    _warn_short(selected, count, len(candidates), "muscle_coverage")
    # sorted() is stable
    return sorted(selected, key=lambda item: not _is_compound(exercise_of(item)))
