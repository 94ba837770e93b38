"""
Generate vector embeddings for catalog exercises.

Embeds every active exercise that has no vector yet, or whose vector came
from a different model than the configured provider's, and stores the
vector together with the model name.

Usage:
    python scripts/generate_exercise_embeddings.py
    python scripts/generate_exercise_embeddings.py --batch-size 32
"""
import argparse
import asyncio
import sys

from fitplan.config.settings import get_settings
from fitplan.core.exceptions import EmbeddingError
from fitplan.core.logging import configure_logging, get_logger
from fitplan.db.database import async_session_maker, close_all_engines
from fitplan.llm.embedding_gateway import EmbeddingGateway
from fitplan.models.exercise import Exercise
from fitplan.repositories.exercise_repository import ExerciseRepository

logger = get_logger(__name__)


def build_embedding_text(exercise: Exercise) -> str:
    """Text an exercise is embedded from. Prefers the curated search text."""
    if exercise.search_text:
        return exercise.search_text

    parts = [exercise.name]
    if exercise.description:
        parts.append(exercise.description)
    parts.append(f"Category: {exercise.category.value}")
    if exercise.movement_pattern:
        parts.append(f"Pattern: {exercise.movement_pattern.value}")
    if exercise.primary_muscles:
        parts.append(f"Targets: {', '.join(exercise.primary_muscles)}")
    if exercise.equipment_required:
        parts.append(f"Equipment: {', '.join(exercise.equipment_required)}")
    if exercise.tags:
        parts.append(f"Tags: {', '.join(exercise.tags)}")
    return "\n".join(parts)


async def generate_embeddings(batch_size: int) -> int:
    gateway = EmbeddingGateway.from_settings(get_settings())
    info = gateway.provider_info()
    if not info.available:
        logger.error("embedding_provider_unavailable")
        return 1

    updated = 0
    try:
        async with async_session_maker() as session:
            exercises = await ExerciseRepository(session).list_missing_embeddings(info.model)
            logger.info("embedding_backfill_started", provider=info.name, model=info.model, pending=len(exercises))

            for start in range(0, len(exercises), batch_size):
                batch = exercises[start:start + batch_size]
                try:
                    vectors = await gateway.embed_batch([build_embedding_text(e) for e in batch])
                except EmbeddingError as e:
                    logger.error("embedding_batch_failed", offset=start, code=e.code, error=e.message)
                    await session.commit()
                    return 1

                for exercise, vector in zip(batch, vectors):
                    exercise.embedding = vector
                    exercise.embedding_model = info.model
                updated += len(batch)
                await session.commit()
                logger.info("embedding_batch_saved", saved=updated, pending=len(exercises) - updated)
    finally:
        await gateway.close()
        await close_all_engines()

    logger.info("embedding_backfill_finished", updated=updated)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--batch-size", type=int, default=16)
    args = parser.parse_args()

    configure_logging()
    sys.exit(asyncio.run(generate_embeddings(args.batch_size)))
