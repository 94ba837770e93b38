"""
Shared fixtures for the test suite.

Provides:
- An in-memory SQLite database with the full schema
- Factories for catalog exercises and onboarded users
- Fake embedding providers and an in-memory exercise repository
"""
from typing import List

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import fitplan.models  # noqa: F401
from fitplan.db.database import Base
from fitplan.llm.embedding_gateway import EmbeddingGateway
from fitplan.llm.embedding_provider import EmbeddingProvider, NullEmbeddingProvider
from fitplan.models.enums import (
    ExerciseCategory,
    ExerciseType,
    ExperienceLevel,
    FitnessGoal,
    FitnessLevel,
    MovementPattern,
    RestPreference,
    WorkoutLocation,
)
from fitplan.models.exercise import Exercise
from fitplan.models.user import User, UserHealth, UserPreferences, UserProfile
from fitplan.repositories.exercise_repository import SearchFilters
from fitplan.repositories.user_repository import UserContext


def make_exercise(id: int, name: str, **overrides) -> Exercise:
    """Catalog exercise with sensible bodyweight defaults."""
    fields = dict(
        id=id,
        name=name,
        slug=name.lower().replace(" ", "_").replace("-", "_"),
        description=f"{name} exercise",
        search_text=None,
        category=ExerciseCategory.STRENGTH,
        movement_pattern=MovementPattern.HORIZONTAL_PUSH,
        exercise_type=ExerciseType.COMPOUND,
        primary_muscles=["chest"],
        secondary_muscles=[],
        tags=[],
        difficulty_level=2,
        equipment_required=[],
        equipment_optional=[],
        home_compatibility=0.9,
        gym_compatibility=0.9,
        outdoor_compatibility=0.7,
        goal_effectiveness={"strength": 0.8, "general_fitness": 0.7},
        experience_suitability={},
        contraindications=[],
        popularity_score=0.5,
        is_active=True,
    )
    fields.update(overrides)
    return Exercise(**fields)


def make_profile(**overrides) -> UserProfile:
    fields = dict(
        fitness_level=FitnessLevel.MODERATELY_ACTIVE,
        experience_level=ExperienceLevel.INTERMEDIATE,
        primary_goal=FitnessGoal.STRENGTH,
        secondary_goals=[],
        age=30,
    )
    fields.update(overrides)
    return UserProfile(**fields)


def make_preferences(**overrides) -> UserPreferences:
    fields = dict(
        workout_location=WorkoutLocation.HOME,
        available_equipment=["none"],
        workout_days_per_week=3,
        session_duration_min=45,
        preferred_exercise_types=[],
        rest_preference=RestPreference.MODERATE,
    )
    fields.update(overrides)
    return UserPreferences(**fields)


def make_health(**overrides) -> UserHealth:
    fields = dict(
        injuries=[],
        chronic_conditions=[],
        is_pregnant=False,
        recent_surgery=False,
        contraindicated_movements=[],
        contraindicated_exercises=[],
    )
    fields.update(overrides)
    return UserHealth(**fields)


def make_context(user_id: int = 1, profile=None, preferences=None, health=None) -> UserContext:
    return UserContext(
        user_id=user_id,
        profile=profile or make_profile(),
        preferences=preferences or make_preferences(),
        health=health,
    )


def home_catalog() -> List[Exercise]:
    """Small bodyweight catalog covering the 3-day full body split."""
    return [
        make_exercise(1, "Bodyweight Squat", movement_pattern=MovementPattern.SQUAT,
                      primary_muscles=["legs", "quadriceps"], popularity_score=0.9),
        make_exercise(2, "Reverse Lunge", movement_pattern=MovementPattern.LUNGE,
                      primary_muscles=["legs", "glutes"], popularity_score=0.8),
        make_exercise(3, "Jump Squat", movement_pattern=MovementPattern.SQUAT,
                      category=ExerciseCategory.PLYOMETRIC, primary_muscles=["legs"],
                      difficulty_level=3, contraindications=["knee_injury"]),
        make_exercise(4, "Leg Press", movement_pattern=MovementPattern.SQUAT,
                      primary_muscles=["legs"], equipment_required=["leg_press_machine"],
                      home_compatibility=0.0),
        make_exercise(5, "Push-Up", slug="push_up", primary_muscles=["chest", "triceps"],
                      popularity_score=0.95),
        make_exercise(6, "Incline Push-Up", slug="incline_push_up", primary_muscles=["chest"],
                      difficulty_level=1, popularity_score=0.6),
        make_exercise(7, "Inverted Row", movement_pattern=MovementPattern.HORIZONTAL_PULL,
                      primary_muscles=["back", "biceps"], popularity_score=0.7),
        make_exercise(8, "Superman Hold", movement_pattern=MovementPattern.EXTENSION,
                      exercise_type=ExerciseType.ISOLATION, primary_muscles=["back", "lower_back"]),
        make_exercise(9, "Pike Push-Up", slug="pike_push_up", movement_pattern=MovementPattern.VERTICAL_PUSH,
                      primary_muscles=["shoulders"], difficulty_level=3),
        make_exercise(10, "Glute Bridge", movement_pattern=MovementPattern.HINGE,
                      exercise_type=ExerciseType.ISOLATION, primary_muscles=["legs", "glutes"]),
        make_exercise(11, "Wall Sit", movement_pattern=MovementPattern.ISOMETRIC,
                      exercise_type=ExerciseType.ISOLATION, primary_muscles=["legs", "quadriceps"]),
        make_exercise(12, "Dead Bug", movement_pattern=MovementPattern.ANTI_ROTATION,
                      exercise_type=ExerciseType.ISOLATION, primary_muscles=["core", "abs"]),
        make_exercise(13, "Chair Dip", movement_pattern=MovementPattern.VERTICAL_PUSH,
                      exercise_type=ExerciseType.ISOLATION, primary_muscles=["arms", "triceps"]),
        make_exercise(14, "Leg Extension", movement_pattern=MovementPattern.EXTENSION,
                      exercise_type=ExerciseType.ISOLATION, primary_muscles=["legs", "quadriceps"],
                      equipment_required=["leg_extension_machine"], home_compatibility=0.1),
    ]


class StaticEmbeddingProvider(EmbeddingProvider):
    """Returns the same vector for every text."""

    name = "static"

    def __init__(self, vector=None, dimensions: int = 3):
        super().__init__(model="static-test", dimensions=dimensions)
        self.vector = vector if vector is not None else [0.1] * dimensions
        self.calls: List[str] = []

    async def embed(self, text: str) -> List[float]:
        self.calls.append(text)
        return list(self.vector)


class FakeExerciseRepository:
    """In-memory stand-in for ExerciseRepository.

    ``similarities`` maps exercise id to the similarity returned by
    ``nearest_by_embedding``; ids missing from it are never returned.
    """

    def __init__(self, exercises: List[Exercise], similarities: dict | None = None):
        self.exercises = list(exercises)
        self.similarities = similarities or {}
        self.nearest_calls: list[dict] = []

    async def get(self, id: int):
        return next((e for e in self.exercises if e.id == id), None)

    async def list_by_ids(self, ids):
        by_id = {e.id: e for e in self.exercises}
        return [by_id[i] for i in ids if i in by_id]

    async def list_catalog(self, filters: SearchFilters | None = None):
        excluded = filters.exclude_ids if filters else set()
        return sorted(
            (e for e in self.exercises if e.is_active and e.id not in excluded),
            key=lambda e: e.id,
        )

    async def nearest_by_embedding(self, vector, threshold, limit, filters=None, exclude_id=None):
        self.nearest_calls.append({"threshold": threshold, "limit": limit, "exclude_id": exclude_id})
        excluded = set(filters.exclude_ids) if filters else set()
        rows = [
            (id, similarity) for id, similarity in self.similarities.items()
            if similarity >= threshold and id != exclude_id and id not in excluded
        ]
        rows.sort(key=lambda row: (-row[1], row[0]))
        return rows[:limit]


@pytest.fixture
def null_gateway():
    return EmbeddingGateway(NullEmbeddingProvider())


@pytest.fixture
def static_gateway():
    return EmbeddingGateway(StaticEmbeddingProvider())


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine):
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with maker() as session:
        yield session


@pytest_asyncio.fixture
async def seeded_session(session):
    """Session with the home catalog and two onboarded users (id 1 with a knee injury, id 2 healthy)."""
    session.add_all(home_catalog())
    session.add_all([
        User(
            id=1,
            email="knee@example.com",
            profile=make_profile(),
            preferences=make_preferences(),
            health=make_health(injuries=["knee"]),
        ),
        User(
            id=2,
            email="healthy@example.com",
            profile=make_profile(),
            preferences=make_preferences(),
            health=make_health(),
        ),
        User(id=3, email="new@example.com"),
    ])
    await session.commit()
    return session
