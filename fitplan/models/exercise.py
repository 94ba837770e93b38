from pgvector.sqlalchemy import Vector
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Float,
    Integer,
    String,
    Text,
)

from fitplan.db.database import Base, utcnow
from fitplan.models.enums import ExerciseCategory, ExerciseType, MovementPattern


class Exercise(Base):
    """Catalog exercise.

    ``embedding`` has no fixed dimension so vectors from providers with
    different dimensionality can be stored side by side; similarity queries
    only compare vectors whose ``vector_dims`` matches the query.
    """
    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    slug = Column(String(200), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    search_text = Column(Text, nullable=True)

    category = Column(Enum(ExerciseCategory, native_enum=False), nullable=False, index=True)
    movement_pattern = Column(Enum(MovementPattern, native_enum=False), nullable=True, index=True)
    exercise_type = Column(Enum(ExerciseType, native_enum=False), default=ExerciseType.COMPOUND, nullable=False)
    primary_muscles = Column(JSON, default=list, nullable=False)
    secondary_muscles = Column(JSON, default=list, nullable=False)
    tags = Column(JSON, default=list, nullable=False)
    difficulty_level = Column(Integer, default=1, nullable=False)

    equipment_required = Column(JSON, default=list, nullable=False)
    equipment_optional = Column(JSON, default=list, nullable=False)

    home_compatibility = Column(Float, nullable=True)
    gym_compatibility = Column(Float, nullable=True)
    outdoor_compatibility = Column(Float, nullable=True)

    # goal key -> effectiveness 0-1, e.g. {"strength": 0.9}
    goal_effectiveness = Column(JSON, default=dict, nullable=False)
    # experience key -> suitability 1-5, e.g. {"less_than_6mo": 4}
    experience_suitability = Column(JSON, default=dict, nullable=False)
    # structured tags like "knee_injury", matched by the daily generator
    contraindications = Column(JSON, default=list, nullable=False)

    popularity_score = Column(Float, default=0.0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    embedding = Column(Vector(), nullable=True)
    embedding_model = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("difficulty_level BETWEEN 1 AND 5", name="ck_exercise_difficulty"),
        CheckConstraint(
            "home_compatibility IS NULL OR (home_compatibility >= 0 AND home_compatibility <= 1)",
            name="ck_exercise_home_compat",
        ),
        CheckConstraint(
            "gym_compatibility IS NULL OR (gym_compatibility >= 0 AND gym_compatibility <= 1)",
            name="ck_exercise_gym_compat",
        ),
        CheckConstraint(
            "outdoor_compatibility IS NULL OR (outdoor_compatibility >= 0 AND outdoor_compatibility <= 1)",
            name="ck_exercise_outdoor_compat",
        ),
    )

    def compatibility_for(self, location: str) -> float | None:
        return getattr(self, f"{location}_compatibility", None)

    def __repr__(self) -> str:
        return f"<Exercise {self.id} {self.slug}>"
