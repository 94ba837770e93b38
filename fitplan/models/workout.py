from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from fitplan.db.database import Base, utcnow
from fitplan.models.enums import SplitName, SplitType, SuggestionType, WorkoutStatus


class WeeklyPlan(Base):
    """A persisted week of training. Superseded plans are deactivated, never deleted."""
    __tablename__ = "weekly_plans"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    week_number = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    split_name = Column(Enum(SplitName, native_enum=False), nullable=False)
    days = Column(JSON, default=list, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    deactivated_at = Column(DateTime(timezone=True), nullable=True)

    workouts = relationship("Workout", back_populates="weekly_plan", order_by="Workout.day_of_week")


class Workout(Base):
    __tablename__ = "workouts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    weekly_plan_id = Column(Integer, ForeignKey("weekly_plans.id", ondelete="SET NULL"), nullable=True)
    scheduled_date = Column(Date, nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)
    week_number = Column(Integer, nullable=False)
    workout_type = Column(Enum(SplitType, native_enum=False), nullable=False)
    focus_muscles = Column(JSON, default=list, nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    estimated_duration = Column(Integer, nullable=False)
    status = Column(Enum(WorkoutStatus, native_enum=False), default=WorkoutStatus.SCHEDULED, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    weekly_plan = relationship("WeeklyPlan", back_populates="workouts")
    exercises = relationship(
        "WorkoutExercise",
        back_populates="workout",
        cascade="all, delete-orphan",
        order_by="WorkoutExercise.order_index",
    )


class WorkoutExercise(Base):
    __tablename__ = "workout_exercises"

    id = Column(Integer, primary_key=True, index=True)
    workout_id = Column(Integer, ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id"), nullable=False)
    order_index = Column(Integer, nullable=False)
    target_sets = Column(Integer, nullable=False)
    target_reps = Column(String(32), nullable=False)
    target_rpe = Column(Integer, nullable=True)
    rest_seconds = Column(Integer, nullable=False)
    status = Column(Enum(WorkoutStatus, native_enum=False), default=WorkoutStatus.SCHEDULED, nullable=False)

    workout = relationship("Workout", back_populates="exercises")
    exercise = relationship("Exercise")


class ExerciseSuggestion(Base):
    """Record of an exercise the engine recommended to a user."""
    __tablename__ = "exercise_suggestions"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id"), nullable=False)
    suggestion_type = Column(Enum(SuggestionType, native_enum=False), nullable=False)
    day_of_week = Column(Integer, nullable=True)
    week_number = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
