from sqlalchemy import JSON, Boolean, Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from fitplan.db.database import Base, utcnow
from fitplan.models.enums import (
    ExperienceLevel,
    FitnessGoal,
    FitnessLevel,
    RestPreference,
    WorkoutLocation,
)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    profile = relationship("UserProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    preferences = relationship("UserPreferences", back_populates="user", uselist=False, cascade="all, delete-orphan")
    health = relationship("UserHealth", back_populates="user", uselist=False, cascade="all, delete-orphan")


class UserProfile(Base):
    """Fitness self-assessment captured during onboarding."""
    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    fitness_level = Column(Enum(FitnessLevel, native_enum=False), nullable=True)
    experience_level = Column(Enum(ExperienceLevel, native_enum=False), nullable=True)
    primary_goal = Column(Enum(FitnessGoal, native_enum=False), nullable=True)
    secondary_goals = Column(JSON, default=list, nullable=False)
    age = Column(Integer, nullable=True)
    push_up_capacity = Column(Integer, nullable=True)
    plank_hold_seconds = Column(Integer, nullable=True)
    squat_comfort = Column(Integer, nullable=True)  # 1-5 self rating

    user = relationship("User", back_populates="profile")


class UserPreferences(Base):
    __tablename__ = "user_preferences"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    workout_location = Column(Enum(WorkoutLocation, native_enum=False), nullable=True)
    available_equipment = Column(JSON, default=list, nullable=False)
    workout_days_per_week = Column(Integer, default=3, nullable=False)
    session_duration_min = Column(Integer, default=45, nullable=False)
    preferred_exercise_types = Column(JSON, default=list, nullable=False)
    rest_preference = Column(Enum(RestPreference, native_enum=False), default=RestPreference.MODERATE, nullable=False)

    user = relationship("User", back_populates="preferences")


class UserHealth(Base):
    """Health constraints. Read-only to the recommendation engine."""
    __tablename__ = "user_health"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    injuries = Column(JSON, default=list, nullable=False)
    chronic_conditions = Column(JSON, default=list, nullable=False)
    is_pregnant = Column(Boolean, default=False, nullable=False)
    recent_surgery = Column(Boolean, default=False, nullable=False)
    contraindicated_movements = Column(JSON, default=list, nullable=False)
    contraindicated_exercises = Column(JSON, default=list, nullable=False)

    user = relationship("User", back_populates="health")
