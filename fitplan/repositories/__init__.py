"""Repositories package."""
from fitplan.repositories.base import Repository
from fitplan.repositories.exercise_repository import ExerciseRepository, SearchFilters
from fitplan.repositories.plan_repository import PlanRepository
from fitplan.repositories.user_repository import UserContext, UserRepository

__all__ = [
    "Repository",
    "ExerciseRepository",
    "PlanRepository",
    "SearchFilters",
    "UserContext",
    "UserRepository",
]
