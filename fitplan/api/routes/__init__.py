"""API routes module."""
from fitplan.api.routes.suggestions import router as suggestions_router
from fitplan.api.routes.workouts import router as workouts_router

__all__ = [
    "suggestions_router",
    "workouts_router",
]
