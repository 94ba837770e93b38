"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fitplan.config.settings import get_settings
from fitplan.core.error_handlers import domain_error_handler
from fitplan.core.exceptions import DomainError
from fitplan.core.logging import configure_logging, get_logger
from fitplan.db.database import close_all_engines, init_db
from fitplan.llm.embedding_gateway import EmbeddingGateway

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    configure_logging()

    await init_db()

    gateway = EmbeddingGateway.from_settings(settings)
    app.state.embedding_gateway = gateway
    info = gateway.provider_info()
    logger.info(
        "embedding_provider_selected",
        provider=info.name,
        model=info.model,
        dimensions=info.dimensions,
        available=info.available,
    )

    yield

    await gateway.close()
    await close_all_engines()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Exercise recommendations and weekly workout plans",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DomainError, domain_error_handler)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "app": settings.app_name}

    @app.get("/health/embeddings")
    async def embeddings_health_check():
        """Report whether semantic search is live or running on the keyword fallback."""
        info = app.state.embedding_gateway.provider_info()
        return {
            "status": "healthy" if info.available else "degraded",
            "provider": info.name,
            "model": info.model,
            "dimensions": info.dimensions,
        }

    from fitplan.api.routes import suggestions_router, workouts_router

    app.include_router(suggestions_router, prefix="/suggestions", tags=["Suggestions"])
    app.include_router(workouts_router, prefix="/workouts", tags=["Workouts"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("fitplan.main:app", host="0.0.0.0", port=8000, reload=True)
