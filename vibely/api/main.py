"""FastAPI application main module.

Builds the Vibely application: storage, the recommendation engine chosen from
the settings, the background warm-up, and the API routes. ``create_app`` is
the entry point used by tests; ``app`` is the instance served by uvicorn.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from vibely.api.logging_config import RequestLoggingMiddleware, setup_logging
from vibely.api.metrics import metrics_service
from vibely.api.routes import interactions, recommend, users, venues
from vibely.config import Settings, get_settings
from vibely.exceptions import VibelyException
from vibely.recommender.engine import PersonalizationBackend
from vibely.recommender.selector import EngineWarmup, select_engine
from vibely.service import RecommendationService
from vibely.storage import InMemoryStorage, load_venues_csv, seed_storage

# Configure module logger
logger = logging.getLogger(__name__)


def _build_storage(settings: Settings) -> InMemoryStorage:
    storage = InMemoryStorage()
    if settings.VENUE_SEED_CSV:
        try:
            seeded = seed_storage(storage, load_venues_csv(settings.VENUE_SEED_CSV))
            logger.info(f"Seeded {len(seeded)} venues from {settings.VENUE_SEED_CSV}")
        except (FileNotFoundError, ValueError) as e:
            logger.error(f"Failed to seed venues: {e}", exc_info=True)
    return storage


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[InMemoryStorage] = None,
    backend: Optional[PersonalizationBackend] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Application settings. Defaults to the environment.
        storage: Storage to serve from. Defaults to an in-memory store,
            seeded from ``VENUE_SEED_CSV`` when set.
        backend: Optional learned model for the personalized engine.
        configure_logging: Install the JSON log handler on the root logger.

    Returns:
        The configured application. The engine warm-up starts when the
        application starts up.
    """
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(settings.LOG_LEVEL)

    storage = storage if storage is not None else _build_storage(settings)
    engine = select_engine(settings, backend=backend)
    warmup = EngineWarmup(engine, storage)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        warmup.start()
        yield
        engine.close()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Cafe recommendations from quiz answers and personalization",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.storage = storage
    app.state.engine = engine
    app.state.warmup = warmup
    app.state.service = RecommendationService(storage, engine)

    app.add_middleware(RequestLoggingMiddleware)

    @app.exception_handler(VibelyException)
    async def vibely_exception_handler(request: Request, exc: VibelyException) -> JSONResponse:
        logger.warning(
            exc.message,
            extra={"path": str(request.url.path), "error_type": type(exc).__name__},
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": type(exc).__name__,
                "message": exc.message,
                "details": exc.details,
            },
        )

    app.include_router(users.router)
    app.include_router(venues.router)
    app.include_router(interactions.router)
    app.include_router(recommend.router)

    @app.get("/ping")
    def ping() -> Dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok"}

    @app.get("/status")
    def status() -> Dict[str, Any]:
        """Report the active engine and warm-up progress."""
        return {
            "engine": engine.name,
            "engine_state": engine.state.value,
            "warmup_done": warmup.done,
            "backfilled_venues": warmup.venue_count,
            "backfill_failures": warmup.failures,
            "engine_stats": engine.stats(),
        }

    @app.get("/metrics")
    def metrics() -> Dict[str, Any]:
        """Recommendation request counts and latency."""
        return metrics_service.get_metrics()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "vibely.api.main:app",
        host=get_settings().HOST,
        port=get_settings().PORT,
        reload=True,
    )
