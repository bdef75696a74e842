"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scenario_engine.cache import CacheConfig
from scenario_engine.config import settings
from scenario_engine.middleware import setup_rate_limiting
from scenario_engine.scenarios import routes as scenario_routes
from scenario_engine.scenarios.cache_manager import ScenarioCacheManager

logger = logging.getLogger(__name__)


def build_cache_manager() -> ScenarioCacheManager:
    """Create the scenario cache from settings."""
    return ScenarioCacheManager(
        CacheConfig(
            default_ttl=settings.SCENARIO_CACHE_TTL_SECONDS,
            max_size=settings.SCENARIO_CACHE_MAX_SIZE,
            cleanup_interval=settings.SCENARIO_CACHE_CLEANUP_SECONDS,
        )
    )


def create_app(cache_manager: Optional[ScenarioCacheManager] = None) -> FastAPI:
    """
    Build the application.

    Args:
        cache_manager: Scenario cache to serve from. When omitted one is built
            from settings at startup and destroyed at shutdown; an injected
            manager is left to its owner.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = cache_manager is None
        app.state.scenario_cache = build_cache_manager() if owned else cache_manager
        logger.info("Scenario cache ready")
        try:
            yield
        finally:
            if owned:
                app.state.scenario_cache.destroy()
                logger.info("Scenario cache destroyed")

    app = FastAPI(
        title="Scenario Engine API",
        description="Scenario slugs, cached scenario content and related scenarios",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "development" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_rate_limiting(app)

    app.include_router(scenario_routes.router, prefix=f"{settings.API_V1_PREFIX}/scenarios", tags=["Scenarios"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "scenario_engine.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
