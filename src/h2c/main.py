"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from h2c.achievements.router import router as achievements_router
from h2c.achievements.seed import seed_badges
from h2c.config import get_settings
from h2c.database import close_db, init_db, session_scope
from h2c.health.router import router as health_router
from h2c.middleware import setup_middleware
from h2c.problems.router import router as problems_router
from h2c.redis_client import close_redis, init_redis

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    await init_redis(settings.redis_url)

    if settings.seed_badges_on_startup:
        try:
            async with session_scope() as db:
                await seed_badges(db)
        except Exception:
            logger.warning("badge_seeding_failed", exc_info=True)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Head2Code Achievements API",
        description="Badge catalog, unlocking, progress and unlock notifications",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(achievements_router)
    app.include_router(problems_router)

    return app


app = create_app()
