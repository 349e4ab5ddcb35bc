"""Health, readiness, and version endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from h2c.config import get_settings
from h2c.database import get_session
from h2c.db.models import BadgeDefinition
from h2c.redis_client import get_redis

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict[str, object]:
    """Readiness probe -- database, seeded badge catalog, Redis."""
    checks: dict[str, object] = {}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as exc:
        checks["database"] = f"error: {exc}"

    if checks["database"] == "ok":
        try:
            count = (await db.execute(select(func.count()).select_from(BadgeDefinition))).scalar_one()
            checks["badge_catalog"] = "ok" if count else "error: catalog not seeded"
        except Exception as exc:
            checks["badge_catalog"] = f"error: {exc}"

    # Redis only carries unlock broadcasts; a missing client degrades, never fails, badge logic
    try:
        await get_redis().ping()
        checks["redis"] = "ok"
    except Exception as exc:
        checks["redis"] = f"error: {exc}"

    all_ok = all(v == "ok" for v in checks.values())
    return {"status": "ready" if all_ok else "degraded", "checks": checks}


@router.get("/version")
async def version() -> dict[str, str]:
    """Return API version and environment."""
    settings = get_settings()
    return {
        "version": settings.app_version,
        "environment": settings.environment,
    }
