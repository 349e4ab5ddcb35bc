"""Achievement API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from h2c.achievements.engine import TriggerContext, UnlockEngine
from h2c.achievements.exceptions import UserNotFoundError
from h2c.achievements.notifications import NotificationTracker
from h2c.achievements.progress import ProgressReporter
from h2c.achievements.repository import AchievementRepository, ProgressStore
from h2c.achievements.schemas import (
    AllBadgesResponse,
    BadgeProgressResponse,
    BadgeResponse,
    MarkSeenResponse,
    UnlockCheckResponse,
    UnlockedBadgeResponse,
    UnseenBadgeResponse,
    UserAchievementsResponse,
)
from h2c.auth.dependencies import get_current_user_id
from h2c.database import get_session
from h2c.redis_client import get_optional_redis

router = APIRouter(prefix="/api/v1/achievements", tags=["Achievements"])


def get_progress_store(db: AsyncSession = Depends(get_session)) -> ProgressStore:
    return AchievementRepository(db)


# ── Public endpoints ──


@router.get("", response_model=AllBadgesResponse)
async def list_badges(store: ProgressStore = Depends(get_progress_store)):
    """All badge definitions in display order."""
    catalog = await store.load_catalog()
    return AllBadgesResponse(badges=[BadgeResponse.from_badge(b) for b in catalog])


@router.get("/user/{user_id}", response_model=UserAchievementsResponse)
async def get_user_achievements(user_id: int, store: ProgressStore = Depends(get_progress_store)):
    """A user's unlocked badges with details, plus their point total."""
    snapshot = await store.load_snapshot(user_id)
    if snapshot is None:
        raise HTTPException(status_code=404, detail="User not found")

    catalog = await store.load_catalog()
    unlocked = []
    for record in snapshot.unlocked:
        badge = catalog.get(record.badge_id)
        if badge is None:
            continue
        unlocked.append(UnlockedBadgeResponse(
            **BadgeResponse.from_badge(badge).model_dump(),
            unlocked_at=record.unlocked_at,
            notification_seen=record.notification_seen,
        ))

    return UserAchievementsResponse(
        unlocked_badges=unlocked,
        total_points=snapshot.total_points,
        total_unlocked=len(unlocked),
    )


# ── Authenticated endpoints ──


@router.get("/progress", response_model=dict[str, BadgeProgressResponse])
async def get_badge_progress(
    user_id: int = Depends(get_current_user_id),
    store: ProgressStore = Depends(get_progress_store),
):
    """Progress towards every badge for the current user."""
    try:
        progress = await ProgressReporter(store).progress(user_id)
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail="User not found") from e

    return {
        badge_id: BadgeProgressResponse(
            current=p.current,
            required=p.required,
            percentage=p.percentage,
            unlocked=p.unlocked,
        )
        for badge_id, p in progress.items()
    }


@router.get("/unseen", response_model=list[UnseenBadgeResponse])
async def get_unseen_badges(
    user_id: int = Depends(get_current_user_id),
    store: ProgressStore = Depends(get_progress_store),
):
    """Badges unlocked but not yet shown to the user."""
    unseen = await NotificationTracker(store).unseen_notifications(user_id)
    return [
        UnseenBadgeResponse(**BadgeResponse.from_badge(u.badge).model_dump(), unlocked_at=u.unlocked_at)
        for u in unseen
    ]


@router.post("/seen/{badge_id}", response_model=MarkSeenResponse)
async def mark_notification_seen(
    badge_id: str,
    user_id: int = Depends(get_current_user_id),
    store: ProgressStore = Depends(get_progress_store),
):
    """Mark a badge notification as seen. Unknown badges are a no-op."""
    await NotificationTracker(store).mark_seen(user_id, badge_id)
    return MarkSeenResponse()


@router.post("/check", response_model=UnlockCheckResponse)
async def check_badges(
    user_id: int = Depends(get_current_user_id),
    store: ProgressStore = Depends(get_progress_store),
    redis: object | None = Depends(get_optional_redis),
):
    """Re-run the unlock engine for the current user."""
    result = await UnlockEngine(store, redis).unlock(user_id, TriggerContext())
    return UnlockCheckResponse(
        new_badges=[BadgeResponse.from_badge(b) for b in result.newly_unlocked],
        points_awarded=result.points_awarded,
    )
