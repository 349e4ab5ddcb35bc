"""Daily solve streaks.

A streak counts consecutive UTC calendar days with at least one accepted
solve. Extending a streak triggers a badge check with the fresh value.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from h2c.achievements.engine import TriggerContext, UnlockEngine, UnlockResult
from h2c.achievements.repository import AchievementRepository
from h2c.db.models import Streak
from h2c.streaks.rules import next_streak


@dataclass(frozen=True, slots=True)
class StreakUpdate:
    current_streak: int
    longest_streak: int
    extended: bool


async def get_or_create_streak(db: AsyncSession, user_id: int) -> Streak:
    """Get or create the streak row for a user."""
    result = await db.execute(select(Streak).where(Streak.user_id == user_id))
    streak = result.scalar_one_or_none()
    if streak is None:
        streak = Streak(
            user_id=user_id,
            current_streak=0,
            longest_streak=0,
            updated_at=datetime.now(timezone.utc),
        )
        db.add(streak)
        await db.flush()
    return streak


async def record_activity(db: AsyncSession, user_id: int, day: date | None = None) -> StreakUpdate:
    """Register a solve on ``day`` (default: today, UTC). Flushes, does not commit."""
    if day is None:
        day = datetime.now(timezone.utc).date()

    streak = await get_or_create_streak(db, user_id)
    new_value = next_streak(streak.current_streak, streak.last_active_date, day)
    extended = new_value > streak.current_streak

    streak.current_streak = new_value
    streak.longest_streak = max(streak.longest_streak, new_value)
    if streak.last_active_date is None or day > streak.last_active_date:
        streak.last_active_date = day
    streak.updated_at = datetime.now(timezone.utc)
    await db.flush()

    return StreakUpdate(
        current_streak=streak.current_streak,
        longest_streak=streak.longest_streak,
        extended=extended,
    )


async def extend_streak_and_unlock(
    db: AsyncSession,
    redis: object | None,
    user_id: int,
    day: date | None = None,
) -> tuple[StreakUpdate, UnlockResult]:
    """Record activity, commit it, then run the unlock engine with the new streak value."""
    update = await record_activity(db, user_id, day)
    await db.commit()

    if not update.extended:
        return update, UnlockResult()

    engine = UnlockEngine(AchievementRepository(db), redis)
    result = await engine.unlock(user_id, TriggerContext.streak_update(update.current_streak))
    return update, result
