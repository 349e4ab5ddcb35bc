"""Achievement persistence: the progress-store protocol and its SQLAlchemy implementation."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from h2c.achievements.catalog import Badge, Catalog
from h2c.achievements.evaluator import ProgressSnapshot, SolvedProblem as SolvedProblemView, UnlockRecord
from h2c.db.models import (
    BadgeDefinition,
    Problem,
    SolvedProblem,
    Streak,
    User,
    UserBadge,
)
from h2c.streaks.rules import effective_streak

logger = logging.getLogger(__name__)

_catalog_cache: Catalog | None = None


def invalidate_catalog_cache() -> None:
    """Drop the process-wide catalog so the next load re-reads badge_definitions."""
    global _catalog_cache  # noqa: PLW0603
    _catalog_cache = None


class ProgressStore(Protocol):
    """What the unlock engine, progress reporter and notification tracker need from storage."""

    async def load_catalog(self) -> Catalog: ...

    async def load_snapshot(self, user_id: int) -> ProgressSnapshot | None: ...

    async def apply_unlocks(self, user_id: int, badges: Sequence[Badge], unlocked_at: datetime) -> set[str]:
        """Insert one unlock record per badge not already held and add their points.

        Returns the badge ids actually inserted. Must be atomic per call so
        that concurrent callers never add points twice for the same badge.
        """
        ...

    async def mark_seen(self, user_id: int, badge_id: str) -> bool: ...

    async def list_unlock_records(self, user_id: int, *, unseen_only: bool = False) -> list[UnlockRecord]: ...


class AchievementRepository:
    """SQLAlchemy-backed :class:`ProgressStore`."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def load_catalog(self) -> Catalog:
        global _catalog_cache  # noqa: PLW0603
        if _catalog_cache is None:
            result = await self.db.execute(
                select(BadgeDefinition).order_by(BadgeDefinition.sort_order)
            )
            _catalog_cache = Catalog.from_records(badge_row_to_dict(row) for row in result.scalars())
        return _catalog_cache

    async def get_user(self, user_id: int) -> User | None:
        return await self.db.get(User, user_id)

    async def load_snapshot(self, user_id: int) -> ProgressSnapshot | None:
        user = await self.get_user(user_id)
        if user is None:
            return None

        solved_result = await self.db.execute(
            select(SolvedProblem.problem_id, SolvedProblem.solved_at, Problem.difficulty, Problem.tags)
            .join(Problem, SolvedProblem.problem_id == Problem.id)
            .where(SolvedProblem.user_id == user_id)
        )
        solved = tuple(
            SolvedProblemView(
                problem_id=row.problem_id,
                difficulty=row.difficulty,
                tag=row.tags,
                solved_at=row.solved_at,
            )
            for row in solved_result
        )

        streak_row = (
            await self.db.execute(
                select(Streak.current_streak, Streak.last_active_date).where(Streak.user_id == user_id)
            )
        ).one_or_none()
        current_streak = 0
        if streak_row is not None:
            # Stored value only resets on the next solve
            current_streak = effective_streak(
                streak_row.current_streak,
                streak_row.last_active_date,
                datetime.now(timezone.utc).date(),
            )

        return ProgressSnapshot(
            user_id=user_id,
            solved_problems=solved,
            current_streak=current_streak,
            unlocked=tuple(await self.list_unlock_records(user_id)),
            total_points=user.total_points,
        )

    async def list_unlock_records(self, user_id: int, *, unseen_only: bool = False) -> list[UnlockRecord]:
        stmt = (
            select(UserBadge)
            .where(UserBadge.user_id == user_id)
            .order_by(UserBadge.unlocked_at, UserBadge.id)
        )
        if unseen_only:
            stmt = stmt.where(UserBadge.notification_seen.is_(False))
        result = await self.db.execute(stmt)
        return [
            UnlockRecord(
                badge_id=ub.badge_id,
                unlocked_at=ub.unlocked_at,
                notification_seen=ub.notification_seen,
            )
            for ub in result.scalars()
        ]

    async def apply_unlocks(self, user_id: int, badges: Sequence[Badge], unlocked_at: datetime) -> set[str]:
        if not badges:
            return set()

        stmt = (
            pg_insert(UserBadge)
            .values([
                {
                    "user_id": user_id,
                    "badge_id": badge.badge_id,
                    "unlocked_at": unlocked_at,
                    "notification_seen": False,
                }
                for badge in badges
            ])
            .on_conflict_do_nothing(constraint="user_badges_user_id_badge_id_key")
            .returning(UserBadge.badge_id)
        )

        try:
            result = await self.db.execute(stmt)
            inserted = set(result.scalars())
            points = sum(b.points for b in badges if b.badge_id in inserted)
            if points:
                await self.db.execute(
                    update(User)
                    .where(User.id == user_id)
                    .values(total_points=User.total_points + points)
                )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        if len(inserted) < len(badges):
            # Another request unlocked some of these first
            logger.info(
                "Skipped %d already-unlocked badges for user %s",
                len(badges) - len(inserted),
                user_id,
            )
        return inserted

    async def mark_seen(self, user_id: int, badge_id: str) -> bool:
        result = await self.db.execute(
            update(UserBadge)
            .where(UserBadge.user_id == user_id, UserBadge.badge_id == badge_id)
            .values(notification_seen=True)
            .returning(UserBadge.id)
        )
        found = result.scalar_one_or_none() is not None
        await self.db.commit()
        return found


def badge_row_to_dict(row: BadgeDefinition) -> dict:
    return {
        "badge_id": row.badge_id,
        "name": row.name,
        "description": row.description,
        "icon": row.icon,
        "category": row.category,
        "rarity": row.rarity,
        "criteria": row.criteria or {},
        "points": row.points,
        "order": row.sort_order,
    }
