"""Unlock engine -- evaluates the whole catalog for one user and records new badges."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

import structlog

from h2c.achievements.catalog import Badge
from h2c.achievements.evaluator import evaluate
from h2c.achievements.repository import ProgressStore
from h2c.config import get_settings

logger = structlog.get_logger()

TriggerKind = Literal["problem_solved", "streak_update", "manual"]


@dataclass(frozen=True, slots=True)
class TriggerContext:
    """Why an unlock check is running.

    For ``streak_update`` triggers ``current_streak`` is the value the caller
    just computed; it wins over whatever the store returns.
    """

    kind: TriggerKind = "manual"
    current_streak: int | None = None

    @classmethod
    def problem_solved(cls) -> TriggerContext:
        return cls(kind="problem_solved")

    @classmethod
    def streak_update(cls, current_streak: int) -> TriggerContext:
        return cls(kind="streak_update", current_streak=current_streak)

    @property
    def streak_override(self) -> int | None:
        if self.kind == "streak_update":
            return self.current_streak
        return None


@dataclass(slots=True)
class UnlockResult:
    newly_unlocked: list[Badge] = field(default_factory=list)

    @property
    def points_awarded(self) -> int:
        return sum(b.points for b in self.newly_unlocked)


class UnlockEngine:
    """Best-effort badge unlocking.

    ``unlock`` never raises: storage failures are logged and reported as
    "nothing unlocked" so the action that triggered the check still
    completes. Calling it again with unchanged progress is a no-op.
    """

    def __init__(self, store: ProgressStore, redis: object | None = None) -> None:
        self.store = store
        self.redis = redis

    async def unlock(self, user_id: int, trigger: TriggerContext | None = None) -> UnlockResult:
        trigger = trigger or TriggerContext()
        try:
            newly_unlocked = await self._unlock(user_id, trigger)
        except Exception:
            logger.error(
                "badge_unlock_failed",
                user_id=user_id,
                trigger=trigger.kind,
                exc_info=True,
            )
            return UnlockResult()

        if newly_unlocked:
            logger.info(
                "badges_unlocked",
                user_id=user_id,
                trigger=trigger.kind,
                badges=[b.badge_id for b in newly_unlocked],
            )
            for badge in newly_unlocked:
                await self._emit_badge_unlocked(user_id, badge)
        return UnlockResult(newly_unlocked=newly_unlocked)

    async def _unlock(self, user_id: int, trigger: TriggerContext) -> list[Badge]:
        catalog = await self.store.load_catalog()
        snapshot = await self.store.load_snapshot(user_id)
        if snapshot is None:
            return []

        staged = [
            badge
            for badge in catalog
            if badge.badge_id not in snapshot.unlocked_badge_ids
            and evaluate(snapshot, badge.criteria, trigger.streak_override).met
        ]
        if not staged:
            return []

        inserted = await self.store.apply_unlocks(user_id, staged, datetime.now(timezone.utc))
        return [badge for badge in staged if badge.badge_id in inserted]

    async def _emit_badge_unlocked(self, user_id: int, badge: Badge) -> None:
        """Broadcast an unlock over Redis pub/sub for live UI popups."""
        if self.redis is None:
            return
        try:
            await self.redis.publish(  # type: ignore[union-attr]
                get_settings().badge_unlock_channel,
                json.dumps({
                    "user_id": user_id,
                    "badge_id": badge.badge_id,
                    "name": badge.name,
                    "icon": badge.icon,
                    "rarity": badge.rarity,
                    "points": badge.points,
                }),
            )
        except Exception:
            logger.warning("badge_unlock_publish_failed", user_id=user_id, badge_id=badge.badge_id, exc_info=True)
