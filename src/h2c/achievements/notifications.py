"""Badge-unlock notification tracking (the per-record ``notification_seen`` flag)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import structlog

from h2c.achievements.catalog import Badge
from h2c.achievements.repository import ProgressStore

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class UnseenBadge:
    badge: Badge
    unlocked_at: datetime


class NotificationTracker:
    def __init__(self, store: ProgressStore) -> None:
        self.store = store

    async def mark_seen(self, user_id: int, badge_id: str) -> bool:
        """Flip ``notification_seen`` to True. Returns False (no error) if the badge was never unlocked."""
        found = await self.store.mark_seen(user_id, badge_id)
        if not found:
            logger.debug("mark_seen_no_record", user_id=user_id, badge_id=badge_id)
        return found

    async def unseen_notifications(self, user_id: int) -> list[UnseenBadge]:
        """Unlocked-but-unseen badges, oldest unlock first."""
        catalog = await self.store.load_catalog()
        records = await self.store.list_unlock_records(user_id, unseen_only=True)

        unseen = []
        for record in records:
            badge = catalog.get(record.badge_id)
            if badge is None:
                # Unlocked before a re-seed removed the definition
                continue
            unseen.append(UnseenBadge(badge=badge, unlocked_at=record.unlocked_at))
        return unseen
