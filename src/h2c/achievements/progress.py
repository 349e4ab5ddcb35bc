"""Per-badge progress for the UI."""

from __future__ import annotations

from dataclasses import dataclass

from h2c.achievements.catalog import Catalog
from h2c.achievements.evaluator import ProgressSnapshot, evaluate
from h2c.achievements.exceptions import UserNotFoundError
from h2c.achievements.repository import ProgressStore


@dataclass(frozen=True, slots=True)
class BadgeProgress:
    current: int
    required: int
    percentage: int
    unlocked: bool


def percentage_of(current: int, required: int) -> int:
    """``min(round(current / required * 100), 100)`` with halves rounded up."""
    if current <= 0:
        return 0
    return min((200 * current + required) // (2 * required), 100)


def compute_progress(snapshot: ProgressSnapshot, catalog: Catalog) -> dict[str, BadgeProgress]:
    """Progress for every catalog entry, keyed by badge id.

    Unlocked badges report their threshold as both current and required;
    locked ones report the evaluated count capped at the threshold.
    """
    progress: dict[str, BadgeProgress] = {}
    for badge in catalog:
        if badge.badge_id in snapshot.unlocked_badge_ids:
            progress[badge.badge_id] = BadgeProgress(
                current=badge.threshold,
                required=badge.threshold,
                percentage=100,
                unlocked=True,
            )
            continue

        result = evaluate(snapshot, badge.criteria)
        progress[badge.badge_id] = BadgeProgress(
            current=min(result.current, result.required),
            required=result.required,
            percentage=percentage_of(result.current, result.required),
            unlocked=False,
        )
    return progress


class ProgressReporter:
    def __init__(self, store: ProgressStore) -> None:
        self.store = store

    async def progress(self, user_id: int) -> dict[str, BadgeProgress]:
        """Raises UserNotFoundError for an unknown user."""
        catalog = await self.store.load_catalog()
        snapshot = await self.store.load_snapshot(user_id)
        if snapshot is None:
            raise UserNotFoundError(user_id)
        return compute_progress(snapshot, catalog)
