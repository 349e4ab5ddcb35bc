"""Criteria evaluation -- pure functions over a user's progress snapshot."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone

from h2c.achievements.catalog import (
    Criteria,
    Difficulty,
    PerfectWeek,
    ProblemCount,
    Streak,
    Topic,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SolvedProblem:
    problem_id: int
    difficulty: str
    tag: str
    solved_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class UnlockRecord:
    badge_id: str
    unlocked_at: datetime
    notification_seen: bool = False


@dataclass(frozen=True)
class ProgressSnapshot:
    """Everything the evaluator needs to know about one user, read at one point in time."""

    user_id: int
    solved_problems: tuple[SolvedProblem, ...] = ()
    current_streak: int = 0
    unlocked: tuple[UnlockRecord, ...] = ()
    total_points: int = 0
    unlocked_badge_ids: frozenset[str] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "unlocked_badge_ids", frozenset(r.badge_id for r in self.unlocked))


@dataclass(frozen=True, slots=True)
class Evaluation:
    current: int
    required: int
    met: bool


def longest_daily_run(solved_at: Iterable[datetime | None]) -> int:
    """Longest run of consecutive UTC calendar days with at least one solve."""
    days: set[date] = set()
    for ts in solved_at:
        if ts is None:
            continue
        if ts.tzinfo is not None:
            ts = ts.astimezone(timezone.utc)
        days.add(ts.date())

    best = 0
    for day in days:
        # Only start counting at the first day of a run
        if day - timedelta(days=1) in days:
            continue
        length = 1
        while day + timedelta(days=length) in days:
            length += 1
        best = max(best, length)
    return best


def evaluate(
    snapshot: ProgressSnapshot,
    criteria: Criteria,
    streak_override: int | None = None,
) -> Evaluation:
    """Evaluate one criteria against a snapshot.

    ``streak_override`` replaces ``snapshot.current_streak`` for streak
    criteria when the caller has just computed a fresher value.
    Unrecognized criteria evaluate to ``current=0, met=False``.
    """
    solved = snapshot.solved_problems

    if isinstance(criteria, ProblemCount):
        current = len(solved)
    elif isinstance(criteria, Difficulty):
        current = sum(1 for p in solved if p.difficulty == criteria.difficulty)
    elif isinstance(criteria, Topic):
        # Exact equality: "arrays" does not count towards "array"
        current = sum(1 for p in solved if p.tag == criteria.topic)
    elif isinstance(criteria, Streak):
        current = snapshot.current_streak if streak_override is None else streak_override
    elif isinstance(criteria, PerfectWeek):
        current = longest_daily_run(p.solved_at for p in solved)
    else:
        logger.warning("Unrecognized criteria %r, treating as not met", criteria)
        return Evaluation(current=0, required=getattr(criteria, "threshold", 0), met=False)

    required = criteria.threshold
    return Evaluation(current=current, required=required, met=current >= required)
