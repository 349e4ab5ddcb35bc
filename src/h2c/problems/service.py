"""Accepted-solve recording -- the primary action badge unlocking hangs off."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

import structlog
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from h2c.achievements.catalog import Badge
from h2c.achievements.engine import TriggerContext, UnlockEngine, UnlockResult
from h2c.achievements.exceptions import ProblemNotFoundError, UserNotFoundError
from h2c.achievements.repository import AchievementRepository
from h2c.db.models import Problem, SolvedProblem, User
from h2c.streaks.service import extend_streak_and_unlock

logger = structlog.get_logger()


@dataclass(slots=True)
class SolveOutcome:
    newly_solved: bool
    current_streak: int
    newly_unlocked: list[Badge] = field(default_factory=list)

    @property
    def points_awarded(self) -> int:
        return sum(b.points for b in self.newly_unlocked)


def merge_unlocks(*results: UnlockResult) -> list[Badge]:
    """Badges from several unlock passes, in catalog order."""
    return sorted((b for r in results for b in r.newly_unlocked), key=lambda b: b.order)


async def record_solve(
    db: AsyncSession,
    redis: object | None,
    user_id: int,
    problem_id: int,
    solved_at: datetime | None = None,
) -> SolveOutcome:
    """Record an accepted solve, extend the streak and check badges.

    The solve is committed before any badge work starts; badge failures
    never undo it.

    Raises:
        UserNotFoundError / ProblemNotFoundError: unknown ids.
    """
    if solved_at is None:
        solved_at = datetime.now(timezone.utc)

    if await db.get(User, user_id) is None:
        raise UserNotFoundError(user_id)
    if await db.get(Problem, problem_id) is None:
        raise ProblemNotFoundError(problem_id)

    stmt = (
        pg_insert(SolvedProblem)
        .values(user_id=user_id, problem_id=problem_id, solved_at=solved_at)
        .on_conflict_do_nothing(constraint="solved_problems_user_id_problem_id_key")
        .returning(SolvedProblem.id)
    )
    result = await db.execute(stmt)
    newly_solved = result.scalar_one_or_none() is not None
    await db.commit()

    if not newly_solved:
        logger.debug("solve_already_recorded", user_id=user_id, problem_id=problem_id)

    solve_day = solved_at.astimezone(timezone.utc).date() if solved_at.tzinfo else solved_at.date()
    streak, streak_unlocks = await extend_streak_and_unlock(db, redis, user_id, solve_day)

    solve_unlocks = UnlockResult()
    if newly_solved:
        engine = UnlockEngine(AchievementRepository(db), redis)
        solve_unlocks = await engine.unlock(user_id, TriggerContext.problem_solved())

    return SolveOutcome(
        newly_solved=newly_solved,
        current_streak=streak.current_streak,
        newly_unlocked=merge_unlocks(streak_unlocks, solve_unlocks),
    )
