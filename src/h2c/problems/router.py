"""Accepted-solve endpoint: records the solve, extends the streak, unlocks badges."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from h2c.achievements.exceptions import ProblemNotFoundError, UserNotFoundError
from h2c.achievements.schemas import BadgeResponse
from h2c.auth.dependencies import get_current_user_id
from h2c.database import get_session
from h2c.problems.schemas import SolveResponse
from h2c.problems.service import SolveOutcome, record_solve
from h2c.redis_client import get_optional_redis

router = APIRouter(prefix="/api/v1/problems", tags=["Problems"])


class SolveRecorder:
    """Request-scoped binding of :func:`record_solve` to a session and Redis client."""

    def __init__(self, db: AsyncSession, redis: object | None) -> None:
        self.db = db
        self.redis = redis

    async def record(self, user_id: int, problem_id: int) -> SolveOutcome:
        return await record_solve(self.db, self.redis, user_id, problem_id)


def get_solve_recorder(
    db: AsyncSession = Depends(get_session),
    redis: object | None = Depends(get_optional_redis),
) -> SolveRecorder:
    return SolveRecorder(db, redis)


@router.post("/{problem_id}/solve", response_model=SolveResponse)
async def solve_problem(
    problem_id: int,
    user_id: int = Depends(get_current_user_id),
    recorder: SolveRecorder = Depends(get_solve_recorder),
):
    """Record an accepted solve for the current user. Re-submitting a solved problem is a no-op."""
    try:
        outcome = await recorder.record(user_id, problem_id)
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail="User not found") from e
    except ProblemNotFoundError as e:
        raise HTTPException(status_code=404, detail="Problem not found") from e

    return SolveResponse(
        problem_id=problem_id,
        newly_solved=outcome.newly_solved,
        current_streak=outcome.current_streak,
        new_badges=[BadgeResponse.from_badge(b) for b in outcome.newly_unlocked],
        points_awarded=outcome.points_awarded,
    )
