"""Pydantic response models for solve recording."""

from pydantic import BaseModel

from h2c.achievements.schemas import BadgeResponse


class SolveResponse(BaseModel):
    problem_id: int
    newly_solved: bool
    current_streak: int
    new_badges: list[BadgeResponse]
    points_awarded: int
