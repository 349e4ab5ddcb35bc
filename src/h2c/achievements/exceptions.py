"""Achievement domain errors."""

from __future__ import annotations


class AchievementError(Exception):
    """Base class for achievement-service errors."""


class UserNotFoundError(AchievementError):
    """A user requested directly by id does not exist."""

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class ProblemNotFoundError(AchievementError):
    """A problem requested directly by id does not exist."""

    def __init__(self, problem_id: int) -> None:
        super().__init__(f"Problem not found: {problem_id}")
        self.problem_id = problem_id


class UnknownCriteriaError(AchievementError, ValueError):
    """A stored criteria payload names a type this service cannot evaluate."""
