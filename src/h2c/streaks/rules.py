"""Pure streak arithmetic over UTC calendar days."""

from datetime import date, timedelta


def next_streak(current: int, last_active: date | None, today: date) -> int:
    """Streak value after activity on ``today``."""
    if last_active is None:
        return 1
    if last_active == today:
        return max(current, 1)
    if last_active == today - timedelta(days=1):
        return current + 1
    if last_active > today:
        # Out-of-order activity never shortens a streak
        return current
    return 1


def effective_streak(stored: int, last_active: date | None, today: date) -> int:
    """The streak as of ``today``: a missed day zeroes a stored value that was never reset."""
    if last_active is None:
        return 0
    if last_active >= today - timedelta(days=1):
        return stored
    return 0
