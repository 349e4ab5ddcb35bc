"""Criteria evaluator tests -- every criteria kind plus the fail-safe default."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from h2c.achievements.catalog import Difficulty, PerfectWeek, ProblemCount, Streak, Topic
from h2c.achievements.evaluator import ProgressSnapshot, evaluate, longest_daily_run
from tests.fakes import BASE_TIME, make_solved, solved_on_days


def snapshot(solved=(), streak=0) -> ProgressSnapshot:
    return ProgressSnapshot(user_id=1, solved_problems=tuple(solved), current_streak=streak)


class TestProblemCount:
    def test_counts_all_solved(self):
        snap = snapshot(make_solved(3) + make_solved(2, difficulty="hard", start_id=10))
        result = evaluate(snap, ProblemCount(5))
        assert (result.current, result.required, result.met) == (5, 5, True)

    def test_below_threshold(self):
        result = evaluate(snapshot(make_solved(4)), ProblemCount(5))
        assert result.met is False
        assert result.current == 4

    def test_empty_history(self):
        result = evaluate(snapshot(), ProblemCount(1))
        assert result.current == 0
        assert result.met is False


class TestDifficulty:
    def test_ten_easy_meets_easy_badge(self):
        snap = snapshot(make_solved(10, "easy") + make_solved(5, "medium", start_id=50))
        result = evaluate(snap, Difficulty(10, "easy"))
        assert (result.current, result.required, result.met) == (10, 10, True)

    def test_nine_easy_does_not(self):
        result = evaluate(snapshot(make_solved(9, "easy")), Difficulty(10, "easy"))
        assert result.current == 9
        assert result.met is False

    def test_other_difficulties_ignored(self):
        result = evaluate(snapshot(make_solved(20, "medium")), Difficulty(10, "hard"))
        assert result.current == 0


class TestTopic:
    def test_exact_tag_matches(self):
        result = evaluate(snapshot(make_solved(10, tag="array")), Topic(10, "array"))
        assert result.met is True

    def test_plural_tag_does_not_match(self):
        result = evaluate(snapshot(make_solved(10, tag="arrays")), Topic(10, "array"))
        assert result.current == 0
        assert result.met is False

    def test_case_sensitive(self):
        result = evaluate(snapshot(make_solved(10, tag="Array")), Topic(10, "array"))
        assert result.met is False


class TestStreak:
    def test_uses_snapshot_streak(self):
        result = evaluate(snapshot(streak=7), Streak(7))
        assert result.met is True
        assert result.current == 7

    def test_override_wins_over_snapshot(self):
        result = evaluate(snapshot(streak=2), Streak(7), streak_override=7)
        assert result.met is True

    def test_override_can_lower(self):
        result = evaluate(snapshot(streak=10), Streak(7), streak_override=3)
        assert result.current == 3
        assert result.met is False

    def test_override_ignored_for_other_criteria(self):
        result = evaluate(snapshot(make_solved(1)), ProblemCount(1), streak_override=0)
        assert result.met is True


class TestPerfectWeek:
    def test_seven_consecutive_days(self):
        result = evaluate(snapshot(solved_on_days(range(7))), PerfectWeek(7))
        assert result.current == 7
        assert result.met is True

    def test_six_days_not_enough(self):
        result = evaluate(snapshot(solved_on_days(range(6))), PerfectWeek(7))
        assert result.current == 6
        assert result.met is False

    def test_gap_breaks_run(self):
        result = evaluate(snapshot(solved_on_days([0, 1, 2, 4, 5, 6, 7])), PerfectWeek(7))
        assert result.current == 4
        assert result.met is False

    def test_many_solves_same_day_count_once(self):
        result = evaluate(snapshot(make_solved(20)), PerfectWeek(7))
        assert result.current == 1


class TestLongestDailyRun:
    def test_empty(self):
        assert longest_daily_run([]) == 0

    def test_ignores_missing_timestamps(self):
        assert longest_daily_run([None, BASE_TIME]) == 1

    def test_uses_utc_calendar_days(self):
        # 23:30 at UTC-05:00 is already the next day in UTC
        tz = timezone(timedelta(hours=-5))
        day1 = datetime(2026, 3, 1, 23, 30, tzinfo=tz)  # 2026-03-02 UTC
        day2 = datetime(2026, 3, 3, 9, 0, tzinfo=timezone.utc)
        assert longest_daily_run([day1, day2]) == 2

    def test_picks_longest_of_several_runs(self):
        days = [BASE_TIME + timedelta(days=d) for d in (0, 1, 5, 6, 7, 8, 20)]
        assert longest_daily_run(days) == 4


class TestUnrecognized:
    def test_unknown_criteria_not_met(self):
        class Speed:
            threshold = 3

        result = evaluate(snapshot(make_solved(50)), Speed())  # type: ignore[arg-type]
        assert (result.current, result.met) == (0, False)

    def test_object_without_threshold(self):
        result = evaluate(snapshot(), object())  # type: ignore[arg-type]
        assert result.current == 0
        assert result.met is False
