"""Catalog and criteria parsing tests."""

from __future__ import annotations

import pytest

from h2c.achievements.catalog import (
    Badge,
    Catalog,
    Difficulty,
    PerfectWeek,
    ProblemCount,
    Streak,
    Topic,
    criteria_from_dict,
    criteria_to_dict,
)
from h2c.achievements.exceptions import UnknownCriteriaError
from h2c.achievements.seed import BADGE_SEED_DATA, default_catalog, rarity_summary
from tests.fakes import make_badge


class TestCriteriaParsing:
    def test_problem_count(self):
        assert criteria_from_dict({"type": "problemCount", "value": 10}) == ProblemCount(10)

    def test_difficulty(self):
        assert criteria_from_dict({"type": "difficulty", "value": 10, "difficulty": "hard"}) == Difficulty(10, "hard")

    def test_topic(self):
        assert criteria_from_dict({"type": "topic", "value": 10, "topic": "dp"}) == Topic(10, "dp")

    def test_streak(self):
        assert criteria_from_dict({"type": "streak", "value": 30}) == Streak(30)

    def test_perfect_week(self):
        assert criteria_from_dict({"type": "perfectWeek", "value": 7}) == PerfectWeek(7)

    def test_unknown_type_raises(self):
        with pytest.raises(UnknownCriteriaError):
            criteria_from_dict({"type": "speed", "value": 5})

    def test_invalid_difficulty_raises(self):
        with pytest.raises(UnknownCriteriaError):
            criteria_from_dict({"type": "difficulty", "value": 5, "difficulty": "insane"})

    def test_topic_without_topic_raises(self):
        with pytest.raises(UnknownCriteriaError):
            criteria_from_dict({"type": "topic", "value": 5})

    @pytest.mark.parametrize("value", [None, "10", 0, -3, 2.5, True])
    def test_invalid_threshold_raises(self, value):
        with pytest.raises(UnknownCriteriaError):
            criteria_from_dict({"type": "problemCount", "value": value})

    @pytest.mark.parametrize("payload", [["problemCount", 1], "problemCount", None, 7])
    def test_non_object_payload_raises(self, payload):
        with pytest.raises(UnknownCriteriaError):
            criteria_from_dict(payload)  # type: ignore[arg-type]

    def test_stored_shape_survives_serialization(self):
        stored = {"type": "difficulty", "value": 10, "difficulty": "medium"}
        assert criteria_to_dict(criteria_from_dict(stored)) == stored


class TestCatalog:
    def test_orders_by_order_field(self):
        catalog = Catalog([
            make_badge("b", {"type": "problemCount", "value": 2}, order=2),
            make_badge("a", {"type": "problemCount", "value": 1}, order=1),
        ])
        assert catalog.badge_ids == ["a", "b"]

    def test_lookup_by_id(self):
        badge = make_badge("a", {"type": "streak", "value": 7})
        catalog = Catalog([badge])
        assert catalog.get("a") is badge
        assert "a" in catalog
        assert catalog.get("missing") is None

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            Catalog([
                make_badge("a", {"type": "problemCount", "value": 1}),
                make_badge("a", {"type": "problemCount", "value": 2}),
            ])

    def test_from_records_skips_malformed_entries(self):
        records = [
            make_badge("ok", {"type": "problemCount", "value": 1}).to_dict(),
            {**make_badge("bad", {"type": "problemCount", "value": 1}).to_dict(), "criteria": {"type": "speed", "value": 3}},
        ]
        catalog = Catalog.from_records(records)
        assert catalog.badge_ids == ["ok"]

    @pytest.mark.parametrize(
        "criteria",
        [
            {"type": "problemCount", "value": None},
            {"type": "streak"},
            ["problemCount", 1],
            "streak",
        ],
    )
    def test_from_records_skips_unparseable_criteria(self, criteria):
        good = make_badge("ok", {"type": "problemCount", "value": 1}).to_dict()
        bad = {**make_badge("bad", {"type": "problemCount", "value": 1}).to_dict(), "criteria": criteria}
        assert Catalog.from_records([bad, good]).badge_ids == ["ok"]

    def test_from_records_skips_non_numeric_points(self):
        good = make_badge("ok", {"type": "problemCount", "value": 1}).to_dict()
        bad = {**make_badge("bad", {"type": "problemCount", "value": 1}).to_dict(), "points": None}
        assert Catalog.from_records([good, bad]).badge_ids == ["ok"]

    def test_invalid_rarity_rejected(self):
        data = make_badge("a", {"type": "problemCount", "value": 1}).to_dict()
        data["rarity"] = "mythic"
        with pytest.raises(ValueError):
            Badge.from_dict(data)


class TestSeedCatalog:
    def test_fifteen_badges(self):
        assert len(default_catalog()) == 15

    def test_ids_match_seed_data_in_order(self):
        assert default_catalog().badge_ids == [d["badge_id"] for d in BADGE_SEED_DATA]

    def test_orders_are_unique(self):
        orders = [d["order"] for d in BADGE_SEED_DATA]
        assert len(orders) == len(set(orders))

    def test_thresholds_positive(self):
        assert all(b.threshold > 0 for b in default_catalog())

    def test_known_entries(self):
        catalog = default_catalog()
        assert catalog.get("easy-peasy").criteria == Difficulty(10, "easy")
        assert catalog.get("array-expert").criteria == Topic(10, "array")
        assert catalog.get("unstoppable").points == 500
        assert catalog.get("perfect-week").criteria == PerfectWeek(7)

    def test_rarity_summary(self):
        assert rarity_summary() == {"common": 4, "rare": 6, "epic": 4, "legendary": 1}
