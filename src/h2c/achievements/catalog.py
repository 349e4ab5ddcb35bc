"""Badge catalog: criteria variants, badge definitions and the immutable catalog.

The catalog is loaded once from ``badge_definitions`` and shared read-only by
every evaluation. Criteria are a closed set of frozen dataclasses; their
storage shape is the JSON object ``{"type": ..., "value": ..., ...}``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Literal

from h2c.achievements.exceptions import UnknownCriteriaError

logger = logging.getLogger(__name__)

ProblemDifficulty = Literal["easy", "medium", "hard"]

CATEGORIES: frozenset[str] = frozenset(
    {"milestone", "streak", "speed", "difficulty", "topic", "special", "social"}
)
RARITIES: frozenset[str] = frozenset({"common", "rare", "epic", "legendary"})
DIFFICULTIES: frozenset[str] = frozenset({"easy", "medium", "hard"})


# --- Criteria variants ---


@dataclass(frozen=True, slots=True)
class ProblemCount:
    threshold: int


@dataclass(frozen=True, slots=True)
class Difficulty:
    threshold: int
    difficulty: ProblemDifficulty


@dataclass(frozen=True, slots=True)
class Topic:
    threshold: int
    topic: str


@dataclass(frozen=True, slots=True)
class Streak:
    threshold: int


@dataclass(frozen=True, slots=True)
class PerfectWeek:
    """At least one solve on each of ``threshold`` consecutive days."""

    threshold: int


Criteria = ProblemCount | Difficulty | Topic | Streak | PerfectWeek


def criteria_from_dict(data: Mapping[str, Any]) -> Criteria:
    """Build a criteria variant from its stored JSON shape.

    Raises:
        UnknownCriteriaError: unknown ``type``, a missing qualifier or a
            threshold that is not a positive integer.
    """
    if not isinstance(data, Mapping):
        msg = f"Criteria must be an object, got {type(data).__name__}"
        raise UnknownCriteriaError(msg)

    kind = data.get("type")
    raw_value = data.get("value")
    if isinstance(raw_value, bool) or not isinstance(raw_value, int) or raw_value < 1:
        msg = f"Invalid criteria threshold: {raw_value!r}"
        raise UnknownCriteriaError(msg)
    value = raw_value

    if kind == "problemCount":
        return ProblemCount(threshold=value)
    if kind == "difficulty":
        difficulty = data.get("difficulty")
        if difficulty not in DIFFICULTIES:
            msg = f"Invalid difficulty qualifier: {difficulty!r}"
            raise UnknownCriteriaError(msg)
        return Difficulty(threshold=value, difficulty=difficulty)
    if kind == "topic":
        topic = data.get("topic")
        if not topic:
            msg = "Topic criteria requires a topic"
            raise UnknownCriteriaError(msg)
        return Topic(threshold=value, topic=str(topic))
    if kind == "streak":
        return Streak(threshold=value)
    if kind == "perfectWeek":
        return PerfectWeek(threshold=value)

    msg = f"Unknown criteria type: {kind!r}"
    raise UnknownCriteriaError(msg)


def criteria_to_dict(criteria: Criteria) -> dict[str, Any]:
    """Inverse of :func:`criteria_from_dict`."""
    if isinstance(criteria, ProblemCount):
        return {"type": "problemCount", "value": criteria.threshold}
    if isinstance(criteria, Difficulty):
        return {"type": "difficulty", "value": criteria.threshold, "difficulty": criteria.difficulty}
    if isinstance(criteria, Topic):
        return {"type": "topic", "value": criteria.threshold, "topic": criteria.topic}
    if isinstance(criteria, Streak):
        return {"type": "streak", "value": criteria.threshold}
    if isinstance(criteria, PerfectWeek):
        return {"type": "perfectWeek", "value": criteria.threshold}
    msg = f"Not a criteria variant: {criteria!r}"
    raise TypeError(msg)


# --- Badge definition ---


@dataclass(frozen=True, slots=True)
class Badge:
    """Immutable catalog entry."""

    badge_id: str
    name: str
    description: str
    icon: str
    category: str
    rarity: str
    criteria: Criteria
    points: int
    order: int

    @property
    def threshold(self) -> int:
        return self.criteria.threshold

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Badge:
        """Build from a seed entry or an API/ORM-shaped dict."""
        category = data["category"]
        rarity = data["rarity"]
        if category not in CATEGORIES:
            msg = f"Invalid badge category: {category!r}"
            raise ValueError(msg)
        if rarity not in RARITIES:
            msg = f"Invalid badge rarity: {rarity!r}"
            raise ValueError(msg)
        return cls(
            badge_id=data["badge_id"],
            name=data["name"],
            description=data["description"],
            icon=data["icon"],
            category=category,
            rarity=rarity,
            criteria=criteria_from_dict(data["criteria"]),
            points=int(data.get("points", 10)),
            order=int(data.get("order", 0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "badge_id": self.badge_id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "category": self.category,
            "rarity": self.rarity,
            "criteria": criteria_to_dict(self.criteria),
            "points": self.points,
            "order": self.order,
        }


# --- Catalog ---


class Catalog:
    """Read-only badge set, ordered by ``order`` and indexed by ``badge_id``."""

    __slots__ = ("_badges", "_by_id")

    def __init__(self, badges: Iterable[Badge]) -> None:
        ordered = tuple(sorted(badges, key=lambda b: b.order))
        by_id: dict[str, Badge] = {}
        for badge in ordered:
            if badge.badge_id in by_id:
                msg = f"Duplicate badge id in catalog: {badge.badge_id}"
                raise ValueError(msg)
            by_id[badge.badge_id] = badge
        self._badges = ordered
        self._by_id = by_id

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> Catalog:
        """Build a catalog from stored rows, skipping entries that cannot be evaluated."""
        badges = []
        for record in records:
            try:
                badges.append(Badge.from_dict(record))
            except (UnknownCriteriaError, ValueError, KeyError, TypeError):
                logger.warning("Skipping malformed badge definition: %s", record.get("badge_id"), exc_info=True)
        return cls(badges)

    def __iter__(self) -> Iterator[Badge]:
        return iter(self._badges)

    def __len__(self) -> int:
        return len(self._badges)

    def __contains__(self, badge_id: object) -> bool:
        return badge_id in self._by_id

    def get(self, badge_id: str) -> Badge | None:
        return self._by_id.get(badge_id)

    @property
    def badge_ids(self) -> list[str]:
        return [b.badge_id for b in self._badges]
