"""Pydantic response models for achievement endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from h2c.achievements.catalog import Badge, criteria_to_dict


class BadgeResponse(BaseModel):
    badge_id: str
    name: str
    description: str
    icon: str
    category: str
    rarity: str
    criteria: dict[str, Any]
    points: int
    order: int

    @classmethod
    def from_badge(cls, badge: Badge) -> BadgeResponse:
        return cls(
            badge_id=badge.badge_id,
            name=badge.name,
            description=badge.description,
            icon=badge.icon,
            category=badge.category,
            rarity=badge.rarity,
            criteria=criteria_to_dict(badge.criteria),
            points=badge.points,
            order=badge.order,
        )


class AllBadgesResponse(BaseModel):
    badges: list[BadgeResponse]


class UnlockedBadgeResponse(BadgeResponse):
    unlocked_at: datetime
    notification_seen: bool


class UserAchievementsResponse(BaseModel):
    unlocked_badges: list[UnlockedBadgeResponse]
    total_points: int
    total_unlocked: int


class BadgeProgressResponse(BaseModel):
    current: int
    required: int
    percentage: int
    unlocked: bool


class UnseenBadgeResponse(BadgeResponse):
    unlocked_at: datetime


class MarkSeenResponse(BaseModel):
    message: str = "Notification marked as seen"


class UnlockCheckResponse(BaseModel):
    new_badges: list[BadgeResponse]
    points_awarded: int
