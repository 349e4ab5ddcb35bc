"""ORM models matching the Alembic schema (alembic/versions)."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from sqlalchemy import (
    BigInteger,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from h2c.db.base import Base


# ---------------------------------------------------------------------------
# Users and problems
# ---------------------------------------------------------------------------


class User(Base):
    """Platform user. Owns its unlock records and the total_points counter."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(20), nullable=False)
    last_name: Mapped[str | None] = mapped_column(String(20), nullable=True)
    total_points: Mapped[int] = mapped_column(BigInteger, nullable=False, server_default="0", default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    unlocked_badges: Mapped[list[UserBadge]] = relationship(
        "UserBadge",
        back_populates="user",
        order_by="UserBadge.unlocked_at",
    )


class Problem(Base):
    """A practice problem. ``tags`` holds a single topic string."""

    __tablename__ = "problems"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    difficulty: Mapped[str] = mapped_column(String(16), nullable=False)
    tags: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class SolvedProblem(Base):
    """One accepted solve per (user, problem) -- UNIQUE prevents duplicates."""

    __tablename__ = "solved_problems"
    __table_args__ = (
        UniqueConstraint("user_id", "problem_id", name="solved_problems_user_id_problem_id_key"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    problem_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("problems.id", ondelete="CASCADE"), nullable=False)
    solved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    problem: Mapped[Problem] = relationship("Problem", lazy="joined")


class Streak(Base):
    """Daily solve streak -- single row per user."""

    __tablename__ = "streaks"

    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0", default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0", default=0)
    last_active_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


# ---------------------------------------------------------------------------
# Achievements
# ---------------------------------------------------------------------------


class BadgeDefinition(Base):
    """Badge catalog rows -- seeded on startup, read-only at runtime."""

    __tablename__ = "badge_definitions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    badge_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    icon: Mapped[str] = mapped_column(String(32), nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    rarity: Mapped[str] = mapped_column(String(16), nullable=False)
    criteria: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False, server_default="10")
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class UserBadge(Base):
    """Unlock records -- UNIQUE(user_id, badge_id) makes unlocking idempotent.

    ``badge_id`` references ``badge_definitions.badge_id`` by value only so a
    catalog re-seed never deletes a user's history.
    """

    __tablename__ = "user_badges"
    __table_args__ = (
        UniqueConstraint("user_id", "badge_id", name="user_badges_user_id_badge_id_key"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    badge_id: Mapped[str] = mapped_column(String(64), nullable=False)
    unlocked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    notification_seen: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false", default=False)

    user: Mapped[User] = relationship("User", back_populates="unlocked_badges")
