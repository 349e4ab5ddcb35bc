"""Baseline: users, problems, solves, streaks and achievement tables.

Revision ID: 001_achievement_tables
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_achievement_tables"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Users ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id BIGSERIAL PRIMARY KEY,
            email VARCHAR(320) UNIQUE NOT NULL,
            first_name VARCHAR(20) NOT NULL,
            last_name VARCHAR(20),
            total_points BIGINT NOT NULL DEFAULT 0,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    # --- Problems ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS problems (
            id BIGSERIAL PRIMARY KEY,
            title VARCHAR(256) NOT NULL,
            difficulty VARCHAR(16) NOT NULL,
            tags VARCHAR(64) NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    # --- Solved problems ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS solved_problems (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            problem_id BIGINT NOT NULL REFERENCES problems(id) ON DELETE CASCADE,
            solved_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT solved_problems_user_id_problem_id_key UNIQUE (user_id, problem_id)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_solved_problems_user
        ON solved_problems(user_id)
    """)

    # --- Streaks ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS streaks (
            user_id BIGINT PRIMARY KEY REFERENCES users(id) ON DELETE CASCADE,
            current_streak INTEGER NOT NULL DEFAULT 0,
            longest_streak INTEGER NOT NULL DEFAULT 0,
            last_active_date DATE,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    # --- Badge definitions ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS badge_definitions (
            id SERIAL PRIMARY KEY,
            badge_id VARCHAR(64) UNIQUE NOT NULL,
            name VARCHAR(128) NOT NULL,
            description TEXT NOT NULL,
            icon VARCHAR(32) NOT NULL,
            category VARCHAR(32) NOT NULL,
            rarity VARCHAR(16) NOT NULL,
            criteria JSONB NOT NULL,
            points INTEGER NOT NULL DEFAULT 10,
            sort_order INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    # --- User badges (unlock records) ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_badges (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            badge_id VARCHAR(64) NOT NULL,
            unlocked_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            notification_seen BOOLEAN NOT NULL DEFAULT false,
            CONSTRAINT user_badges_user_id_badge_id_key UNIQUE (user_id, badge_id)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_user_badges_unseen
        ON user_badges(user_id)
        WHERE notification_seen = false
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS user_badges CASCADE")
    op.execute("DROP TABLE IF EXISTS badge_definitions CASCADE")
    op.execute("DROP TABLE IF EXISTS streaks CASCADE")
    op.execute("DROP TABLE IF EXISTS solved_problems CASCADE")
    op.execute("DROP TABLE IF EXISTS problems CASCADE")
    op.execute("DROP TABLE IF EXISTS users CASCADE")
