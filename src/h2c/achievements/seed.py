"""Badge seed data -- the 15 platform badges, plus seeding and re-seeding.

Run ``python -m h2c.achievements.seed`` to re-seed the catalog by hand.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter

from sqlalchemy import delete
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from h2c.achievements.catalog import Badge, Catalog
from h2c.achievements.repository import invalidate_catalog_cache
from h2c.db.models import BadgeDefinition

logger = logging.getLogger(__name__)

BADGE_SEED_DATA: list[dict] = [
    # Milestones
    {
        "badge_id": "first-steps",
        "name": "First Steps",
        "description": "Solve your first problem",
        "icon": "\U0001f3af",
        "category": "milestone",
        "rarity": "common",
        "criteria": {"type": "problemCount", "value": 1},
        "points": 10,
        "order": 1,
    },
    {
        "badge_id": "getting-started",
        "name": "Getting Started",
        "description": "Solve 10 problems",
        "icon": "\U0001f680",
        "category": "milestone",
        "rarity": "common",
        "criteria": {"type": "problemCount", "value": 10},
        "points": 25,
        "order": 2,
    },
    {
        "badge_id": "problem-solver",
        "name": "Problem Solver",
        "description": "Solve 50 problems",
        "icon": "\U0001f4aa",
        "category": "milestone",
        "rarity": "rare",
        "criteria": {"type": "problemCount", "value": 50},
        "points": 100,
        "order": 3,
    },
    {
        "badge_id": "coding-master",
        "name": "Coding Master",
        "description": "Solve 100 problems",
        "icon": "\U0001f451",
        "category": "milestone",
        "rarity": "epic",
        "criteria": {"type": "problemCount", "value": 100},
        "points": 250,
        "order": 4,
    },
    # Streaks
    {
        "badge_id": "week-warrior",
        "name": "Week Warrior",
        "description": "Maintain a 7-day streak",
        "icon": "\U0001f525",
        "category": "streak",
        "rarity": "common",
        "criteria": {"type": "streak", "value": 7},
        "points": 30,
        "order": 5,
    },
    {
        "badge_id": "month-champion",
        "name": "Month Champion",
        "description": "Maintain a 30-day streak",
        "icon": "⚡",
        "category": "streak",
        "rarity": "rare",
        "criteria": {"type": "streak", "value": 30},
        "points": 150,
        "order": 6,
    },
    {
        "badge_id": "unstoppable",
        "name": "Unstoppable",
        "description": "Maintain a 100-day streak",
        "icon": "\U0001f48e",
        "category": "streak",
        "rarity": "legendary",
        "criteria": {"type": "streak", "value": 100},
        "points": 500,
        "order": 7,
    },
    # Difficulty
    {
        "badge_id": "easy-peasy",
        "name": "Easy Peasy",
        "description": "Solve 10 easy problems",
        "icon": "\U0001f31f",
        "category": "difficulty",
        "rarity": "common",
        "criteria": {"type": "difficulty", "value": 10, "difficulty": "easy"},
        "points": 20,
        "order": 8,
    },
    {
        "badge_id": "medium-mastery",
        "name": "Medium Mastery",
        "description": "Solve 10 medium problems",
        "icon": "\U0001f396️",
        "category": "difficulty",
        "rarity": "rare",
        "criteria": {"type": "difficulty", "value": 10, "difficulty": "medium"},
        "points": 75,
        "order": 9,
    },
    {
        "badge_id": "hard-core",
        "name": "Hard Core",
        "description": "Solve 10 hard problems",
        "icon": "\U0001f480",
        "category": "difficulty",
        "rarity": "epic",
        "criteria": {"type": "difficulty", "value": 10, "difficulty": "hard"},
        "points": 200,
        "order": 10,
    },
    # Topics
    {
        "badge_id": "array-expert",
        "name": "Array Expert",
        "description": "Solve 10 array problems",
        "icon": "\U0001f4ca",
        "category": "topic",
        "rarity": "rare",
        "criteria": {"type": "topic", "value": 10, "topic": "array"},
        "points": 50,
        "order": 11,
    },
    {
        "badge_id": "tree-climber",
        "name": "Tree Climber",
        "description": "Solve 10 tree problems",
        "icon": "\U0001f332",
        "category": "topic",
        "rarity": "rare",
        "criteria": {"type": "topic", "value": 10, "topic": "tree"},
        "points": 50,
        "order": 12,
    },
    {
        "badge_id": "graph-guru",
        "name": "Graph Guru",
        "description": "Solve 10 graph problems",
        "icon": "\U0001f578️",
        "category": "topic",
        "rarity": "rare",
        "criteria": {"type": "topic", "value": 10, "topic": "graph"},
        "points": 50,
        "order": 13,
    },
    {
        "badge_id": "dp-dynamo",
        "name": "DP Dynamo",
        "description": "Solve 10 dynamic programming problems",
        "icon": "⚙️",
        "category": "topic",
        "rarity": "epic",
        "criteria": {"type": "topic", "value": 10, "topic": "dp"},
        "points": 75,
        "order": 14,
    },
    # Special
    {
        "badge_id": "perfect-week",
        "name": "Perfect Week",
        "description": "Solve at least 1 problem every day for 7 days",
        "icon": "✨",
        "category": "special",
        "rarity": "epic",
        "criteria": {"type": "perfectWeek", "value": 7},
        "points": 150,
        "order": 15,
    },
]


def default_catalog() -> Catalog:
    """The seed set as an in-memory catalog."""
    return Catalog(Badge.from_dict(data) for data in BADGE_SEED_DATA)


async def seed_badges(db: AsyncSession) -> int:
    """Upsert all seed badge definitions by badge_id. Returns number of badges seeded."""
    # Validates every entry before anything is written
    catalog = default_catalog()

    for badge in catalog:
        stmt = pg_insert(BadgeDefinition).values(
            badge_id=badge.badge_id,
            name=badge.name,
            description=badge.description,
            icon=badge.icon,
            category=badge.category,
            rarity=badge.rarity,
            criteria=badge.to_dict()["criteria"],
            points=badge.points,
            sort_order=badge.order,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["badge_id"],
            set_={
                "name": stmt.excluded.name,
                "description": stmt.excluded.description,
                "icon": stmt.excluded.icon,
                "category": stmt.excluded.category,
                "rarity": stmt.excluded.rarity,
                "criteria": stmt.excluded.criteria,
                "points": stmt.excluded.points,
                "sort_order": stmt.excluded.sort_order,
            },
        )
        await db.execute(stmt)

    await db.commit()
    invalidate_catalog_cache()
    logger.info("Seeded %d badge definitions", len(catalog))
    return len(catalog)


async def reseed_badges(db: AsyncSession) -> int:
    """Administrative re-seed: drop definitions not in the seed set, then upsert.

    Users' unlock records are left untouched.
    """
    seed_ids = [data["badge_id"] for data in BADGE_SEED_DATA]
    result = await db.execute(
        delete(BadgeDefinition).where(BadgeDefinition.badge_id.not_in(seed_ids))
    )
    if result.rowcount:
        logger.info("Removed %d stale badge definitions", result.rowcount)
    return await seed_badges(db)


def rarity_summary() -> dict[str, int]:
    counts = Counter(data["rarity"] for data in BADGE_SEED_DATA)
    return {rarity: counts.get(rarity, 0) for rarity in ("common", "rare", "epic", "legendary")}


async def _main() -> None:
    from h2c.config import get_settings
    from h2c.database import close_db, init_db, session_scope
    from h2c.middleware.logging import setup_logging

    settings = get_settings()
    setup_logging(settings)
    await init_db(settings.database_url)
    try:
        async with session_scope() as db:
            seeded = await reseed_badges(db)
    finally:
        await close_db()

    print(f"Seeded {seeded} achievements")  # noqa: T201
    for rarity, count in rarity_summary().items():
        print(f"  {rarity.capitalize()}: {count}")  # noqa: T201


if __name__ == "__main__":
    asyncio.run(_main())
