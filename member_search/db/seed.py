"""
Database seeding with the sample roster.

Seeds:
- Teams teamA and teamB
- member1 (10) and member2 (20) in teamA
- member3 (30) and member4 (40) in teamB

Usage:
  python -m member_search.db.run_migrations upgrade head
  python -m member_search.db.seed
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from member_search.core.logging import configure_logging
from member_search.db.models import Member, Team
from member_search.db.session import dispose_engine, session_scope

logger = logging.getLogger(__name__)

SAMPLE_ROSTER: Dict[str, List[Tuple[str, int]]] = {
    "teamA": [("member1", 10), ("member2", 20)],
    "teamB": [("member3", 30), ("member4", 40)],
}


# PUBLIC_INTERFACE
async def seed_session(session: AsyncSession) -> None:
    """
    Insert the sample roster into ``session`` and commit.

    Teams that already exist by name are left alone together with their members,
    so running the seed twice does not duplicate rows.
    """
    res = await session.execute(select(Team.name).where(Team.name.in_(SAMPLE_ROSTER)))
    existing = set(res.scalars())

    for team_name, members in SAMPLE_ROSTER.items():
        if team_name in existing:
            logger.info("Team %s already seeded; skipping", team_name)
            continue
        team = Team(name=team_name)
        session.add(team)
        session.add_all(Member(username=u, age=a, team=team) for u, a in members)

    await session.commit()


# PUBLIC_INTERFACE
async def seed_all() -> None:
    """Seed the configured database with the sample roster."""
    async with session_scope() as session:
        await seed_session(session)


async def _main() -> None:
    configure_logging()
    try:
        await seed_all()
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(_main())
