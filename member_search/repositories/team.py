from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select

from member_search.db.models import Member, Team
from member_search.repositories.base import BaseRepository
from member_search.schemas.team import TeamStats


class TeamRepository(BaseRepository):
    """Repository for teams."""

    async def list_teams(self) -> List[Team]:
        return await self.scalars(select(Team).order_by(Team.id))

    async def get_team_by_name(self, name: str) -> Optional[Team]:
        stmt = select(Team).where(Team.name == name).order_by(Team.id).limit(1)
        return await self.scalar_one_or_none(stmt)

    async def create_team(self, name: str) -> Team:
        row = Team(name=name)
        self.add(row)
        await self.commit()
        return row

    async def team_stats(self) -> List[TeamStats]:
        """
        Age aggregates grouped by team name, ordered by name.

        Teams without members are left out (inner join).
        """
        stmt = (
            select(
                Team.name.label("team_name"),
                func.count(Member.id).label("member_count"),
                func.sum(Member.age).label("age_sum"),
                func.avg(Member.age).label("age_avg"),
                func.max(Member.age).label("age_max"),
                func.min(Member.age).label("age_min"),
            )
            .select_from(Team)
            .join(Team.members)
            .group_by(Team.name)
            .order_by(Team.name)
        )
        result = await self.execute(stmt)
        return [TeamStats.model_validate(row._asdict()) for row in result]
