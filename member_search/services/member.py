from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from member_search.core.errors import NotFound
from member_search.db.models import Member, Team
from member_search.repositories.member import MemberRepository
from member_search.repositories.paging import CountStrategy
from member_search.repositories.team import TeamRepository
from member_search.schemas.common import Page, PageRequest, SortOrder
from member_search.schemas.member import (
    BulkAgeChange,
    MemberCreate,
    MemberRead,
    MemberSearchCondition,
    MemberTeamRead,
)
from member_search.schemas.team import TeamStats

logger = logging.getLogger(__name__)


class MemberService:
    """
    Domain service for member search and maintenance.

    Exposes the three retrieval operations (search, search_page,
    search_page_optimized) plus team management and bulk updates.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.members = MemberRepository(session)
        self.teams = TeamRepository(session)

    # PUBLIC_INTERFACE
    async def search(
        self, condition: MemberSearchCondition, sort: Sequence[SortOrder] = ()
    ) -> List[MemberTeamRead]:
        """Return every member matching ``condition`` joined with its team."""
        return await self.members.search(condition, sort=sort)

    # PUBLIC_INTERFACE
    async def search_page(
        self,
        condition: MemberSearchCondition,
        page_request: PageRequest,
        count_strategy: CountStrategy = CountStrategy.ALWAYS,
    ) -> Page[MemberTeamRead]:
        """
        Return one page of search results.

        Parameters:
            condition: optional filters
            page_request: offset/limit window and sort
            count_strategy: ALWAYS issues the count query; OPTIMIZED may skip it
        """
        page = await self.members.search_page(condition, page_request, count_strategy=count_strategy)
        logger.info(
            "Member search page offset=%d limit=%d returned %d of %d",
            page_request.offset,
            page_request.limit,
            len(page.content),
            page.total_elements,
        )
        return page

    # PUBLIC_INTERFACE
    async def search_page_optimized(
        self, condition: MemberSearchCondition, page_request: PageRequest
    ) -> Page[MemberTeamRead]:
        """Return one page of search results using the optimized count strategy."""
        return await self.search_page(condition, page_request, CountStrategy.OPTIMIZED)

    # PUBLIC_INTERFACE
    async def page_members(
        self,
        condition: MemberSearchCondition,
        page_request: PageRequest,
        count_strategy: CountStrategy = CountStrategy.ALWAYS,
    ) -> Page[MemberRead]:
        return await self.members.page_members(condition, page_request, count_strategy=count_strategy)

    async def get_member(self, member_id: int) -> Member:
        member = await self.members.get_member(member_id)
        if member is None:
            raise NotFound(f"Member {member_id} not found")
        return member

    async def create_member(self, payload: MemberCreate) -> Member:
        created = await self.members.create_member(payload)
        logger.info("Created member id=%s team_id=%s", created.id, created.team_id)
        return created

    async def change_team(self, member_id: int, team_id: Optional[int]) -> Member:
        return await self.members.change_team(member_id, team_id)

    async def create_team(self, name: str) -> Team:
        team = await self.teams.create_team(name)
        logger.info("Created team id=%s name=%s", team.id, team.name)
        return team

    async def list_teams(self) -> List[Team]:
        return await self.teams.list_teams()

    async def team_stats(self) -> List[TeamStats]:
        return await self.teams.team_stats()

    # PUBLIC_INTERFACE
    async def bulk_rename(self, username: str, age_lt: int) -> int:
        return await self.members.bulk_rename(username, age_lt=age_lt)

    # PUBLIC_INTERFACE
    async def bulk_change_age(self, payload: BulkAgeChange) -> int:
        """Apply an additive or multiplicative age update; the payload carries exactly one."""
        if payload.add is not None:
            return await self.members.bulk_add_age(payload.add, payload.condition)
        return await self.members.bulk_multiply_age(payload.multiply, payload.condition)

    # PUBLIC_INTERFACE
    async def bulk_delete(self, age_gt: int) -> int:
        return await self.members.bulk_delete(age_gt=age_gt)
