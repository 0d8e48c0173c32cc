from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from sqlalchemy import Row, Select, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from member_search.core.errors import NotFound
from member_search.db.models import Member, Team
from member_search.repositories.base import BaseRepository
from member_search.repositories.paging import CountStrategy, Pager, resolve_order_by
from member_search.repositories.predicates import (
    Predicate,
    build_member_predicate,
    build_search_predicate,
)
from member_search.schemas.common import Page, PageRequest, SortOrder
from member_search.schemas.member import (
    MemberCreate,
    MemberRead,
    MemberSearchCondition,
    MemberTeamRead,
)

logger = logging.getLogger(__name__)

# Fields a search result may be ordered by, keyed by their MemberTeamRead name.
SORTABLE_FIELDS = {
    "member_id": Member.id,
    "username": Member.username,
    "age": Member.age,
    "team_id": Team.id,
    "team_name": Team.name,
}


def _member_team_row(row: Row) -> MemberTeamRead:
    return MemberTeamRead.model_validate(row._asdict())


def _member_row(row: Row) -> MemberRead:
    return MemberRead.model_validate(row[0])


def member_team_select(predicate: Predicate) -> Select:
    """Projection of members left-joined to their team, filtered by ``predicate``."""
    return (
        select(
            Member.id.label("member_id"),
            Member.username,
            Member.age,
            Team.id.label("team_id"),
            Team.name.label("team_name"),
        )
        .select_from(Member)
        .outerjoin(Member.team)
        .where(predicate)
    )


def member_count_select(predicate: Predicate) -> Select:
    """COUNT over the same join and filter as member_team_select."""
    return (
        select(func.count(Member.id))
        .select_from(Member)
        .outerjoin(Member.team)
        .where(predicate)
    )


class MemberRepository(BaseRepository):
    """Repository for members: dynamic search, paging and bulk updates."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.pager = Pager(session)

    # --- search -----------------------------------------------------------

    async def search(
        self, condition: MemberSearchCondition, *, sort: Sequence[SortOrder] = ()
    ) -> List[MemberTeamRead]:
        """Every member matching ``condition`` with its team, ordered by id unless ``sort`` says otherwise."""
        order_by = resolve_order_by(sort, SORTABLE_FIELDS, [Member.id.asc()])
        stmt = member_team_select(build_search_predicate(condition)).order_by(*order_by)
        result = await self.execute(stmt)
        return [_member_team_row(row) for row in result]

    async def search_page(
        self,
        condition: MemberSearchCondition,
        page_request: PageRequest,
        *,
        count_strategy: CountStrategy = CountStrategy.ALWAYS,
    ) -> Page[MemberTeamRead]:
        """One page of search results; runs the count query unless told otherwise."""
        order_by = resolve_order_by(page_request.sort, SORTABLE_FIELDS, [Member.id.asc()])
        predicate = build_search_predicate(condition)
        return await self.pager.fetch_page(
            member_team_select(predicate).order_by(*order_by),
            member_count_select(predicate),
            page_request,
            row_factory=_member_team_row,
            count_strategy=count_strategy,
        )

    async def search_page_optimized(
        self, condition: MemberSearchCondition, page_request: PageRequest
    ) -> Page[MemberTeamRead]:
        """One page of search results, skipping the count when the first page is not full."""
        return await self.search_page(
            condition, page_request, count_strategy=CountStrategy.OPTIMIZED
        )

    async def count(self, condition: MemberSearchCondition) -> int:
        """Number of members matching ``condition``."""
        return await self.scalar_one(member_count_select(build_search_predicate(condition)))

    async def page_members(
        self,
        condition: MemberSearchCondition,
        page_request: PageRequest,
        *,
        count_strategy: CountStrategy = CountStrategy.ALWAYS,
    ) -> Page[MemberRead]:
        """Page member entities rather than the flattened projection."""
        sortable = {"id": Member.id, "username": Member.username, "age": Member.age}
        order_by = resolve_order_by(page_request.sort, sortable, [Member.id.asc()])
        predicate = build_search_predicate(condition)
        content_stmt = (
            select(Member).outerjoin(Member.team).where(predicate).order_by(*order_by)
        )
        return await self.pager.fetch_page(
            content_stmt,
            member_count_select(predicate),
            page_request,
            row_factory=_member_row,
            count_strategy=count_strategy,
        )

    # --- basic lookups ----------------------------------------------------

    async def get_member(self, member_id: int) -> Optional[Member]:
        stmt = select(Member).where(Member.id == member_id)
        return await self.scalar_one_or_none(stmt)

    async def find_all(self) -> List[Member]:
        return await self.scalars(select(Member).order_by(Member.id))

    async def find_by_username(self, username: str) -> List[Member]:
        stmt = select(Member).where(Member.username == username).order_by(Member.id)
        return await self.scalars(stmt)

    async def create_member(self, payload: MemberCreate) -> Member:
        team = None
        if payload.team_id is not None:
            team = await self.scalar_one_or_none(select(Team).where(Team.id == payload.team_id))
            if team is None:
                raise NotFound(f"Team {payload.team_id} not found")
        row = Member(username=payload.username, age=payload.age, team=team)
        self.add(row)
        await self.commit()
        return row

    async def change_team(self, member_id: int, team_id: Optional[int]) -> Member:
        """Move a member to ``team_id``, or out of any team when it is None."""
        member = await self.scalar_one_or_none(
            select(Member).options(selectinload(Member.team)).where(Member.id == member_id)
        )
        if member is None:
            raise NotFound(f"Member {member_id} not found")
        team = None
        if team_id is not None:
            team = await self.scalar_one_or_none(
                select(Team).options(selectinload(Team.members)).where(Team.id == team_id)
            )
            if team is None:
                raise NotFound(f"Team {team_id} not found")
        member.change_team(team)
        await self.commit()
        return member

    # --- bulk updates -----------------------------------------------------
    #
    # These run as single UPDATE/DELETE statements that bypass the identity map.
    # Members the session already holds are reloaded afterwards, and the ones the
    # statement deleted are expunged, so held objects show database state without
    # an implicit (and, under asyncio, illegal) lazy refresh.

    async def _bulk(self, stmt) -> int:
        result = await self.execute(stmt.execution_options(synchronize_session=False))
        affected = result.rowcount
        await self.commit()
        await self._reload_held_members()
        logger.info("Bulk statement affected %d member rows", affected)
        return affected

    async def _reload_held_members(self) -> None:
        held = {
            key[1][0]: obj
            for key, obj in list(self.session.identity_map.items())
            if isinstance(obj, Member)
        }
        if not held:
            return
        stmt = (
            select(Member)
            .where(Member.id.in_(list(held)))
            .execution_options(populate_existing=True)
        )
        still_there = {member.id for member in await self.scalars(stmt)}
        for member_id, obj in held.items():
            if member_id not in still_there:
                self.session.expunge(obj)

    async def bulk_rename(self, username: str, *, age_lt: int) -> int:
        """Set ``username`` on every member younger than ``age_lt``."""
        return await self._bulk(
            update(Member).where(Member.age < age_lt).values(username=username)
        )

    async def bulk_add_age(
        self, delta: int, condition: Optional[MemberSearchCondition] = None
    ) -> int:
        """Add ``delta`` to the age of every member matching ``condition`` (all when None)."""
        predicate = build_member_predicate(condition or MemberSearchCondition())
        return await self._bulk(
            update(Member).where(predicate).values(age=Member.age + delta)
        )

    async def bulk_multiply_age(
        self, factor: int, condition: Optional[MemberSearchCondition] = None
    ) -> int:
        """Multiply the age of every member matching ``condition`` (all when None)."""
        predicate = build_member_predicate(condition or MemberSearchCondition())
        return await self._bulk(
            update(Member).where(predicate).values(age=Member.age * factor)
        )

    async def bulk_delete(self, *, age_gt: int) -> int:
        """Delete every member older than ``age_gt``."""
        return await self._bulk(delete(Member).where(Member.age > age_gt))
