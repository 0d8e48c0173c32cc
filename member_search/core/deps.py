from __future__ import annotations

from typing import List, Optional

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from member_search.core.settings import get_app_settings
from member_search.db.session import get_async_session
from member_search.repositories.paging import CountStrategy
from member_search.schemas.common import PageRequest, SortOrder, parse_sort
from member_search.schemas.member import MemberSearchCondition
from member_search.services.member import MemberService


# PUBLIC_INTERFACE
def get_member_service(session: AsyncSession = Depends(get_async_session)) -> MemberService:
    """Build the member service over the request session."""
    return MemberService(session)


# PUBLIC_INTERFACE
def get_search_condition(
    username: Optional[str] = Query(None, description="Exact username"),
    team_name: Optional[str] = Query(None, description="Exact team name"),
    age_goe: Optional[int] = Query(None, description="Minimum age (inclusive)"),
    age_loe: Optional[int] = Query(None, description="Maximum age (inclusive)"),
) -> MemberSearchCondition:
    """Collect the optional search filters from the query string."""
    return MemberSearchCondition(
        username=username, team_name=team_name, age_goe=age_goe, age_loe=age_loe
    )


# PUBLIC_INTERFACE
def get_sort(
    sort: Optional[List[str]] = Query(None, description="Sort orders, e.g. age,desc"),
) -> List[SortOrder]:
    """Parse repeated ``sort`` parameters; unpaged endpoints take only this."""
    return parse_sort(sort or [])


# PUBLIC_INTERFACE
def get_page_request(
    offset: int = Query(0, description="Number of rows to skip"),
    limit: Optional[int] = Query(None, description="Page size"),
    sort: List[SortOrder] = Depends(get_sort),
) -> PageRequest:
    """
    Build a PageRequest from query parameters.

    Bounds are not validated here: the pager rejects a bad window with
    InvalidPageRequest, which the API maps to 400. Oversized limits are clamped.
    """
    settings = get_app_settings()
    size = settings.DEFAULT_PAGE_SIZE if limit is None else min(limit, settings.MAX_PAGE_SIZE)
    return PageRequest(offset=offset, limit=size, sort=sort)


# PUBLIC_INTERFACE
def get_count_strategy(
    count_strategy: Optional[CountStrategy] = Query(
        None, description="'always' runs the count query; 'optimized' may skip it"
    ),
) -> CountStrategy:
    """Resolve the count strategy, falling back to the configured default."""
    if count_strategy is not None:
        return count_strategy
    return CountStrategy(get_app_settings().DEFAULT_COUNT_STRATEGY)
