from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Path, status

from member_search.core.deps import (
    get_count_strategy,
    get_member_service,
    get_page_request,
    get_search_condition,
    get_sort,
)
from member_search.repositories.paging import CountStrategy
from member_search.schemas.common import AffectedRows, Page, PageRequest, SortOrder
from member_search.schemas.member import (
    BulkAgeChange,
    BulkDelete,
    BulkRename,
    MemberCreate,
    MemberRead,
    MemberSearchCondition,
    MemberTeamChange,
    MemberTeamRead,
)
from member_search.services.member import MemberService

router = APIRouter(prefix="/members", tags=["Members"])


# PUBLIC_INTERFACE
@router.get(
    "/search",
    response_model=List[MemberTeamRead],
    summary="Search members",
    description=(
        "Members left-joined with their team, filtered by any combination of "
        "username, team_name, age_goe and age_loe. Omitted filters match everything."
    ),
)
async def search_members(
    condition: MemberSearchCondition = Depends(get_search_condition),
    sort: List[SortOrder] = Depends(get_sort),
    service: MemberService = Depends(get_member_service),
) -> List[MemberTeamRead]:
    return await service.search(condition, sort=sort)


# PUBLIC_INTERFACE
@router.get(
    "/search/page",
    response_model=Page[MemberTeamRead],
    summary="Search members (paged)",
    description=(
        "One page of search results with total count and page metadata. "
        "count_strategy=optimized skips the count query when the first page is not full."
    ),
)
async def search_members_page(
    condition: MemberSearchCondition = Depends(get_search_condition),
    page_request: PageRequest = Depends(get_page_request),
    count_strategy: CountStrategy = Depends(get_count_strategy),
    service: MemberService = Depends(get_member_service),
) -> Page[MemberTeamRead]:
    return await service.search_page(condition, page_request, count_strategy)


# PUBLIC_INTERFACE
@router.get(
    "/page",
    response_model=Page[MemberRead],
    summary="Page member entities",
)
async def page_members(
    condition: MemberSearchCondition = Depends(get_search_condition),
    page_request: PageRequest = Depends(get_page_request),
    count_strategy: CountStrategy = Depends(get_count_strategy),
    service: MemberService = Depends(get_member_service),
) -> Page[MemberRead]:
    return await service.page_members(condition, page_request, count_strategy)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=MemberRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create member",
)
async def create_member(
    payload: MemberCreate,
    service: MemberService = Depends(get_member_service),
) -> MemberRead:
    created = await service.create_member(payload)
    return MemberRead.model_validate(created)


# PUBLIC_INTERFACE
@router.get("/{member_id}", response_model=MemberRead, summary="Get member")
async def get_member(
    member_id: int = Path(...),
    service: MemberService = Depends(get_member_service),
) -> MemberRead:
    member = await service.get_member(member_id)
    return MemberRead.model_validate(member)


# PUBLIC_INTERFACE
@router.put("/{member_id}/team", response_model=MemberRead, summary="Change a member's team")
async def change_team(
    payload: MemberTeamChange,
    member_id: int = Path(...),
    service: MemberService = Depends(get_member_service),
) -> MemberRead:
    member = await service.change_team(member_id, payload.team_id)
    return MemberRead.model_validate(member)


# PUBLIC_INTERFACE
@router.post(
    "/bulk/rename",
    response_model=AffectedRows,
    summary="Bulk rename",
    description="Set username on every member younger than age_lt in one UPDATE.",
)
async def bulk_rename(
    payload: BulkRename,
    service: MemberService = Depends(get_member_service),
) -> AffectedRows:
    return AffectedRows(affected=await service.bulk_rename(payload.username, payload.age_lt))


# PUBLIC_INTERFACE
@router.post(
    "/bulk/age",
    response_model=AffectedRows,
    summary="Bulk age arithmetic",
    description="Add to or multiply the age of every member matching the condition in one UPDATE.",
)
async def bulk_age(
    payload: BulkAgeChange,
    service: MemberService = Depends(get_member_service),
) -> AffectedRows:
    return AffectedRows(affected=await service.bulk_change_age(payload))


# PUBLIC_INTERFACE
@router.post(
    "/bulk/delete",
    response_model=AffectedRows,
    summary="Bulk delete",
    description="Delete every member older than age_gt in one DELETE.",
)
async def bulk_delete(
    payload: BulkDelete,
    service: MemberService = Depends(get_member_service),
) -> AffectedRows:
    return AffectedRows(affected=await service.bulk_delete(payload.age_gt))
