from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from member_search.core.deps import get_member_service
from member_search.schemas.team import TeamCreate, TeamRead, TeamStats
from member_search.services.member import MemberService

router = APIRouter(prefix="/teams", tags=["Teams"])


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TeamRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create team",
)
async def create_team(
    payload: TeamCreate,
    service: MemberService = Depends(get_member_service),
) -> TeamRead:
    team = await service.create_team(payload.name)
    return TeamRead.model_validate(team)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TeamRead],
    summary="List teams",
    description="List all teams ordered by id.",
)
async def list_teams(service: MemberService = Depends(get_member_service)) -> List[TeamRead]:
    teams = await service.list_teams()
    return [TeamRead.model_validate(t) for t in teams]


# PUBLIC_INTERFACE
@router.get(
    "/stats",
    response_model=List[TeamStats],
    summary="Team age statistics",
    description="Member count and age sum/avg/max/min per team name. Teams without members are omitted.",
)
async def team_stats(service: MemberService = Depends(get_member_service)) -> List[TeamStats]:
    return await service.team_stats()
