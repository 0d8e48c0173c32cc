from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TeamRead(BaseModel):
    """Team read model."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Team ID")
    name: str = Field(..., description="Team name")


class TeamCreate(BaseModel):
    """Create team payload."""
    name: str = Field(..., min_length=1, description="Team name")


class TeamStats(BaseModel):
    """Age aggregates for one team."""
    model_config = ConfigDict(from_attributes=True)

    team_name: str
    member_count: int
    age_sum: int
    age_avg: float
    age_max: int
    age_min: int
