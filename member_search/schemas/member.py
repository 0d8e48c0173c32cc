from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MemberSearchCondition(BaseModel):
    """
    Sparse search filters. Every field is optional; an absent field places no
    constraint on its dimension.
    """
    model_config = ConfigDict(frozen=True)

    username: Optional[str] = Field(None, description="Exact username match")
    team_name: Optional[str] = Field(None, description="Exact team name match")
    age_goe: Optional[int] = Field(None, description="Minimum age (inclusive)")
    age_loe: Optional[int] = Field(None, description="Maximum age (inclusive)")


class MemberTeamRead(BaseModel):
    """Flattened member + team row produced by the left-joined search query."""
    model_config = ConfigDict(frozen=True, from_attributes=True)

    member_id: int = Field(..., description="Member ID")
    username: str = Field(..., description="Member username")
    age: int = Field(..., description="Member age")
    team_id: Optional[int] = Field(None, description="Team ID, absent for members without a team")
    team_name: Optional[str] = Field(None, description="Team name, absent for members without a team")


class MemberRead(BaseModel):
    """Member read model."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Member ID")
    username: str = Field(..., description="Username")
    age: int = Field(..., description="Age")
    team_id: Optional[int] = Field(None, description="Team ID")


class MemberCreate(BaseModel):
    """Create member payload."""
    username: str = Field(..., min_length=1, description="Username")
    age: int = Field(0, ge=0, description="Age")
    team_id: Optional[int] = Field(None, description="Existing team to join")


class MemberTeamChange(BaseModel):
    """Move a member to another team, or out of any team with null."""
    team_id: Optional[int] = Field(None, description="Target team ID or null")


class BulkRename(BaseModel):
    """Rename every member younger than ``age_lt``."""
    username: str = Field(..., min_length=1, description="New username")
    age_lt: int = Field(..., description="Exclusive upper age bound")


class BulkAgeChange(BaseModel):
    """
    Arithmetic update of ``age`` for every member matching ``condition``.

    Exactly one of ``add`` or ``multiply`` must be given.
    """
    add: Optional[int] = Field(None, description="Amount added to age")
    multiply: Optional[int] = Field(None, description="Factor age is multiplied by")
    condition: MemberSearchCondition = Field(default_factory=MemberSearchCondition)

    @model_validator(mode="after")
    def _one_operation(self) -> "BulkAgeChange":
        if (self.add is None) == (self.multiply is None):
            raise ValueError("Exactly one of 'add' or 'multiply' must be provided")
        return self


class BulkDelete(BaseModel):
    """Delete every member older than ``age_gt``."""
    age_gt: int = Field(..., description="Exclusive lower age bound")
