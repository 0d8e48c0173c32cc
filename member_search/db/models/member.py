from __future__ import annotations

from typing import Optional

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from member_search.db.base import Base, IntPkMixin


class Team(IntPkMixin, Base):
    """A named group of members."""
    __tablename__ = "teams"
    _repr_attrs = ("name",)

    name: Mapped[str] = mapped_column(Text, nullable=False, index=True)

    # lazy="raise" keeps association traversal out of per-row code paths;
    # queries join or eager-load explicitly.
    members: Mapped[list["Member"]] = relationship(
        "Member", back_populates="team", lazy="raise"
    )

class Member(IntPkMixin, Base):
    """A member, optionally assigned to a team."""
    __tablename__ = "members"
    _repr_attrs = ("username", "age", "team_id")

    username: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    age: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    team_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True, index=True
    )

    team: Mapped[Optional[Team]] = relationship(
        Team, back_populates="members", lazy="raise"
    )

    def change_team(self, team: Optional[Team]) -> None:
        """Move this member to ``team`` (or out of any team) keeping both sides in sync."""
        self.team = team
