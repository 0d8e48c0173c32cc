"""
Search predicate composition.

Each fragment function maps one optional filter value onto a SQLAlchemy boolean
clause, or ``None`` when the value is absent. ``combine`` drops the ``None``
fragments and folds the rest with AND, so an empty condition yields ``true()``.
"""
from __future__ import annotations

from functools import reduce
from typing import Iterable, Optional

from sqlalchemy import ColumnElement, and_, select, true

from member_search.db.models import Member, Team
from member_search.schemas.member import MemberSearchCondition

Predicate = ColumnElement[bool]


def _has_text(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def username_eq(username: Optional[str]) -> Optional[Predicate]:
    return Member.username == username if _has_text(username) else None


def team_name_eq(team_name: Optional[str]) -> Optional[Predicate]:
    """Compare against the joined team; requires Team in the FROM clause."""
    return Team.name == team_name if _has_text(team_name) else None


def team_name_in(team_name: Optional[str]) -> Optional[Predicate]:
    """Team filter as a subquery on Member.team_id, for statements that cannot join."""
    if not _has_text(team_name):
        return None
    return Member.team_id.in_(select(Team.id).where(Team.name == team_name))


def age_goe(age: Optional[int]) -> Optional[Predicate]:
    return Member.age >= age if age is not None else None


def age_loe(age: Optional[int]) -> Optional[Predicate]:
    return Member.age <= age if age is not None else None


def age_between(goe: Optional[int], loe: Optional[int]) -> Predicate:
    return combine([age_goe(goe), age_loe(loe)])


# PUBLIC_INTERFACE
def combine(fragments: Iterable[Optional[Predicate]]) -> Predicate:
    """AND together the present fragments in order; no fragments means match everything."""
    present = [f for f in fragments if f is not None]
    return reduce(and_, present, true())


# PUBLIC_INTERFACE
def build_search_predicate(condition: MemberSearchCondition) -> Predicate:
    """
    Build the WHERE clause for a member search.

    Fragment order is fixed (username, team name, age lower bound, age upper bound)
    so the rendered SQL is stable. Team name is matched against the joined Team,
    so the statement must left-join Member.team.
    """
    return combine(
        [
            username_eq(condition.username),
            team_name_eq(condition.team_name),
            age_goe(condition.age_goe),
            age_loe(condition.age_loe),
        ]
    )


# PUBLIC_INTERFACE
def build_member_predicate(condition: MemberSearchCondition) -> Predicate:
    """
    Same filters as build_search_predicate, but expressed on the members table
    alone, for UPDATE and DELETE statements.
    """
    return combine(
        [
            username_eq(condition.username),
            team_name_in(condition.team_name),
            age_goe(condition.age_goe),
            age_loe(condition.age_loe),
        ]
    )
