"""
Repository layer for data access.

Repositories encapsulate SQLAlchemy statements for members and teams. Search
filters are composed in ``predicates``; paging and count strategies live in
``paging``.
"""
from __future__ import annotations

from .member import MemberRepository
from .paging import CountStrategy, Pager
from .team import TeamRepository

__all__ = ["MemberRepository", "TeamRepository", "Pager", "CountStrategy"]
