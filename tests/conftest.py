"""Pytest configuration and fixtures."""

from typing import List

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from member_search.db.base import Base
from member_search.db.models import Member
from member_search.db.seed import seed_session
from member_search.db.session import make_session_maker
from member_search.repositories.member import MemberRepository
from member_search.repositories.team import TeamRepository


class StatementRecorder:
    """Collects the SQL text of every statement the engine sends to the driver."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.statements: List[str] = []
        event.listen(engine.sync_engine, "before_cursor_execute", self._record)

    def _record(self, conn, cursor, statement, parameters, context, executemany):
        self.statements.append(statement)

    def clear(self) -> None:
        self.statements.clear()

    @property
    def count_queries(self) -> List[str]:
        return [s for s in self.statements if "count(" in s.lower()]


@pytest.fixture
async def engine():
    """In-memory SQLite engine with the schema created from metadata."""
    # StaticPool keeps the single in-memory connection alive for the whole test
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def session(engine):
    """Session bound to the in-memory engine."""
    async with make_session_maker(engine)() as session:
        yield session


@pytest.fixture
async def roster(session: AsyncSession):
    """teamA = member1 (10), member2 (20); teamB = member3 (30), member4 (40)."""
    await seed_session(session)
    return session


@pytest.fixture
async def loner(roster: AsyncSession) -> Member:
    """A fifth member (age 25) who belongs to no team."""
    member = Member(username="loner", age=25)
    roster.add(member)
    await roster.commit()
    return member


@pytest.fixture
def statements(engine) -> StatementRecorder:
    """Records statements issued after the fixture is requested."""
    return StatementRecorder(engine)


@pytest.fixture
def member_repo(roster: AsyncSession) -> MemberRepository:
    return MemberRepository(roster)


@pytest.fixture
def team_repo(roster: AsyncSession) -> TeamRepository:
    return TeamRepository(roster)
