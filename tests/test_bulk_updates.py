"""Tests for bulk UPDATE/DELETE statements."""

from member_search.repositories.member import MemberRepository
from member_search.schemas.member import MemberSearchCondition


async def _ages(repo: MemberRepository):
    return [m.age for m in await repo.find_all()]


async def test_bulk_rename_younger_members(member_repo: MemberRepository, statements):
    statements.clear()
    affected = await member_repo.bulk_rename("junior", age_lt=28)

    assert affected == 2
    assert [s for s in statements.statements if s.lstrip().upper().startswith("UPDATE")]
    renamed = await member_repo.find_by_username("junior")
    assert sorted(m.age for m in renamed) == [10, 20]


async def test_bulk_add_age_to_everyone(member_repo: MemberRepository):
    affected = await member_repo.bulk_add_age(1)

    assert affected == 4
    assert await _ages(member_repo) == [11, 21, 31, 41]


async def test_bulk_multiply_age_for_one_team(member_repo: MemberRepository):
    affected = await member_repo.bulk_multiply_age(3, MemberSearchCondition(team_name="teamA"))

    assert affected == 2
    assert await _ages(member_repo) == [30, 60, 30, 40]


async def test_bulk_add_age_with_range(member_repo: MemberRepository):
    affected = await member_repo.bulk_add_age(-5, MemberSearchCondition(age_goe=30))

    assert affected == 2
    assert await _ages(member_repo) == [10, 20, 25, 35]


async def test_bulk_delete_older_members(member_repo: MemberRepository):
    affected = await member_repo.bulk_delete(age_gt=30)

    assert affected == 1
    rows = await member_repo.search(MemberSearchCondition())
    assert [r.username for r in rows] == ["member1", "member2", "member3"]


async def test_loaded_entities_see_bulk_changes(member_repo: MemberRepository):
    member = (await member_repo.find_by_username("member1"))[0]
    assert member.age == 10

    await member_repo.bulk_add_age(100)

    # the held object is refreshed in place; no reload through the repository
    assert member.age == 110
    assert (await member_repo.get_member(member.id)) is member


async def test_loaded_entities_see_bulk_rename(member_repo: MemberRepository):
    member = (await member_repo.find_by_username("member2"))[0]

    await member_repo.bulk_rename("junior", age_lt=28)

    assert member.username == "junior"


async def test_bulk_delete_expunges_loaded_entities(member_repo: MemberRepository):
    oldest = (await member_repo.find_by_username("member4"))[0]
    kept = (await member_repo.find_by_username("member1"))[0]

    await member_repo.bulk_delete(age_gt=30)

    assert oldest not in member_repo.session
    assert kept in member_repo.session
    assert kept.age == 10


async def test_bulk_update_matching_nothing(member_repo: MemberRepository):
    affected = await member_repo.bulk_add_age(1, MemberSearchCondition(team_name="nobody"))
    assert affected == 0
    assert await _ages(member_repo) == [10, 20, 30, 40]
