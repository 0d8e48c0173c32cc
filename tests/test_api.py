"""HTTP tests for the FastAPI application over an in-process ASGI transport."""

import json

import httpx
import pytest

from member_search.api.generate_openapi import main as generate_openapi
from member_search.api.main import app
from member_search.core.deps import get_member_service
from member_search.core.errors import StoreUnavailable
from member_search.db.session import get_async_session


@pytest.fixture
async def client(roster):
    async def _session_override():
        yield roster

    app.dependency_overrides[get_async_session] = _session_override
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def test_health(client: httpx.AsyncClient):
    r = await client.get("/api/v1/health")
    assert r.status_code == 200
    assert r.json()["message"] == "Healthy"


async def test_search_by_team(client: httpx.AsyncClient):
    r = await client.get("/api/v1/members/search", params={"team_name": "teamB"})
    assert r.status_code == 200
    body = r.json()
    assert [row["age"] for row in body] == [30, 40]
    assert {row["team_name"] for row in body} == {"teamB"}


async def test_search_sorted(client: httpx.AsyncClient):
    r = await client.get("/api/v1/members/search", params={"sort": "age,desc"})
    assert r.status_code == 200
    assert [row["age"] for row in r.json()] == [40, 30, 20, 10]


async def test_search_page_optimized(client: httpx.AsyncClient):
    r = await client.get(
        "/api/v1/members/search/page",
        params={"limit": 3, "count_strategy": "optimized"},
    )
    assert r.status_code == 200
    body = r.json()
    assert len(body["content"]) == 3
    assert body["total_elements"] == 4
    assert body["metadata"]["total_pages"] == 2
    assert body["metadata"]["has_next"] is True


async def test_entity_page(client: httpx.AsyncClient):
    r = await client.get("/api/v1/members/page", params={"age_goe": 20, "limit": 2, "offset": 2})
    assert r.status_code == 200
    body = r.json()
    assert [m["username"] for m in body["content"]] == ["member4"]
    assert body["total_elements"] == 3


async def test_zero_limit_is_a_bad_request(client: httpx.AsyncClient):
    r = await client.get("/api/v1/members/search/page", params={"limit": 0})
    assert r.status_code == 400
    assert r.json()["error"]["type"] == "invalid_page_request"


async def test_negative_offset_is_a_bad_request(client: httpx.AsyncClient):
    r = await client.get("/api/v1/members/search/page", params={"offset": -1, "limit": 5})
    assert r.status_code == 400
    assert r.json()["error"]["type"] == "invalid_page_request"


async def test_unknown_sort_field(client: httpx.AsyncClient):
    r = await client.get("/api/v1/members/search", params={"sort": "nickname"})
    assert r.status_code == 400
    body = r.json()
    assert body["error"]["type"] == "query_error"
    assert "nickname" in body["error"]["message"]


async def test_bad_sort_direction(client: httpx.AsyncClient):
    r = await client.get("/api/v1/members/search", params={"sort": "age,sideways"})
    assert r.status_code == 400
    assert r.json()["error"]["type"] == "invalid_page_request"


async def test_create_team_and_member(client: httpx.AsyncClient):
    r = await client.post("/api/v1/teams", json={"name": "teamC"})
    assert r.status_code == 201
    team_id = r.json()["id"]

    r = await client.post("/api/v1/members", json={"username": "member5", "age": 50, "team_id": team_id})
    assert r.status_code == 201
    member = r.json()
    assert member["team_id"] == team_id

    r = await client.get(f"/api/v1/members/{member['id']}")
    assert r.status_code == 200
    assert r.json()["username"] == "member5"


async def test_create_member_in_missing_team(client: httpx.AsyncClient):
    r = await client.post("/api/v1/members", json={"username": "ghost", "team_id": 999})
    assert r.status_code == 404
    assert r.json()["error"]["type"] == "not_found"


async def test_missing_member(client: httpx.AsyncClient):
    r = await client.get("/api/v1/members/999")
    assert r.status_code == 404
    assert r.json()["error"]["type"] == "not_found"


async def test_change_team(client: httpx.AsyncClient):
    teams = (await client.get("/api/v1/teams")).json()
    team_b = next(t for t in teams if t["name"] == "teamB")
    member1 = (await client.get("/api/v1/members/search", params={"username": "member1"})).json()[0]

    r = await client.put(f"/api/v1/members/{member1['member_id']}/team", json={"team_id": team_b["id"]})
    assert r.status_code == 200
    assert r.json()["team_id"] == team_b["id"]


async def test_team_stats(client: httpx.AsyncClient):
    r = await client.get("/api/v1/teams/stats")
    assert r.status_code == 200
    stats = {s["team_name"]: s for s in r.json()}
    assert stats["teamA"]["age_sum"] == 30
    assert stats["teamB"]["member_count"] == 2


async def test_bulk_endpoints(client: httpx.AsyncClient):
    r = await client.post("/api/v1/members/bulk/age", json={"add": 1})
    assert r.status_code == 200
    assert r.json() == {"affected": 4}

    r = await client.post(
        "/api/v1/members/bulk/age",
        json={"multiply": 2, "condition": {"team_name": "teamA"}},
    )
    assert r.json() == {"affected": 2}

    r = await client.post("/api/v1/members/bulk/rename", json={"username": "junior", "age_lt": 35})
    assert r.json() == {"affected": 2}

    r = await client.post("/api/v1/members/bulk/delete", json={"age_gt": 41})
    assert r.json() == {"affected": 1}

    ages = [row["age"] for row in (await client.get("/api/v1/members/search")).json()]
    assert ages == [22, 31, 41]


async def test_bulk_age_needs_exactly_one_operation(client: httpx.AsyncClient):
    r = await client.post("/api/v1/members/bulk/age", json={"add": 1, "multiply": 2})
    assert r.status_code == 422
    assert r.json()["error"]["type"] == "validation_error"

    r = await client.post("/api/v1/members/bulk/age", json={})
    assert r.status_code == 422


async def test_correlation_id_is_echoed(client: httpx.AsyncClient):
    r = await client.get("/api/v1/members/999", headers={"X-Correlation-ID": "abc-123"})
    assert r.headers["X-Correlation-ID"] == "abc-123"
    assert r.json()["correlation_id"] == "abc-123"

    r = await client.get("/api/v1/health")
    assert r.headers["X-Correlation-ID"]


async def test_store_unavailable_maps_to_503(client: httpx.AsyncClient):
    class _DownService:
        async def search(self, condition, sort=()):
            raise StoreUnavailable("Database unavailable: connection refused")

    app.dependency_overrides[get_member_service] = lambda: _DownService()
    r = await client.get("/api/v1/members/search")
    assert r.status_code == 503
    assert r.json()["error"]["type"] == "store_unavailable"


def test_generate_openapi(tmp_path):
    path = generate_openapi(str(tmp_path))
    with open(path) as f:
        schema = json.load(f)
    assert "/api/v1/members/search/page" in schema["paths"]
    assert "/api/v1/teams/stats" in schema["paths"]


def test_unpaged_search_takes_no_window_parameters():
    operation = app.openapi()["paths"]["/api/v1/members/search"]["get"]
    names = {p["name"] for p in operation["parameters"]}
    assert {"username", "team_name", "age_goe", "age_loe", "sort"} <= names
    assert not names & {"offset", "limit"}

    paged = app.openapi()["paths"]["/api/v1/members/search/page"]["get"]
    assert {"offset", "limit", "sort"} <= {p["name"] for p in paged["parameters"]}
