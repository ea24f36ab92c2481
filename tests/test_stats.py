import pytest
from unittest.mock import patch
from httpx import AsyncClient, ASGITransport
from pydantic import SecretStr

from conftest import make_handle
from wwah_search.api.dependencies import get_accessor, get_stats_service
from wwah_search.core.errors import ConnectivityError
from wwah_search.domains import Domain, all_domains
from wwah_search.main import app
from wwah_search.search.stats import StatsService


@pytest.fixture
def stats_service(handle_accessor):
    handle_accessor.handles.update(
        {
            "countries": make_handle(count=10),
            "universities": make_handle(count=20),
            "courses": make_handle(count=30),
            "scholarships": make_handle(error=ConnectivityError("down")),
            "expenses": make_handle(count=5),
        }
    )
    return StatsService(handle_accessor)


@pytest.fixture
def override_stats(stats_service, accessor):
    app.dependency_overrides[get_stats_service] = lambda: stats_service
    app.dependency_overrides[get_accessor] = lambda: accessor
    yield
    app.dependency_overrides = {}


@pytest.fixture
async def async_client(override_stats):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def admin_key():
    with patch("wwah_search.config.settings.admin_api_key", SecretStr("secret")):
        yield "secret"


# ---------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------

@pytest.mark.asyncio
async def test_domain_stats_snapshot(stats_service):
    stats = await stats_service.get_domain_stats(Domain.COURSES)

    assert stats.total_documents == 30
    assert stats.domain is Domain.COURSES
    assert stats.collection_name == "course_embeddings"
    assert stats.searchable_fields == ["title", "country", "degree", "subject", "university"]
    assert stats.available is True


@pytest.mark.asyncio
async def test_failed_count_defaults_to_zero(stats_service):
    stats = await stats_service.get_domain_stats("scholarships")

    assert stats.total_documents == 0
    assert stats.available is False


@pytest.mark.asyncio
async def test_aggregate_isolates_failures(stats_service):
    aggregate = await stats_service.get_all_domain_stats()

    assert aggregate.total_documents == 65
    assert [s.domain for s in aggregate.domain_stats] == list(all_domains())
    assert [s.available for s in aggregate.domain_stats] == [True, True, True, False, True]
    assert aggregate.last_updated.tzinfo is not None


# ---------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------

@pytest.mark.asyncio
async def test_admin_endpoints_are_secured(async_client):
    """Stats and cache endpoints need the admin key."""

    # 1. No key configured -> 403
    resp = await async_client.get("/stats/domains")
    assert resp.status_code == 403

    # 2. Wrong key -> 403
    with patch("wwah_search.config.settings.admin_api_key", SecretStr("secret")):
        resp = await async_client.get("/stats/domains", params={"key": "wrong"})
        assert resp.status_code == 403

        resp = await async_client.post("/stats/cache/clear", json={"scope": "all"})
        assert resp.status_code == 403


@pytest.mark.asyncio
async def test_all_domain_stats_route(async_client, admin_key):
    resp = await async_client.get("/stats/domains", headers={"x-admin-key": admin_key})

    assert resp.status_code == 200
    data = resp.json()
    assert data["total_documents"] == 65
    assert len(data["domain_stats"]) == 5
    scholarships = next(s for s in data["domain_stats"] if s["domain"] == "scholarships")
    assert scholarships["available"] is False


@pytest.mark.asyncio
async def test_single_domain_stats_route(async_client, admin_key):
    resp = await async_client.get("/stats/domains/universities", params={"key": admin_key})

    assert resp.status_code == 200
    assert resp.json()["total_documents"] == 20

    resp = await async_client.get("/stats/domains/planets", params={"key": admin_key})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_cache_clear_route(async_client, admin_key, accessor):
    await accessor.get_domain_handle(Domain.COURSES)
    await accessor.get_domain_handle(Domain.COUNTRIES)
    await accessor.get_user_handle("u-1")
    headers = {"x-admin-key": admin_key}

    resp = await async_client.post(
        "/stats/cache/clear", json={"scope": "domain", "domain": "courses"}, headers=headers
    )
    assert resp.status_code == 200
    assert resp.json() == {"status": "cleared", "scope": "domain", "removed": 1, "remaining": 2}

    resp = await async_client.post("/stats/cache/clear", json={"scope": "user"}, headers=headers)
    assert resp.json()["removed"] == 1

    resp = await async_client.post("/stats/cache/clear", json={"scope": "all"}, headers=headers)
    assert resp.json() == {"status": "cleared", "scope": "all", "removed": 1, "remaining": 0}


@pytest.mark.asyncio
async def test_cache_clear_rejects_mismatched_arguments(async_client, admin_key):
    resp = await async_client.post(
        "/stats/cache/clear",
        json={"scope": "all", "domain": "courses"},
        headers={"x-admin-key": admin_key},
    )
    assert resp.status_code == 422
