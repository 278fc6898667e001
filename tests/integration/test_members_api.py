"""
Integration tests for the member HTTP endpoints.

The application services run against seeded in-memory backends and real
bearer tokens; only the service dependencies are overridden. Requests go
through the ASGI transport in-process.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.api.dependencies import get_member_search_service, get_statistics_service
from app.application.dependencies.member_dependencies import (
    MemberSearchDependencies,
    StatisticsDependencies,
)
from app.application.member_search_service import MemberSearchApplicationService
from app.application.statistics_service import StatisticsApplicationService
from app.core.config import get_settings
from app.domain.services.rating_palette import RatingPalette
from app.domain.services.visibility_policy import FieldVisibilityPolicy, RoleConfiguration
from app.infrastructure.adapters.verification_adapter import LocalVerificationService
from app.main import app
from app.utils.security import TokenManager
from tests.fixtures.member_fixtures import MemberTestBuilder, seed_backends

SECRET = "integration-secret-key-long-enough-for-hs256"


@pytest.fixture
def backends():
    members = [
        MemberTestBuilder(1001, "Alice").with_email("alice@example.com").with_name("Alice", "Smith")
        .with_skills("java", "python").with_stats(wins=4, challenges=10, rating=1600).build(),
        MemberTestBuilder(1002, "alfred").with_skills("java").with_stats(wins=9, challenges=12).build(),
        MemberTestBuilder(1003, "Bob").with_skills("go").build(),
    ]
    return seed_backends(members)


@pytest_asyncio.fixture
async def client(monkeypatch, backends):
    monkeypatch.setenv("SECRET_KEY", SECRET)
    get_settings.cache_clear()

    policy = FieldVisibilityPolicy(
        roles=RoleConfiguration.from_names(["administrator"], ["copilot", "administrator"], ["administrator"]),
        secure_fields=("firstName", "lastName", "email"),
        communication_fields=("email",),
    )
    palette = RatingPalette(
        thresholds=[(900, "#9D9FA0"), (1200, "#69C329"), (1500, "#616BD5"), (2200, "#FCD617")],
        top_color="#EF3A3A",
    )
    search_service = MemberSearchApplicationService(
        MemberSearchDependencies(
            profile_index=backends["profile_index"],
            skills_index=backends["skills_index"],
            stats_index=backends["stats_index"],
            verification_service=LocalVerificationService([1001]),
            visibility_policy=policy,
            rating_palette=palette,
        )
    )
    statistics_service = StatisticsApplicationService(
        StatisticsDependencies(
            profile_index=backends["profile_index"],
            stats_index=backends["stats_index"],
            kv_store=backends["kv_store"],
            visibility_policy=policy,
            rating_palette=palette,
        )
    )

    app.dependency_overrides[get_member_search_service] = lambda: search_service
    app.dependency_overrides[get_statistics_service] = lambda: statistics_service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()
    get_settings.cache_clear()


def bearer(**claims):
    token = TokenManager().create_access_token(**claims)
    return {"Authorization": f"Bearer {token}"}


class TestSearchEndpoints:
    """Test search, skills search and autocomplete over HTTP."""

    async def test_search_returns_merged_members(self, client):
        response = await client.get("/api/v1/members", params={"handleLower": "alice"})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["perPage"] == 50
        alice = body["result"][0]
        assert alice["handle"] == "Alice"
        assert alice["verified"] is True
        assert alice["maxRating"]["ratingColor"] == "#FCD617"
        assert alice["numberOfChallengesWon"] == 4
        assert "email" not in alice

    async def test_email_search_without_token_is_unauthorized(self, client):
        response = await client.get("/api/v1/members", params={"email": "alice@example.com"})

        assert response.status_code == 401

    async def test_email_search_without_role_is_bad_request(self, client):
        headers = bearer(subject="1002", roles=["Topcoder User"], handle="alfred", user_id=1002)

        response = await client.get("/api/v1/members", params={"email": "alice@example.com"}, headers=headers)

        assert response.status_code == 400

    async def test_email_search_with_admin_token(self, client):
        headers = bearer(subject="1", roles=["administrator"], handle="root", user_id=1)

        response = await client.get("/api/v1/members", params={"email": "alice@example.com"}, headers=headers)

        assert response.status_code == 200
        assert response.json()["result"][0]["email"] == "alice@example.com"

    async def test_invalid_sort_field_is_bad_request(self, client):
        response = await client.get("/api/v1/members", params={"sortBy": "password"})

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "invalid_request"

    async def test_per_page_above_limit_is_bad_request(self, client):
        response = await client.get("/api/v1/members", params={"perPage": "101"})

        assert response.status_code == 400

    async def test_skills_search_orders_by_wins(self, client):
        response = await client.get("/api/v1/members/search/skills", params=[("skillId", "java")])

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert body["numberOfPages"] == 1
        assert [member["handle"] for member in body["result"]] == ["alfred", "Alice"]

    async def test_skills_search_without_skills_is_empty(self, client):
        response = await client.get("/api/v1/members/search/skills")

        assert response.json() == {"total": 0, "page": 1, "perPage": 50, "result": [], "numberOfPages": 0}

    async def test_autocomplete_prefix(self, client):
        response = await client.get("/api/v1/members/autocomplete", params={"term": "al"})

        body = response.json()
        assert body["total"] == 2
        assert [item["handle"] for item in body["result"]] == ["alfred", "Alice"]

    async def test_autocomplete_ignores_sort_order(self, client):
        response = await client.get("/api/v1/members/autocomplete", params={"term": "al", "sortOrder": "asc"})

        assert response.status_code == 200
        assert [item["handle"] for item in response.json()["result"]] == ["alfred", "Alice"]


class TestStatisticsEndpoints:
    """Test statistics and skills endpoints over HTTP."""

    async def test_unknown_member_is_not_found(self, client):
        response = await client.get("/api/v1/members/nobody/stats")

        assert response.status_code == 404

    async def test_stats_are_read_from_the_index(self, client):
        response = await client.get("/api/v1/members/ALICE/stats")

        assert response.status_code == 200
        records = response.json()
        assert records[0]["groupId"] == 10
        assert records[0]["maxRating"]["ratingColor"] == "#FCD617"

    async def test_invalid_group_ids_are_bad_request(self, client):
        response = await client.get("/api/v1/members/alice/stats", params={"groupIds": "10,abc"})

        assert response.status_code == 400

    async def test_distribution_without_records_is_not_found(self, client):
        response = await client.get("/api/v1/members/stats/distribution", params={"track": "develop"})

        assert response.status_code == 404

    async def test_distribution_sums_records(self, client, backends):
        store = backends["kv_store"]
        await store.update("MemberDistributionStats", {"track": "DEVELOP", "subTrack": "CODE", "distribution": {"a": 1}})
        await store.update("MemberDistributionStats", {"track": "DEVELOP", "subTrack": "F2F", "distribution": {"a": 2}})

        response = await client.get("/api/v1/members/stats/distribution", params={"track": "develop"})

        assert response.status_code == 200
        assert response.json()["distribution"] == {"a": 3}

    async def test_skills_update_requires_token(self, client):
        response = await client.patch("/api/v1/members/alice/skills", json={"java": {"score": 2}})

        assert response.status_code == 401

    async def test_skills_update_rejects_unknown_attributes(self, client):
        headers = bearer(subject="1001", roles=["Topcoder User"], handle="Alice", user_id=1001)

        response = await client.patch("/api/v1/members/alice/skills", json={"java": {"level": 2}}, headers=headers)

        assert response.status_code == 400

    async def test_owner_updates_and_reads_skills(self, client, backends):
        await backends["kv_store"].update("MemberEnteredSkills", {"userId": 1001, "skills": {"java": {"score": 1}}})
        headers = bearer(subject="1001", roles=["Topcoder User"], handle="Alice", user_id=1001)

        updated = await client.patch("/api/v1/members/alice/skills", json={"go": {"score": 3}}, headers=headers)
        read = await client.get("/api/v1/members/alice/skills")

        assert updated.status_code == 200
        assert updated.json()["updatedBy"] == "Alice"
        assert set(read.json()["skills"]) == {"java", "go"}

    async def test_other_member_cannot_update_skills(self, client):
        headers = bearer(subject="1002", roles=["Topcoder User"], handle="alfred", user_id=1002)

        response = await client.patch("/api/v1/members/alice/skills", json={"go": {"score": 3}}, headers=headers)

        assert response.status_code == 400


class TestHealth:
    """Test health endpoints."""

    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
