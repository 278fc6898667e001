"""
Tests for StatisticsApplicationService

Testing:
- Member resolution by handle
- Statistics tier selection per caller
- History, distribution and skills lookups
- Partial skill update authorization and validation
"""

import json

import pytest

from app.api.schemas.member_schemas import DistributionQuery, SkillsQuery, StatisticsQuery
from app.application.dependencies.member_dependencies import StatisticsDependencies
from app.application.statistics_service import StatisticsApplicationService
from app.domain.exceptions import (
    InsufficientPermissionsError,
    MemberNotFoundError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from app.domain.value_objects import CallerIdentity
from tests.mocks.mock_repositories import MockKeyValueStore, MockProfileIndex, MockStatsIndex

ALICE = {"userId": 1001, "handle": "Alice", "handleLower": "alice"}
OWNER = CallerIdentity(subject="1001", user_id=1001, handle="Alice")
STRANGER = CallerIdentity(subject="2002", user_id=2002, handle="mallory")
ADMIN = CallerIdentity(subject="1", user_id=1, handle="root", roles=frozenset({"administrator"}))
MACHINE = CallerIdentity(subject="svc@clients", scopes=frozenset({"write:members"}), is_machine=True)


@pytest.fixture
def store():
    return MockKeyValueStore()


@pytest.fixture
def stats_index():
    return MockStatsIndex()


@pytest.fixture
def service(store, stats_index, visibility_policy, rating_palette):
    return StatisticsApplicationService(
        StatisticsDependencies(
            profile_index=MockProfileIndex([dict(ALICE)]),
            stats_index=stats_index,
            kv_store=store,
            visibility_policy=visibility_policy,
            rating_palette=rating_palette,
        )
    )


class TestMemberStats:
    """Test statistics lookups."""

    @pytest.mark.asyncio
    async def test_unknown_handle_raises_member_not_found(self, service, store):
        with pytest.raises(MemberNotFoundError):
            await service.get_member_stats(None, "nobody", StatisticsQuery())

        assert store.call_log == []

    @pytest.mark.asyncio
    async def test_anonymous_caller_reads_public_record(self, service, store):
        store.put("MemberStats", {"userId": 1001, "wins": 3, "maxRating": json.dumps({"rating": 1000})})

        records = await service.get_member_stats(None, "ALICE", StatisticsQuery())

        assert records == [{
            "userId": 1001,
            "groupId": 10,
            "wins": 3,
            "maxRating": {"rating": 1000, "ratingColor": "#69C329"},
        }]

    @pytest.mark.asyncio
    async def test_owner_reads_private_record(self, service, store):
        store.put("MemberStatsPrivate", {"userId": 1001, "groupId": 10, "wins": 7}, range_key=10)

        records = await service.get_member_stats(OWNER, "alice", StatisticsQuery())

        assert records[0]["wins"] == 7
        assert store.call_log == [("get_by_composite_key", "MemberStatsPrivate", 1001, 10)]

    @pytest.mark.asyncio
    async def test_other_member_reads_public_record(self, service, store):
        store.put("MemberStats", {"userId": 1001, "wins": 1})

        await service.get_member_stats(STRANGER, "alice", StatisticsQuery())

        assert store.call_log == [("get_by_key", "MemberStats", 1001)]

    @pytest.mark.asyncio
    async def test_group_ids_select_records_and_fields_project(self, service, stats_index):
        stats_index.set_found(1001, 20, {"userId": 1001, "groupId": 20, "wins": 2, "internal": True})

        records = await service.get_member_stats(
            None, "alice", StatisticsQuery.model_validate({"groupIds": "20,30", "fields": "groupId,wins"})
        )

        assert records == [{"groupId": 20, "wins": 2}]

    @pytest.mark.asyncio
    async def test_history_reads_history_tables(self, service, store):
        store.put("MemberHistoryStats", {"userId": 1001, "DEVELOP": json.dumps({"subTracks": []})})

        records = await service.get_history_stats(ADMIN, "alice", StatisticsQuery())

        assert records[0]["DEVELOP"] == {"subTracks": []}
        assert store.call_log == [("get_by_key", "MemberHistoryStats", 1001)]


class TestDistribution:
    """Test distribution lookups."""

    @pytest.mark.asyncio
    async def test_fields_are_projected(self, service, store):
        store.scan_results["MemberDistributionStats"] = [
            {"track": "DEVELOP", "subTrack": "CODE", "distribution": {"a": 1}},
        ]

        summary = await service.get_distribution(DistributionQuery.model_validate({"fields": "distribution"}))

        assert summary == {"distribution": {"a": 1}}


class TestMemberSkills:
    """Test skills lookups."""

    @pytest.mark.asyncio
    async def test_missing_entered_skills_raise_not_found(self, service):
        with pytest.raises(NotFoundError):
            await service.get_member_skills("alice", SkillsQuery())

    @pytest.mark.asyncio
    async def test_entered_and_aggregated_skills_are_merged(self, service, store):
        store.put("MemberEnteredSkills", {"userId": 1001, "skills": {"java": {"score": 1}}})
        store.put("MemberAggregatedSkills", {"userId": 1001, "skills": {"go": {"score": 4}}})

        record = await service.get_member_skills("alice", SkillsQuery.model_validate({"fields": "handle,skills"}))

        assert record["handle"] == "Alice"
        assert set(record["skills"]) == {"java", "go"}
        assert set(record) == {"handle", "skills"}


class TestUpdateMemberSkillsPartial:
    """Test partial skill updates."""

    @pytest.mark.asyncio
    async def test_anonymous_caller_is_unauthorized(self, service, store):
        with pytest.raises(UnauthorizedError):
            await service.update_member_skills_partial(None, "alice", {"java": {"score": 1}})

        assert store.call_log == []

    @pytest.mark.asyncio
    async def test_other_member_is_rejected(self, service, store):
        store.put("MemberEnteredSkills", {"userId": 1001, "skills": {}})

        with pytest.raises(InsufficientPermissionsError):
            await service.update_member_skills_partial(STRANGER, "alice", {"java": {"score": 1}})

        assert not [call for call in store.call_log if call[0] == "update"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"java": "expert"},
            {"java": {"level": 3}},
            {"java": {"score": -1}},
            {"java": {"score": "high"}},
        ],
    )
    async def test_malformed_data_is_rejected(self, service, data):
        with pytest.raises(ValidationError):
            await service.update_member_skills_partial(OWNER, "alice", data)

    @pytest.mark.asyncio
    async def test_missing_record_raises_not_found(self, service):
        with pytest.raises(NotFoundError):
            await service.update_member_skills_partial(OWNER, "alice", {"java": {"score": 1}})

    @pytest.mark.asyncio
    @pytest.mark.parametrize("caller", [OWNER, ADMIN, MACHINE])
    async def test_entries_are_shallow_assigned(self, service, store, caller):
        store.put(
            "MemberEnteredSkills",
            {"userId": 1001, "skills": json.dumps({"java": {"score": 1}, "go": {"score": 2}})},
        )

        result = await service.update_member_skills_partial(caller, "alice", {"java": {"hidden": True}})

        assert result["skills"] == {"java": {"hidden": True}, "go": {"score": 2}}
        assert result["updatedBy"] == caller.display_name
        assert result["updatedAt"]
        assert store.items[("MemberEnteredSkills", "1001")]["skills"]["java"] == {"hidden": True}
