"""
Tests for the in-memory index and store adapters.
"""

import pytest

from app.domain.exceptions import ValidationError
from app.domain.lookup import Found, NotFound
from app.domain.value_objects import BooleanOperator
from app.infrastructure.adapters.memory_index_adapters import (
    InMemoryProfileIndex,
    InMemorySkillsIndex,
    InMemoryStatsIndex,
)
from app.infrastructure.adapters.memory_store_adapter import InMemoryKeyValueStore

PROFILES = [
    {"userId": 1, "handle": "Alice", "handleLower": "alice", "email": "alice@example.com", "description": "Java dev"},
    {"userId": 2, "handle": "alfred", "handleLower": "alfred", "email": "alfred@example.com"},
    {"userId": 3, "handle": "Bob", "handleLower": "bob", "firstName": "Robert"},
]


class TestInMemoryProfileIndex:
    """Test profile filtering."""

    def setup_method(self):
        self.index = InMemoryProfileIndex(PROFILES)

    @pytest.mark.asyncio
    async def test_structured_filters(self):
        by_handles = await self.index.query({"handlesLower": ["alice", "bob"]}, None, 1, 10)
        by_email = await self.index.query({"email": "ALFRED@example.com"}, None, 1, 10)
        by_ids = await self.index.query({"userIds": ["3", 1]}, None, 1, 10)

        assert [doc["userId"] for doc in by_handles.documents] == [1, 3]
        assert [doc["userId"] for doc in by_email.documents] == [2]
        assert [doc["userId"] for doc in by_ids.documents] == [1, 3]

    @pytest.mark.asyncio
    async def test_free_text_term(self):
        hits = await self.index.query({}, "robert", 1, 10)

        assert [doc["handle"] for doc in hits.documents] == ["Bob"]

    @pytest.mark.asyncio
    async def test_total_counts_all_matches_beyond_window(self):
        hits = await self.index.query({}, None, 2, 2)

        assert hits.total == 3
        assert [doc["userId"] for doc in hits.documents] == [3]

    @pytest.mark.asyncio
    async def test_returned_documents_are_copies(self):
        hits = await self.index.query({"userId": 1}, None, 1, 1)
        hits.documents[0]["handle"] = "changed"

        again = await self.index.query({"userId": 1}, None, 1, 1)

        assert again.documents[0]["handle"] == "Alice"

    @pytest.mark.asyncio
    async def test_suggest_limits_size(self):
        suggestions = await self.index.suggest("AL", 1)

        assert [doc["handle"] for doc in suggestions] == ["Alice"]


class TestInMemorySkillsIndex:
    """Test skill queries."""

    def setup_method(self):
        self.index = InMemorySkillsIndex([
            {"userId": 1, "handleLower": "alice", "skills": {"java": {}, "go": {}}},
            {"userId": 2, "handleLower": "bob", "skills": {"java": {}}},
        ])

    @pytest.mark.asyncio
    async def test_and_requires_every_skill(self):
        hits = await self.index.query_by_skill_ids(["java", "go"], BooleanOperator.AND, 1, 10)

        assert [doc["userId"] for doc in hits.documents] == [1]

    @pytest.mark.asyncio
    async def test_or_requires_any_skill(self):
        hits = await self.index.query_by_skill_ids(["go", "rust"], BooleanOperator.OR, 1, 10)

        assert [doc["userId"] for doc in hits.documents] == [1]

    @pytest.mark.asyncio
    async def test_query_by_handles(self):
        hits = await self.index.query_by_handles(["bob", "nobody"])

        assert hits.total == 1


class TestInMemoryStatsIndex:
    """Test statistics lookups."""

    def setup_method(self):
        self.index = InMemoryStatsIndex([
            {"userId": 1, "groupId": 10, "handleLower": "alice", "wins": 3},
            {"userId": 1, "groupId": 20, "handleLower": "alice", "wins": 1},
        ])

    @pytest.mark.asyncio
    async def test_handle_query_returns_default_group_only(self):
        hits = await self.index.query_by_handles(["alice"])

        assert [doc["groupId"] for doc in hits.documents] == [10]

    @pytest.mark.asyncio
    async def test_composite_key_lookup(self):
        found = await self.index.get_by_composite_key(1, 20)
        missing = await self.index.get_by_composite_key(1, 30)

        assert isinstance(found, Found)
        assert found.record["wins"] == 1
        assert missing == NotFound("1_30")


class TestInMemoryKeyValueStore:
    """Test key-value operations."""

    def setup_method(self):
        self.store = InMemoryKeyValueStore({
            "MemberStatsPrivate": ("userId", "groupId"),
            "MemberDistributionStats": ("track", "subTrack"),
        })

    @pytest.mark.asyncio
    async def test_hash_key_round_trip(self):
        await self.store.update("MemberStats", {"userId": 1001, "wins": 2})

        assert await self.store.get_by_key("MemberStats", "1001") == {"userId": 1001, "wins": 2}
        assert await self.store.get_by_key("MemberStats", 2002) is None

    @pytest.mark.asyncio
    async def test_composite_key_addresses_separate_items(self):
        await self.store.update("MemberStatsPrivate", {"userId": 1001, "groupId": 10, "wins": 2})
        await self.store.update("MemberStatsPrivate", {"userId": 1001, "groupId": 20, "wins": 5})

        item = await self.store.get_by_composite_key("MemberStatsPrivate", 1001, 20)

        assert item["wins"] == 5

    @pytest.mark.asyncio
    async def test_update_replaces_existing_item(self):
        await self.store.update("MemberEnteredSkills", {"userId": 1, "skills": {"a": {}}})
        await self.store.update("MemberEnteredSkills", {"userId": 1, "skills": {}})

        assert (await self.store.get_by_key("MemberEnteredSkills", 1))["skills"] == {}

    @pytest.mark.asyncio
    async def test_update_without_hash_key_is_rejected(self):
        with pytest.raises(ValidationError):
            await self.store.update("MemberStats", {"wins": 1})

    @pytest.mark.asyncio
    async def test_scan_contains_is_case_insensitive(self):
        await self.store.update("MemberDistributionStats", {"track": "DEVELOP", "subTrack": "CODE"})
        await self.store.update("MemberDistributionStats", {"track": "DESIGN", "subTrack": "WEB_DESIGNS"})

        items = await self.store.scan("MemberDistributionStats", {"track": {"CONTAINS": "dev"}})
        everything = await self.store.scan("MemberDistributionStats")

        assert [item["subTrack"] for item in items] == ["CODE"]
        assert len(everything) == 2

    @pytest.mark.asyncio
    async def test_scan_rejects_unknown_operator(self):
        with pytest.raises(ValidationError):
            await self.store.scan("MemberDistributionStats", {"track": {"BETWEEN": "a"}})
