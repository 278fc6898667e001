"""
Tests for VerificationEnricher
"""

import asyncio

import pytest

from app.application.search.verification_enricher import VerificationEnricher
from app.domain.exceptions import BackendUnavailableError
from app.domain.interfaces import IVerificationService
from tests.mocks.mock_repositories import MockVerificationService


class SlowVerificationService(IVerificationService):
    """Tracks the peak number of concurrent lookups."""

    def __init__(self):
        self.active = 0
        self.peak = 0

    async def check_health(self):
        return {"status": "healthy"}

    async def is_verified(self, user_id: int) -> bool:
        self.active += 1
        self.peak = max(self.peak, self.active)
        await asyncio.sleep(0.01)
        self.active -= 1
        return user_id % 2 == 0


class TestVerificationEnricher:
    """Test verification annotation."""

    @pytest.mark.asyncio
    async def test_every_member_is_annotated(self):
        service = MockVerificationService(verified=[1, 3])
        members = [{"userId": 1}, {"userId": 2}, {"userId": 3}]

        await VerificationEnricher(service).annotate(members)

        assert [member["verified"] for member in members] == [True, False, True]
        assert len(service.call_log) == 3

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self):
        service = SlowVerificationService()
        members = [{"userId": i} for i in range(12)]

        await VerificationEnricher(service, max_concurrency=3).annotate(members)

        assert service.peak <= 3
        assert [member["verified"] for member in members] == [i % 2 == 0 for i in range(12)]

    @pytest.mark.asyncio
    async def test_failed_lookup_fails_closed_and_raises(self):
        service = MockVerificationService(verified=[1, 2], failing=[2])
        members = [{"userId": 1}, {"userId": 2}, {"userId": 3}]

        with pytest.raises(BackendUnavailableError) as exc_info:
            await VerificationEnricher(service).annotate(members)

        assert exc_info.value.backend == "verification"
        assert members[0]["verified"] is True
        assert members[1]["verified"] is False
        assert members[2]["verified"] is False
        assert len(service.call_log) == 3

    @pytest.mark.asyncio
    async def test_empty_batch_makes_no_calls(self):
        service = MockVerificationService()

        assert await VerificationEnricher(service).annotate([]) == []
        assert service.call_log == []

    def test_concurrency_must_be_positive(self):
        with pytest.raises(ValueError):
            VerificationEnricher(MockVerificationService(), max_concurrency=0)
