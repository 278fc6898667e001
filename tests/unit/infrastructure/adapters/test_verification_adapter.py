"""
Tests for the verification adapters.
"""

import httpx
import pytest

from app.domain.exceptions import BackendUnavailableError
from app.infrastructure.adapters.verification_adapter import (
    HttpVerificationService,
    LocalVerificationService,
)


def make_service(handler, token=None):
    return HttpVerificationService(
        "https://verification.example.com/v5/",
        token=token,
        transport=httpx.MockTransport(handler),
    )


class TestHttpVerificationService:
    """Test the HTTP verification lookup."""

    @pytest.mark.asyncio
    async def test_verified_flag_is_read_from_payload(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"verified": True})

        service = make_service(handler, token="s3cret")
        try:
            assert await service.is_verified(1001) is True
        finally:
            await service.close()

        assert seen[0].url.path == "/v5/members/1001/verification"
        assert seen[0].headers["Authorization"] == "Bearer s3cret"

    @pytest.mark.asyncio
    async def test_not_found_means_unverified(self):
        service = make_service(lambda request: httpx.Response(404))
        try:
            assert await service.is_verified(1001) is False
        finally:
            await service.close()

    @pytest.mark.asyncio
    async def test_server_error_raises_backend_unavailable(self):
        service = make_service(lambda request: httpx.Response(500, text="boom"))
        try:
            with pytest.raises(BackendUnavailableError) as exc_info:
                await service.is_verified(1001)
        finally:
            await service.close()

        assert exc_info.value.backend == "verification"
        assert isinstance(exc_info.value.cause, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_transport_error_raises_backend_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        service = make_service(handler)
        try:
            with pytest.raises(BackendUnavailableError):
                await service.is_verified(1001)
        finally:
            await service.close()

    @pytest.mark.asyncio
    async def test_invalid_json_raises_backend_unavailable(self):
        service = make_service(lambda request: httpx.Response(200, text="not json"))
        try:
            with pytest.raises(BackendUnavailableError):
                await service.is_verified(1001)
        finally:
            await service.close()

    @pytest.mark.asyncio
    async def test_health_reports_closed_client(self):
        service = make_service(lambda request: httpx.Response(200, json={}))
        await service.close()

        health = await service.check_health()

        assert health["status"] == "closed"


class TestLocalVerificationService:
    """Test the local verification lookup."""

    @pytest.mark.asyncio
    async def test_ids_compare_as_strings(self):
        service = LocalVerificationService(["1001"])
        service.mark_verified(2002)

        assert await service.is_verified(1001) is True
        assert await service.is_verified("2002") is True
        assert await service.is_verified(3003) is False
        assert (await service.check_health())["lookups"] == 3
