"""Member verification adapters for local and production environments."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import httpx
import structlog

from app.domain.exceptions import BackendUnavailableError
from app.domain.interfaces import IVerificationService

logger = structlog.get_logger(__name__)


class LocalVerificationService(IVerificationService):
    """Verification lookup backed by a fixed set of verified user ids."""

    def __init__(self, verified_user_ids: Optional[Iterable[Any]] = None):
        self._verified = {str(user_id) for user_id in verified_user_ids or ()}
        self._lookups = 0

    async def check_health(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "service": "LocalVerificationService",
            "verified_members": len(self._verified),
            "lookups": self._lookups,
        }

    async def is_verified(self, user_id: int) -> bool:
        self._lookups += 1
        return str(user_id) in self._verified

    def mark_verified(self, user_id: Any) -> None:
        self._verified.add(str(user_id))


class HttpVerificationService(IVerificationService):
    """Verification lookup against the external verification API.

    ``GET {base_url}/members/{userId}/verification`` answers
    ``{"verified": <bool>}``; a 404 means the member is not verified. Any
    other failure raises ``BackendUnavailableError``.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def check_health(self) -> Dict[str, Any]:
        return {
            "status": "healthy" if not self._client.is_closed else "closed",
            "service": "HttpVerificationService",
            "base_url": self.base_url,
        }

    async def close(self) -> None:
        await self._client.aclose()

    async def is_verified(self, user_id: int) -> bool:
        try:
            response = await self._client.get(f"/members/{user_id}/verification")
            if response.status_code == 404:
                return False
            response.raise_for_status()
            payload = response.json()

        except httpx.HTTPStatusError as e:
            logger.error(
                "Verification HTTP error",
                user_id=user_id,
                status_code=e.response.status_code,
                error=str(e),
            )
            raise BackendUnavailableError("verification", "is_verified", e) from e

        except httpx.RequestError as e:
            logger.error("Verification request error", user_id=user_id, error=str(e))
            raise BackendUnavailableError("verification", "is_verified", e) from e

        except ValueError as e:
            logger.error("Verification response is not JSON", user_id=user_id, error=str(e))
            raise BackendUnavailableError("verification", "is_verified", e) from e

        return bool(payload.get("verified", False)) if isinstance(payload, dict) else bool(payload)


__all__ = ["LocalVerificationService", "HttpVerificationService"]
