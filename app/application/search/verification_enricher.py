"""Annotates merged members with the external verification flag."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Sequence

import structlog

from app.domain.exceptions import BackendUnavailableError
from app.domain.interfaces import IVerificationService

logger = structlog.get_logger(__name__)


class VerificationEnricher:
    """Sets ``verified`` on every member with bounded-concurrency lookups.

    Lookups fail closed: a member whose lookup fails is marked unverified and,
    once every lookup has settled, the batch raises ``BackendUnavailableError``
    so the failure is never reported as a plain "not verified".
    """

    def __init__(self, verification_service: IVerificationService, max_concurrency: int = 10):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.verification_service = verification_service
        self.max_concurrency = max_concurrency

    async def annotate(self, members: Sequence[Dict[str, Any]]) -> Sequence[Dict[str, Any]]:
        if not members:
            return members

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _verify(member: Dict[str, Any]) -> bool:
            async with semaphore:
                return await self.verification_service.is_verified(member.get("userId"))

        outcomes = await asyncio.gather(
            *(_verify(member) for member in members),
            return_exceptions=True,
        )

        failures: List[BaseException] = []
        for member, outcome in zip(members, outcomes):
            if isinstance(outcome, BaseException):
                member["verified"] = False
                failures.append(outcome)
                logger.warning(
                    "Member verification lookup failed",
                    user_id=member.get("userId"),
                    error=str(outcome),
                )
            else:
                member["verified"] = bool(outcome)

        if failures:
            logger.error(
                "Verification enrichment incomplete",
                failed=len(failures),
                members=len(members),
            )
            first = failures[0]
            raise BackendUnavailableError(
                "verification",
                "is_verified",
                first if isinstance(first, Exception) else None,
            )

        return members


__all__ = ["VerificationEnricher"]
