"""Verification service provider."""

from __future__ import annotations

import asyncio
from typing import Optional

import structlog

from app.core.config import get_settings
from app.domain.interfaces import IVerificationService
from app.infrastructure.adapters.verification_adapter import (
    HttpVerificationService,
    LocalVerificationService,
)

logger = structlog.get_logger(__name__)

_verification_service: Optional[IVerificationService] = None
_lock = asyncio.Lock()


async def get_verification_service() -> IVerificationService:
    global _verification_service

    if _verification_service is not None:
        return _verification_service

    async with _lock:
        if _verification_service is not None:
            return _verification_service

        settings = get_settings()
        if settings.is_verification_configured():
            _verification_service = HttpVerificationService(
                base_url=settings.VERIFICATION_API_URL,
                token=settings.VERIFICATION_API_TOKEN,
                timeout=settings.VERIFICATION_TIMEOUT_SECONDS,
            )
        else:
            if settings.is_production():
                logger.warning("Verification API not configured, every member reads as unverified")
            _verification_service = LocalVerificationService()

        logger.info("Verification service initialized", backend=type(_verification_service).__name__)
        return _verification_service


async def reset_verification_service() -> None:
    global _verification_service
    async with _lock:
        if _verification_service is not None:
            await _verification_service.close()
        _verification_service = None


__all__ = ["get_verification_service", "reset_verification_service"]
