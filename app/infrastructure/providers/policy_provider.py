"""Providers for the configuration-driven domain policies."""

from __future__ import annotations

import asyncio
from typing import Optional

from app.core.config import get_settings
from app.domain.services.rating_palette import RatingPalette
from app.domain.services.visibility_policy import FieldVisibilityPolicy, RoleConfiguration

_visibility_policy: Optional[FieldVisibilityPolicy] = None
_rating_palette: Optional[RatingPalette] = None
_lock = asyncio.Lock()


async def get_visibility_policy() -> FieldVisibilityPolicy:
    """Return singleton field visibility policy built from settings."""
    global _visibility_policy

    if _visibility_policy is not None:
        return _visibility_policy

    async with _lock:
        if _visibility_policy is not None:
            return _visibility_policy

        settings = get_settings()
        _visibility_policy = FieldVisibilityPolicy(
            roles=RoleConfiguration.from_names(
                admin_roles=settings.get_admin_roles(),
                autocomplete_roles=settings.get_autocomplete_roles(),
                search_by_email_roles=settings.get_search_by_email_roles(),
            ),
            secure_fields=settings.get_member_secure_fields(),
            communication_fields=settings.get_communication_secure_fields(),
        )
        return _visibility_policy


async def get_rating_palette() -> RatingPalette:
    """Return singleton rating palette built from settings."""
    global _rating_palette

    if _rating_palette is not None:
        return _rating_palette

    async with _lock:
        if _rating_palette is not None:
            return _rating_palette

        settings = get_settings()
        _rating_palette = RatingPalette(
            thresholds=settings.get_rating_color_thresholds(),
            top_color=settings.RATING_COLOR_TOP,
        )
        return _rating_palette


async def reset_policies() -> None:
    global _visibility_policy, _rating_palette
    async with _lock:
        _visibility_policy = None
        _rating_palette = None


__all__ = ["get_visibility_policy", "get_rating_palette", "reset_policies"]
