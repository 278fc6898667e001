"""Pytest fixtures for provider-based architecture."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest

from app.core.config import get_settings
from app.infrastructure.providers import reset_all_providers


@pytest.fixture(autouse=True)
async def reset_provider_state() -> AsyncIterator[None]:
    """Ensure each test starts with clean provider singletons."""
    await reset_all_providers()
    yield
    await reset_all_providers()


@pytest.fixture
def settings():
    """Provide fresh settings, re-read after environment patches."""
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def rating_palette():
    from app.domain.services.rating_palette import RatingPalette

    return RatingPalette(
        thresholds=[(900, "#9D9FA0"), (1200, "#69C329"), (1500, "#616BD5"), (2200, "#FCD617")],
        top_color="#EF3A3A",
    )


@pytest.fixture
def visibility_policy():
    from app.domain.services.visibility_policy import FieldVisibilityPolicy, RoleConfiguration

    return FieldVisibilityPolicy(
        roles=RoleConfiguration.from_names(
            admin_roles=["administrator"],
            autocomplete_roles=["copilot", "administrator"],
            search_by_email_roles=["administrator"],
        ),
        secure_fields=("firstName", "lastName", "email", "addresses"),
        communication_fields=("email",),
    )
