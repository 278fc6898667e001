"""Infrastructure provider accessors package."""

from .index_provider import (  # noqa: F401
    get_profile_index,
    get_skills_index,
    get_stats_index,
    reset_index_clients,
)
from .policy_provider import (  # noqa: F401
    get_rating_palette,
    get_visibility_policy,
    reset_policies,
)
from .store_provider import get_kv_store, reset_kv_store  # noqa: F401
from .verification_provider import (  # noqa: F401
    get_verification_service,
    reset_verification_service,
)


async def reset_all_providers() -> None:
    """Close pooled clients and drop every provider singleton."""
    await reset_verification_service()
    await reset_index_clients()
    await reset_kv_store()
    await reset_policies()


__all__ = [
    "get_profile_index",
    "get_skills_index",
    "get_stats_index",
    "reset_index_clients",
    "get_kv_store",
    "reset_kv_store",
    "get_verification_service",
    "reset_verification_service",
    "get_visibility_policy",
    "get_rating_palette",
    "reset_policies",
    "reset_all_providers",
]
