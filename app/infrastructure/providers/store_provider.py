"""Key-value store provider."""

from __future__ import annotations

import asyncio
from typing import Optional

from app.core.config import get_settings
from app.domain.interfaces import IKeyValueStore
from app.infrastructure.adapters.memory_store_adapter import InMemoryKeyValueStore

_kv_store: Optional[IKeyValueStore] = None
_lock = asyncio.Lock()


async def get_kv_store() -> IKeyValueStore:
    global _kv_store

    if _kv_store is not None:
        return _kv_store

    async with _lock:
        if _kv_store is not None:
            return _kv_store

        settings = get_settings()
        _kv_store = InMemoryKeyValueStore(
            key_schemas={
                settings.MEMBER_STATS_TABLE: ("userId", None),
                settings.MEMBER_STATS_PRIVATE_TABLE: ("userId", "groupId"),
                settings.MEMBER_HISTORY_STATS_TABLE: ("userId", None),
                settings.MEMBER_HISTORY_STATS_PRIVATE_TABLE: ("userId", "groupId"),
                settings.MEMBER_DISTRIBUTION_STATS_TABLE: ("track", "subTrack"),
                settings.MEMBER_ENTERED_SKILLS_TABLE: ("userId", None),
                settings.MEMBER_AGGREGATED_SKILLS_TABLE: ("userId", None),
            }
        )
        return _kv_store


async def reset_kv_store() -> None:
    global _kv_store
    async with _lock:
        if _kv_store is not None:
            await _kv_store.close()
        _kv_store = None


__all__ = ["get_kv_store", "reset_kv_store"]
