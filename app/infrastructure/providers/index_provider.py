"""Providers for the member search indexes."""

from __future__ import annotations

import asyncio
from typing import Optional

import structlog

from app.domain.interfaces import IProfileIndex, ISkillsIndex, IStatsIndex
from app.infrastructure.adapters.memory_index_adapters import (
    InMemoryProfileIndex,
    InMemorySkillsIndex,
    InMemoryStatsIndex,
)

logger = structlog.get_logger(__name__)

_profile_index: Optional[IProfileIndex] = None
_skills_index: Optional[ISkillsIndex] = None
_stats_index: Optional[IStatsIndex] = None

_profile_lock = asyncio.Lock()
_skills_lock = asyncio.Lock()
_stats_lock = asyncio.Lock()


async def get_profile_index() -> IProfileIndex:
    """Return singleton profile index client."""
    global _profile_index

    if _profile_index is not None:
        return _profile_index

    async with _profile_lock:
        if _profile_index is not None:
            return _profile_index

        _profile_index = InMemoryProfileIndex()
        logger.info("Profile index initialized", backend=type(_profile_index).__name__)
        return _profile_index


async def get_skills_index() -> ISkillsIndex:
    """Return singleton skills index client."""
    global _skills_index

    if _skills_index is not None:
        return _skills_index

    async with _skills_lock:
        if _skills_index is not None:
            return _skills_index

        _skills_index = InMemorySkillsIndex()
        logger.info("Skills index initialized", backend=type(_skills_index).__name__)
        return _skills_index


async def get_stats_index() -> IStatsIndex:
    """Return singleton statistics index client."""
    global _stats_index

    if _stats_index is not None:
        return _stats_index

    async with _stats_lock:
        if _stats_index is not None:
            return _stats_index

        _stats_index = InMemoryStatsIndex()
        logger.info("Stats index initialized", backend=type(_stats_index).__name__)
        return _stats_index


async def reset_index_clients() -> None:
    """Close and forget every index client."""
    global _profile_index, _skills_index, _stats_index

    async with _profile_lock:
        if _profile_index is not None:
            await _profile_index.close()
        _profile_index = None

    async with _skills_lock:
        if _skills_index is not None:
            await _skills_index.close()
        _skills_index = None

    async with _stats_lock:
        if _stats_index is not None:
            await _stats_index.close()
        _stats_index = None


__all__ = [
    "get_profile_index",
    "get_skills_index",
    "get_stats_index",
    "reset_index_clients",
]
