"""Domain-layer service interfaces.

These abstractions define the stable contracts that the application layer relies on,
while infrastructure adapters provide concrete implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Collection, Dict, List, Optional, Sequence

from app.domain.lookup import LookupResult
from app.domain.value_objects import BooleanOperator


class IHealthCheck:
    """Health check interface mixin."""

    @abstractmethod
    async def check_health(self) -> Dict[str, Any]:
        """Return health check details."""
        pass


class IBackendClient(IHealthCheck, ABC):
    """Pooled backend connection with a process-wide lifecycle."""

    async def close(self) -> None:
        """Release pooled connections."""
        return None


@dataclass
class IndexHits:
    """Documents returned by a search-index query.

    ``total`` is the number of matching documents in the index, which may
    exceed ``len(documents)`` when the query window is smaller than the match
    count.
    """
    documents: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0


class IProfileIndex(IBackendClient):
    """Member profile search index."""

    @abstractmethod
    async def query(
        self,
        filters: Dict[str, Any],
        term: Optional[str],
        page: int,
        per_page: int,
    ) -> IndexHits:
        """Search profiles by structured filters and free text."""
        pass

    def total(self, hits: IndexHits) -> int:
        """Total match count of a profile query."""
        return hits.total

    @abstractmethod
    async def suggest(self, term: str, size: int) -> List[Dict[str, Any]]:
        """Return handle suggestions for an autocomplete term."""
        pass


class ISkillsIndex(IBackendClient):
    """Member skills search index."""

    @abstractmethod
    async def query_by_handles(self, handles: Collection[str]) -> IndexHits:
        """Return skill documents for the given lowercase handles."""
        pass

    @abstractmethod
    async def query_by_skill_ids(
        self,
        skill_ids: Sequence[str],
        operator: BooleanOperator,
        page: int,
        per_page: int,
    ) -> IndexHits:
        """Return member documents whose skills match the given identifiers."""
        pass


class IStatsIndex(IBackendClient):
    """Member statistics search index."""

    @abstractmethod
    async def query_by_handles(self, handles: Collection[str]) -> IndexHits:
        """Return default-group statistics documents for the given lowercase handles."""
        pass

    @abstractmethod
    async def get_by_composite_key(self, user_id: int, group_id: int) -> LookupResult:
        """Get one statistics document by its ``{userId}_{groupId}`` id."""
        pass


class IKeyValueStore(IBackendClient):
    """NoSQL key-value store."""

    @abstractmethod
    async def get_by_key(self, table: str, key: Any) -> Optional[Dict[str, Any]]:
        """Get an item by hash key, ``None`` when absent."""
        pass

    @abstractmethod
    async def get_by_composite_key(
        self, table: str, hash_key: Any, range_key: Any
    ) -> Optional[Dict[str, Any]]:
        """Get an item by hash and range key, ``None`` when absent."""
        pass

    @abstractmethod
    async def update(self, table: str, record: Dict[str, Any], options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Write an item, replacing any item with the same key."""
        pass

    @abstractmethod
    async def scan(self, table: str, criteria: Optional[Dict[str, Dict[str, Any]]] = None) -> List[Dict[str, Any]]:
        """Scan a table with ``{attribute: {operator: value}}`` criteria."""
        pass


class IVerificationService(IBackendClient):
    """External member verification lookup."""

    @abstractmethod
    async def is_verified(self, user_id: int) -> bool:
        """Return whether the member is verified; raises on transport failure."""
        pass


__all__ = [
    "IHealthCheck",
    "IBackendClient",
    "IndexHits",
    "IProfileIndex",
    "ISkillsIndex",
    "IStatsIndex",
    "IKeyValueStore",
    "IVerificationService",
]
