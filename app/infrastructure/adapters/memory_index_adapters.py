"""
In-memory search index adapters for local development and tests.

The adapters keep documents in process memory and implement the filtering
semantics the application relies on; relevance scoring is not modelled and
hits come back in insertion order.
"""

import asyncio
import copy
from typing import Any, Collection, Dict, Iterable, List, Optional, Sequence

import structlog

from app.domain.interfaces import IndexHits, IProfileIndex, ISkillsIndex, IStatsIndex
from app.domain.lookup import Found, LookupResult, NotFound
from app.domain.value_objects import DEFAULT_GROUP_ID, BooleanOperator

logger = structlog.get_logger(__name__)

TERM_FIELDS = ("handle", "firstName", "lastName", "description")


def _page(documents: List[Dict[str, Any]], page: int, per_page: int) -> IndexHits:
    start = (page - 1) * per_page
    window = documents[start:start + per_page] if start < len(documents) else []
    return IndexHits(documents=copy.deepcopy(window), total=len(documents))


def _same(left: Any, right: Any) -> bool:
    return left is not None and right is not None and str(left) == str(right)


class _InMemoryIndex:
    """Document list guarded by a lock."""

    service_name = "InMemoryIndex"

    def __init__(self, documents: Optional[Iterable[Dict[str, Any]]] = None):
        self._documents: List[Dict[str, Any]] = [copy.deepcopy(doc) for doc in documents or ()]
        self._lock = asyncio.Lock()

    async def add(self, documents: Iterable[Dict[str, Any]]) -> None:
        async with self._lock:
            self._documents.extend(copy.deepcopy(doc) for doc in documents)

    async def check_health(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "service": self.service_name,
            "documents": len(self._documents),
        }

    async def close(self) -> None:
        return None


class InMemoryProfileIndex(_InMemoryIndex, IProfileIndex):
    """Member profile index."""

    service_name = "InMemoryProfileIndex"

    async def query(
        self,
        filters: Dict[str, Any],
        term: Optional[str],
        page: int,
        per_page: int,
    ) -> IndexHits:
        async with self._lock:
            matches = [doc for doc in self._documents if self._matches(doc, filters, term)]
        logger.debug("Profile index query", filters=sorted(filters), term=term, matches=len(matches))
        return _page(matches, page, per_page)

    async def suggest(self, term: str, size: int) -> List[Dict[str, Any]]:
        needle = term.lower()
        async with self._lock:
            suggestions = [
                doc for doc in self._documents
                if needle in str(doc.get("handleLower") or doc.get("handle") or "").lower()
            ]
        return copy.deepcopy(suggestions[:size])

    @staticmethod
    def _matches(doc: Dict[str, Any], filters: Dict[str, Any], term: Optional[str]) -> bool:
        for name, value in filters.items():
            if name == "handleLower" and doc.get("handleLower") != value:
                return False
            if name == "handlesLower" and doc.get("handleLower") not in value:
                return False
            if name == "handle" and doc.get("handle") != value:
                return False
            if name == "handles" and doc.get("handle") not in value:
                return False
            if name == "email" and str(doc.get("email") or "").lower() != str(value).lower():
                return False
            if name == "userId" and not _same(doc.get("userId"), value):
                return False
            if name == "userIds" and not any(_same(doc.get("userId"), item) for item in value):
                return False

        if term:
            needle = term.lower()
            return any(needle in str(doc.get(field) or "").lower() for field in TERM_FIELDS)
        return True


class InMemorySkillsIndex(_InMemoryIndex, ISkillsIndex):
    """Member skills index; documents carry ``userId``, ``handleLower`` and ``skills``."""

    service_name = "InMemorySkillsIndex"

    async def query_by_handles(self, handles: Collection[str]) -> IndexHits:
        wanted = set(handles)
        async with self._lock:
            matches = [doc for doc in self._documents if doc.get("handleLower") in wanted]
        return IndexHits(documents=copy.deepcopy(matches), total=len(matches))

    async def query_by_skill_ids(
        self,
        skill_ids: Sequence[str],
        operator: BooleanOperator,
        page: int,
        per_page: int,
    ) -> IndexHits:
        combine = all if operator == BooleanOperator.AND else any
        async with self._lock:
            matches = [
                doc for doc in self._documents
                if combine(skill_id in (doc.get("skills") or {}) for skill_id in skill_ids)
            ]
        logger.debug("Skills index query", skills=list(skill_ids), operator=operator.value, matches=len(matches))
        return _page(matches, page, per_page)


class InMemoryStatsIndex(_InMemoryIndex, IStatsIndex):
    """Member statistics index; documents are identified by ``{userId}_{groupId}``."""

    service_name = "InMemoryStatsIndex"

    async def query_by_handles(self, handles: Collection[str]) -> IndexHits:
        wanted = set(handles)
        async with self._lock:
            matches = [
                doc for doc in self._documents
                if doc.get("handleLower") in wanted
                and _same(doc.get("groupId", DEFAULT_GROUP_ID), DEFAULT_GROUP_ID)
            ]
        return IndexHits(documents=copy.deepcopy(matches), total=len(matches))

    async def get_by_composite_key(self, user_id: int, group_id: int) -> LookupResult:
        key = f"{user_id}_{group_id}"
        async with self._lock:
            for doc in self._documents:
                if _same(doc.get("userId"), user_id) and _same(doc.get("groupId", DEFAULT_GROUP_ID), group_id):
                    return Found(copy.deepcopy(doc))
        return NotFound(key)


__all__ = ["InMemoryProfileIndex", "InMemorySkillsIndex", "InMemoryStatsIndex"]
