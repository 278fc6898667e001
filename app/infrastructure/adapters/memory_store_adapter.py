"""
In-memory key-value store for local development and tests.

Tables are created on first write. Each table has a hash key attribute and an
optional range key attribute; items are stored by the string form of their
key so ``10`` and ``"10"`` address the same item.
"""

import asyncio
import copy
from typing import Any, Dict, List, Optional, Tuple

import structlog

from app.domain.exceptions import ValidationError
from app.domain.interfaces import IKeyValueStore

logger = structlog.get_logger(__name__)

KeySchema = Tuple[str, Optional[str]]

DEFAULT_KEY_SCHEMA: KeySchema = ("userId", None)


def _contains(actual: Any, expected: Any) -> bool:
    return actual is not None and str(expected).lower() in str(actual).lower()


def _equals(actual: Any, expected: Any) -> bool:
    return actual is not None and str(actual) == str(expected)


SCAN_OPERATORS = {
    "CONTAINS": _contains,
    "EQ": _equals,
}


class InMemoryKeyValueStore(IKeyValueStore):
    """Process-local key-value store"""

    def __init__(self, key_schemas: Optional[Dict[str, KeySchema]] = None):
        self.key_schemas: Dict[str, KeySchema] = dict(key_schemas or {})
        self._tables: Dict[str, Dict[Tuple[str, Optional[str]], Dict[str, Any]]] = {}
        self._lock = asyncio.Lock()
        self._stats = {"reads": 0, "writes": 0, "scans": 0}

    async def check_health(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "service": "InMemoryKeyValueStore",
            "tables": {name: len(items) for name, items in self._tables.items()},
            "stats": self._stats.copy(),
        }

    async def close(self) -> None:
        return None

    async def get_by_key(self, table: str, key: Any) -> Optional[Dict[str, Any]]:
        async with self._lock:
            self._stats["reads"] += 1
            items = self._tables.get(table, {})
            item = items.get((str(key), None))
            if item is None:
                # Tables with a range key addressed by hash key only
                item = next((value for (hash_key, _), value in items.items() if hash_key == str(key)), None)
            return copy.deepcopy(item) if item is not None else None

    async def get_by_composite_key(
        self, table: str, hash_key: Any, range_key: Any
    ) -> Optional[Dict[str, Any]]:
        async with self._lock:
            self._stats["reads"] += 1
            item = self._tables.get(table, {}).get((str(hash_key), str(range_key)))
            return copy.deepcopy(item) if item is not None else None

    async def update(
        self, table: str, record: Dict[str, Any], options: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        key = self._key_of(table, record)
        async with self._lock:
            self._stats["writes"] += 1
            self._tables.setdefault(table, {})[key] = copy.deepcopy(record)
        logger.debug("Store item written", table=table, key=key)
        return copy.deepcopy(record)

    async def scan(
        self, table: str, criteria: Optional[Dict[str, Dict[str, Any]]] = None
    ) -> List[Dict[str, Any]]:
        conditions = []
        for attribute, condition in (criteria or {}).items():
            for operator, expected in condition.items():
                if operator not in SCAN_OPERATORS:
                    raise ValidationError(f"Unsupported scan operator: {operator}")
                conditions.append((attribute, SCAN_OPERATORS[operator], expected))

        async with self._lock:
            self._stats["scans"] += 1
            items = list(self._tables.get(table, {}).values())

        return [
            copy.deepcopy(item)
            for item in items
            if all(check(item.get(attribute), expected) for attribute, check, expected in conditions)
        ]

    def _key_of(self, table: str, record: Dict[str, Any]) -> Tuple[str, Optional[str]]:
        hash_attr, range_attr = self.key_schemas.get(table, DEFAULT_KEY_SCHEMA)
        if record.get(hash_attr) is None:
            raise ValidationError(f"Item for table '{table}' is missing hash key '{hash_attr}'")
        range_value = record.get(range_attr) if range_attr else None
        return str(record[hash_attr]), str(range_value) if range_value is not None else None


__all__ = ["InMemoryKeyValueStore", "DEFAULT_KEY_SCHEMA", "SCAN_OPERATORS"]
