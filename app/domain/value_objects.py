"""Domain value objects used across the search and statistics workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Iterable, Optional

DEFAULT_GROUP_ID = 10


def _coerce_user_id(value: Any) -> int:
    """Convert numeric strings to integers while validating type."""
    if isinstance(value, bool):
        raise TypeError("user_id must be an integer-compatible value")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    raise TypeError("user_id must be an integer-compatible value")


class SortOrder(str, Enum):
    """Sort direction for the primary sort key."""
    ASC = "asc"
    DESC = "desc"


class BooleanOperator(str, Enum):
    """Combinator applied to a list of skill identifiers."""
    AND = "AND"
    OR = "OR"


class VisibilityTier(str, Enum):
    """Statistics partition a caller is allowed to read."""
    PUBLIC = "public"
    PRIVATE = "private"


@dataclass(frozen=True)
class StatsKey:
    """Composite (userId, groupId) key of a statistics record."""

    user_id: int
    group_id: int

    def __init__(self, user_id: Any, group_id: Any = DEFAULT_GROUP_ID):
        object.__setattr__(self, "user_id", _coerce_user_id(user_id))
        object.__setattr__(self, "group_id", _coerce_user_id(group_id))

    @property
    def is_default_group(self) -> bool:
        return self.group_id == DEFAULT_GROUP_ID

    def __str__(self) -> str:
        return f"{self.user_id}_{self.group_id}"


@dataclass(frozen=True)
class CallerIdentity:
    """Identity of the caller performing an operation.

    Anonymous callers are represented by ``None`` at the call sites, never by
    an empty identity.
    """

    subject: str
    user_id: Optional[int] = None
    handle: Optional[str] = None
    roles: FrozenSet[str] = field(default_factory=frozenset)
    scopes: FrozenSet[str] = field(default_factory=frozenset)
    is_machine: bool = False

    def has_any_role(self, role_names: Iterable[str]) -> bool:
        """Case-insensitive role membership test."""
        wanted = {name.lower() for name in role_names}
        return any(role.lower() in wanted for role in self.roles)

    def is_member(self, user_id: Any) -> bool:
        """Check whether the caller is the member identified by ``user_id``."""
        if self.user_id is None or user_id is None:
            return False
        try:
            return self.user_id == _coerce_user_id(user_id)
        except TypeError:
            return False

    @property
    def display_name(self) -> str:
        return self.handle or self.subject


__all__ = [
    "DEFAULT_GROUP_ID",
    "SortOrder",
    "BooleanOperator",
    "VisibilityTier",
    "StatsKey",
    "CallerIdentity",
]
