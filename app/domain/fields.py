"""Field registries for every projected entity and the projection helpers.

Output documents are plain dictionaries; which keys may appear in a response
is decided exclusively by the registries below.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple

MEMBER_FIELDS: Tuple[str, ...] = (
    "userId", "handle", "handleLower", "firstName", "lastName",
    "status", "addresses", "photoURL", "homeCountryCode", "competitionCountryCode",
    "description", "email", "tracks", "maxRating", "wins", "createdAt", "createdBy",
    "updatedAt", "updatedBy", "skills", "stats", "emsiSkills", "verified",
    "numberOfChallengesWon", "numberOfChallengesPlaced",
)

MEMBER_SORT_BY_FIELDS: Tuple[str, ...] = (
    "userId", "country", "handle", "firstName", "lastName",
    "numberOfChallengesWon", "numberOfChallengesPlaced",
)

MEMBER_AUTOCOMPLETE_FIELDS: Tuple[str, ...] = (
    "userId", "handle", "handleLower", "status", "email", "createdAt", "updatedAt",
)

# Statistics sub-document embedded in search results
MEMBER_SEARCH_STATS_FIELDS: Tuple[str, ...] = (
    "userId", "handle", "handleLower", "maxRating",
    "numberOfChallengesWon", "numberOfChallengesPlaced",
    "challenges", "wins", "DEVELOP", "DESIGN", "DATA_SCIENCE", "COPILOT",
)

MEMBER_STATS_FIELDS: Tuple[str, ...] = (
    "userId", "groupId", "handle", "handleLower", "maxRating",
    "challenges", "wins", "DEVELOP", "DESIGN", "DATA_SCIENCE", "copilot",
    "createdAt", "updatedAt", "createdBy", "updatedBy",
)

HISTORY_STATS_FIELDS: Tuple[str, ...] = (
    "userId", "groupId", "handle", "handleLower", "DEVELOP", "DATA_SCIENCE",
    "createdAt", "updatedAt", "createdBy", "updatedBy",
)

DISTRIBUTION_FIELDS: Tuple[str, ...] = (
    "track", "subTrack", "distribution", "createdAt", "updatedAt", "createdBy", "updatedBy",
)

MEMBER_SKILL_FIELDS: Tuple[str, ...] = (
    "userId", "handle", "handleLower", "skills",
    "createdAt", "updatedAt", "createdBy", "updatedBy",
)


def parse_fields(
    requested: Optional[str],
    canonical: Sequence[str],
) -> Tuple[str, ...]:
    """Parse a comma-separated field list against a canonical registry.

    Unknown and blank entries are dropped and duplicates collapse onto their
    first occurrence. A request without any valid entry selects the whole
    registry.
    """
    if not requested:
        return tuple(canonical)

    allowed = set(canonical)
    selected = []
    for raw in requested.split(","):
        name = raw.strip()
        if name in allowed and name not in selected:
            selected.append(name)

    return tuple(selected) if selected else tuple(canonical)


def without(fields: Iterable[str], excluded: Iterable[str]) -> Tuple[str, ...]:
    """Remove ``excluded`` names from ``fields`` keeping order."""
    dropped = set(excluded)
    return tuple(name for name in fields if name not in dropped)


def project(record: Mapping[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    """Pick the listed keys present on ``record``."""
    return {name: record[name] for name in fields if name in record}


__all__ = [
    "MEMBER_FIELDS",
    "MEMBER_SORT_BY_FIELDS",
    "MEMBER_AUTOCOMPLETE_FIELDS",
    "MEMBER_SEARCH_STATS_FIELDS",
    "MEMBER_STATS_FIELDS",
    "HISTORY_STATS_FIELDS",
    "DISTRIBUTION_FIELDS",
    "MEMBER_SKILL_FIELDS",
    "parse_fields",
    "without",
    "project",
]
