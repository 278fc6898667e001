"""Outcome type for single-record backend lookups.

A lookup either finds a record, finds nothing, or fails. Fallback chains
branch on these variants instead of inspecting error codes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Union


@dataclass(frozen=True)
class Found:
    record: Dict[str, Any]


@dataclass(frozen=True)
class NotFound:
    key: str = ""


@dataclass(frozen=True)
class Failure:
    cause: Exception


LookupResult = Union[Found, NotFound, Failure]


__all__ = ["Found", "NotFound", "Failure", "LookupResult"]
