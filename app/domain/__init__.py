"""Domain layer package exposing pure business abstractions."""

from . import interfaces
from .value_objects import CallerIdentity, StatsKey

__all__ = [
    "interfaces",
    "CallerIdentity",
    "StatsKey",
]
