"""Infrastructure adapters for external services."""

from .memory_index_adapters import InMemoryProfileIndex, InMemorySkillsIndex, InMemoryStatsIndex
from .memory_store_adapter import InMemoryKeyValueStore
from .verification_adapter import HttpVerificationService, LocalVerificationService

__all__ = [
    # Search indexes
    "InMemoryProfileIndex",
    "InMemorySkillsIndex",
    "InMemoryStatsIndex",

    # Key-value store
    "InMemoryKeyValueStore",

    # Verification
    "HttpVerificationService",
    "LocalVerificationService",
]
