"""
Search Application Components

Building blocks of the member search workflows:
- MemberMergeEngine: joins profile, skills and statistics documents
- VerificationEnricher: bounded-concurrency verification flag lookup
"""

from app.application.search.member_merge import (
    MemberMergeEngine,
    MergeOptions,
    paginate,
    sort_members,
)
from app.application.search.verification_enricher import VerificationEnricher

__all__ = [
    "MemberMergeEngine",
    "MergeOptions",
    "VerificationEnricher",
    "paginate",
    "sort_members",
]
