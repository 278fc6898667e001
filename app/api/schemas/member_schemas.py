"""
Member API Schemas

Request models for the member search and statistics endpoints:
- Plain member search with structured filters
- Skills-filtered search
- Handle autocomplete
- Statistics, history, distribution and skills lookups
- Partial skill updates
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

from app.domain.fields import MEMBER_SORT_BY_FIELDS
from app.domain.value_objects import SortOrder


def _validate_sort_by(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in MEMBER_SORT_BY_FIELDS:
        raise ValueError(f"sortBy must be one of: {', '.join(MEMBER_SORT_BY_FIELDS)}")
    return value


class PagedQuery(BaseModel):
    """Pagination parameters shared by list endpoints"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    page: int = Field(default=1, ge=1, description="Page number")
    per_page: int = Field(default=50, ge=1, le=100, alias="perPage", description="Items per page")
    fields: Optional[str] = Field(default=None, description="Comma-separated output fields")


class MemberSearchQuery(PagedQuery):
    """Plain member search with structured filters and free text"""

    handle_lower: Optional[str] = Field(default=None, alias="handleLower")
    handles_lower: Optional[List[str]] = Field(default=None, alias="handlesLower")
    handle: Optional[str] = None
    handles: Optional[List[str]] = None
    email: Optional[str] = None
    user_id: Optional[int] = Field(default=None, alias="userId")
    user_ids: Optional[List[int]] = Field(default=None, alias="userIds")
    term: Optional[str] = Field(default=None, description="Free-text search term")
    sort_by: Optional[str] = Field(default=None, alias="sortBy")
    sort_order: SortOrder = Field(default=SortOrder.ASC, alias="sortOrder")

    @field_validator("sort_by")
    @classmethod
    def validate_sort_by(cls, v):
        return _validate_sort_by(v)

    def has_email_filter(self) -> bool:
        return bool(self.email)

    def filters(self) -> Dict[str, Any]:
        """Structured filters with index field names, empty ones omitted."""
        candidates = {
            "handleLower": self.handle_lower.lower() if self.handle_lower else None,
            "handlesLower": [h.lower() for h in self.handles_lower] if self.handles_lower else None,
            "handle": self.handle,
            "handles": self.handles,
            "email": self.email,
            "userId": self.user_id,
            "userIds": self.user_ids,
        }
        return {key: value for key, value in candidates.items() if value not in (None, "", [])}


class SkillSearchQuery(PagedQuery):
    """Skills-filtered member search"""

    skill_id: Union[str, List[str], None] = Field(default=None, alias="skillId")
    sort_by: str = Field(default="numberOfChallengesWon", alias="sortBy")
    sort_order: SortOrder = Field(default=SortOrder.DESC, alias="sortOrder")

    @field_validator("sort_by")
    @classmethod
    def validate_sort_by(cls, v):
        return _validate_sort_by(v)

    def skill_ids(self) -> List[str]:
        """Skill identifiers as a list, blanks dropped."""
        if self.skill_id is None:
            return []
        values = self.skill_id if isinstance(self.skill_id, list) else [self.skill_id]
        return [value.strip() for value in values if value and value.strip()]


class AutocompleteQuery(PagedQuery):
    """Handle autocomplete"""

    term: Optional[str] = None
    size: Optional[int] = Field(default=None, ge=1, description="Maximum suggestions requested from the index")


class StatisticsQuery(BaseModel):
    """Member statistics and history lookups"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    group_ids: Optional[str] = Field(default=None, alias="groupIds", description="Comma-separated group ids")
    fields: Optional[str] = None

    @field_validator("group_ids")
    @classmethod
    def validate_group_ids(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        for part in v.split(","):
            if not part.strip().isdigit():
                raise ValueError(f"Invalid group id: {part.strip()!r}")
        return v

    def group_id_list(self) -> Optional[List[int]]:
        """Requested groups in request order, ``None`` when not given."""
        if not self.group_ids:
            return None
        return [int(part.strip()) for part in self.group_ids.split(",")]


class DistributionQuery(BaseModel):
    """Rating distribution lookup"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    track: Optional[str] = None
    sub_track: Optional[str] = Field(default=None, alias="subTrack")
    fields: Optional[str] = None


class SkillsQuery(BaseModel):
    """Member skills lookup"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    fields: Optional[str] = None


class SkillEntry(BaseModel):
    """One entered skill keyed by tag id"""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    tag_name: Optional[str] = Field(default=None, alias="tagName")
    hidden: Optional[bool] = None
    score: Optional[float] = Field(default=None, ge=0)
    sources: Optional[List[str]] = None


class SkillsPartialUpdate(RootModel[Dict[str, SkillEntry]]):
    """Partial update body: tag id to skill entry, at least one entry"""

    @field_validator("root")
    @classmethod
    def validate_not_empty(cls, v: Dict[str, SkillEntry]) -> Dict[str, SkillEntry]:
        if not v:
            raise ValueError("At least one skill must be provided")
        return v

    def entries(self) -> Dict[str, Dict[str, Any]]:
        """Entries as stored documents, unset attributes omitted."""
        return {
            tag_id: entry.model_dump(by_alias=True, exclude_unset=True)
            for tag_id, entry in self.root.items()
        }
