"""
Shared API response types and base schemas.

This module contains the paginated envelopes returned by the member
endpoints. These are DTOs (Data Transfer Objects) in the API layer, separate
from the dictionaries flowing through the application services.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class PaginatedResult(BaseModel):
    """
    Paginated member result.

    Attributes:
        total: Number of matches before pagination
        page: Current page number (1-based)
        per_page: Number of items per page
        result: Items of the current page

    Example:
        ```python
        response = PaginatedResult.empty(page=2, per_page=10)
        # response.total = 0
        # response.result = []
        ```
    """

    model_config = ConfigDict(populate_by_name=True)

    total: int = Field(default=0, ge=0, description="Number of matches before pagination")
    page: int = Field(default=1, ge=1, description="Current page number")
    per_page: int = Field(default=50, ge=1, alias="perPage", description="Items per page")
    result: List[Dict[str, Any]] = Field(default_factory=list, description="Items of the current page")

    @classmethod
    def empty(cls, page: int, per_page: int) -> "PaginatedResult":
        return cls(total=0, page=page, per_page=per_page, result=[])


class SkillSearchResult(PaginatedResult):
    """Envelope of the skills-filtered search, carrying the page count."""

    number_of_pages: int = Field(default=0, ge=0, alias="numberOfPages", description="Total number of pages")

    @classmethod
    def from_page(cls, page: PaginatedResult) -> "SkillSearchResult":
        pages = (page.total + page.per_page - 1) // page.per_page  # Ceiling division
        return cls(
            total=page.total,
            page=page.page,
            per_page=page.per_page,
            number_of_pages=pages,
            result=page.result,
        )

    @classmethod
    def empty(cls, page: int, per_page: int) -> "SkillSearchResult":
        return cls(total=0, page=page, per_page=per_page, number_of_pages=0, result=[])
