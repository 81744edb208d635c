"""Domain models for search requests and results.

Value objects are immutable (frozen=True) and carry no infrastructure
dependencies.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SearchQuery(BaseModel):
    """Generic search request.

    An empty ``term`` matches every document in scope. ``types`` restricts the
    search to the named indices; ``None`` or an empty list searches all of them.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    term: str = ""
    filters: dict[str, Any] = Field(default_factory=dict)
    types: list[str] | None = None
    page_cursor: str | None = Field(default=None, alias="pageCursor")


class SearchResult(BaseModel):
    """A matched document reunited with the index it came from."""

    model_config = ConfigDict(frozen=True)

    document: dict[str, Any]
    type: str
    rank: float = 0.0


class SearchResultSet(BaseModel):
    """One page of results plus cursors to the neighbouring pages."""

    model_config = ConfigDict(frozen=True)

    results: list[SearchResult] = Field(default_factory=list)
    next_page_cursor: str | None = None
    previous_page_cursor: str | None = None
    total_count: int = 0
