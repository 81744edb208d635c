"""Domain layer: search request and result value objects with no infrastructure dependencies."""

from catalog_search.domain.search import SearchQuery, SearchResult, SearchResultSet


__all__ = ["SearchQuery", "SearchResult", "SearchResultSet"]
