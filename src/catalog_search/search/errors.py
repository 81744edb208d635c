"""Exceptions raised by the search engine."""

from __future__ import annotations

from collections.abc import Iterable


class SearchEngineError(Exception):
    """Base class for search engine failures."""


class InvalidDocumentError(SearchEngineError, ValueError):
    """Raised when a batch handed to ``index`` contains an unusable document.

    The whole batch is rejected; the previously registered index for the type
    stays in place.
    """

    def __init__(self, type_name: str, position: int, reason: str) -> None:
        self.type_name = type_name
        self.position = position
        self.reason = reason
        super().__init__(f"Invalid document at position {position} for index '{type_name}': {reason}")


class UnknownFilterFieldError(SearchEngineError, LookupError):
    """Raised when a filter names a field that no index in scope carries."""

    def __init__(self, field: str, types: Iterable[str]) -> None:
        self.field = field
        self.types = tuple(types)
        scope = ", ".join(self.types) or "<none>"
        super().__init__(f"Filter field '{field}' is not present in any searched index ({scope})")
