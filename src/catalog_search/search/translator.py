"""Translation of generic search requests into engine query plans.

The default policy rewards precise matches most: each query token produces
an exact clause (boost 100, stemmed through the analyzer pipeline), a
trailing-wildcard prefix clause (boost 10) and a fuzzy clause with edit
distance 2 (boost 1). Filters become required exact-value clauses.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from catalog_search.domain.search import SearchQuery
from catalog_search.search.analyzers import SearchAnalyzer, get_analyzer
from catalog_search.search.errors import UnknownFilterFieldError
from catalog_search.search.index import MatchMode


EXACT_BOOST = 100.0
PREFIX_BOOST = 10.0
FUZZY_BOOST = 1.0
FUZZY_EDIT_DISTANCE = 2
DEFAULT_PAGE_SIZE = 25


class Presence(str, Enum):
    REQUIRED = "required"


@dataclass(frozen=True)
class MatchClause:
    """Optional clause contributing ``boost`` to documents it matches."""

    term: str
    boost: float
    mode: MatchMode
    use_pipeline: bool = False
    edit_distance: int = 0
    fields: tuple[str, ...] | None = None


@dataclass(frozen=True)
class FilterClause:
    """Clause a document must satisfy: ``field`` equals ``value``."""

    field: str
    value: Any
    presence: Presence = Presence.REQUIRED


@dataclass(frozen=True)
class QueryPlan:
    match_clauses: tuple[MatchClause, ...] = ()
    filter_clauses: tuple[FilterClause, ...] = ()
    document_types: tuple[str, ...] | None = None
    page_size: int = DEFAULT_PAGE_SIZE


class QueryTranslator(Protocol):
    """Strategy turning a request into a plan.

    ``fields_by_type`` maps every index in scope to the field names it carries.
    """

    def __call__(
        self, query: SearchQuery, fields_by_type: Mapping[str, frozenset[str]]
    ) -> QueryPlan:  # pragma: no cover - interface definition
        ...


class DefaultQueryTranslator:
    """Exact > prefix > fuzzy boost ladder with required filters."""

    def __init__(
        self,
        analyzer: SearchAnalyzer | None = None,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        fuzzy_edit_distance: int = FUZZY_EDIT_DISTANCE,
    ) -> None:
        if page_size < 1:
            msg = f"page_size must be positive, got {page_size}"
            raise ValueError(msg)
        self.analyzer = analyzer or get_analyzer(None)
        self.page_size = page_size
        self.fuzzy_edit_distance = fuzzy_edit_distance

    def __call__(self, query: SearchQuery, fields_by_type: Mapping[str, frozenset[str]]) -> QueryPlan:
        return QueryPlan(
            match_clauses=self._match_clauses(query.term),
            filter_clauses=self._filter_clauses(query.filters, fields_by_type),
            document_types=tuple(query.types) if query.types else None,
            page_size=self.page_size,
        )

    def _match_clauses(self, term: str) -> tuple[MatchClause, ...]:
        clauses: list[MatchClause] = []
        for token in self.analyzer.tokenize(term):
            clauses.append(MatchClause(token.text, EXACT_BOOST, MatchMode.EXACT, use_pipeline=True))
            clauses.append(MatchClause(token.text, PREFIX_BOOST, MatchMode.PREFIX))
            clauses.append(
                MatchClause(
                    token.text,
                    FUZZY_BOOST,
                    MatchMode.FUZZY,
                    edit_distance=self.fuzzy_edit_distance,
                )
            )
        return tuple(clauses)

    def _filter_clauses(
        self, filters: Mapping[str, Any], fields_by_type: Mapping[str, frozenset[str]]
    ) -> tuple[FilterClause, ...]:
        clauses: list[FilterClause] = []
        for field, value in filters.items():
            # With nothing in scope there is nothing to validate against; the query is simply empty.
            if fields_by_type and not any(field in fields for fields in fields_by_type.values()):
                raise UnknownFilterFieldError(field, fields_by_type)
            clauses.append(FilterClause(field=field, value=value))
        return tuple(clauses)
