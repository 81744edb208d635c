"""In-memory search engine facade.

``index`` registers documents under a type; ``query`` translates a request
into a :class:`QueryPlan`, runs it against every index in scope, concatenates
the per-index rankings in registration order and slices out one page.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping, Sequence
import copy
import logging
from typing import Any

from catalog_search.config import Settings
from catalog_search.domain.search import SearchQuery, SearchResult, SearchResultSet
from catalog_search.observability.context import bind_index_type
from catalog_search.observability.metrics import (
    INDEX_BUILDS,
    INDEX_DOC_COUNT,
    OPERATION_LATENCY,
    QUERY_COUNT,
    track_latency,
)
from catalog_search.observability.tracing import create_span
from catalog_search.search.analyzers import SearchAnalyzer, get_analyzer
from catalog_search.search.cursor import decode_page_cursor, encode_page_cursor
from catalog_search.search.errors import SearchEngineError
from catalog_search.search.index import TypeIndex
from catalog_search.search.registry import IndexRegistry
from catalog_search.search.translator import DefaultQueryTranslator, MatchClause, QueryPlan, QueryTranslator


logger = logging.getLogger(__name__)


class SearchEngine:
    """Pluggable full-text search over named in-memory indices."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        analyzer: SearchAnalyzer | None = None,
        translator: QueryTranslator | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.analyzer = analyzer or get_analyzer(self.settings.analyzer)
        self.registry = IndexRegistry(self.analyzer, identifier_field=self.settings.identifier_field)
        self.translator: QueryTranslator = translator or DefaultQueryTranslator(
            self.analyzer,
            page_size=self.settings.page_size,
            fuzzy_edit_distance=self.settings.fuzzy_edit_distance,
        )

    def set_translator(self, translator: QueryTranslator) -> None:
        self.translator = translator

    def get_translator(self) -> QueryTranslator:
        return self.translator

    def index(self, type_name: str, documents: Sequence[Mapping[str, Any]]) -> None:
        """Replace the index for ``type_name`` with ``documents``.

        Raises:
            InvalidDocumentError: if any document lacks a usable identifier;
                the previous index for the type is left untouched.
        """
        bind_index_type(type_name)
        try:
            with track_latency(OPERATION_LATENCY, operation="index"), create_span(
                "search.index", attributes={"search.type": type_name}
            ) as span:
                try:
                    built = self.registry.index(type_name, documents)
                except SearchEngineError:
                    INDEX_BUILDS.labels(type=type_name, status="rejected").inc()
                    raise
                span.set_attribute("search.documents", len(built))
        finally:
            bind_index_type(None)

        INDEX_BUILDS.labels(type=type_name, status="ok").inc()
        INDEX_DOC_COUNT.labels(type=type_name).set(len(built))
        logger.info("Indexed %d documents into '%s'", len(built), type_name)

    def query(self, query: SearchQuery | Mapping[str, Any]) -> SearchResultSet:
        """Run ``query`` and return one page of results.

        Raises:
            UnknownFilterFieldError: when a filter names a field that no index
                in scope carries.
        """
        request = query if isinstance(query, SearchQuery) else SearchQuery.model_validate(query)
        status = "ok"
        with track_latency(OPERATION_LATENCY, operation="query"), create_span(
            "search.query",
            attributes={"search.term_length": len(request.term), "search.filters": len(request.filters)},
        ) as span:
            try:
                result_set = self._query(request)
            except SearchEngineError:
                status = "rejected"
                raise
            except Exception:
                status = "error"
                raise
            finally:
                QUERY_COUNT.labels(status=status).inc()
            span.set_attribute("search.total", result_set.total_count)
        return result_set

    def _query(self, request: SearchQuery) -> SearchResultSet:
        scope = self.registry.snapshot(request.types or None)
        fields_by_type = {index.name: index.field_names for index in scope}
        plan = self.translator(request, fields_by_type)

        if plan.document_types is not None:
            wanted = set(plan.document_types)
            scope = [index for index in scope if index.name in wanted]

        ranked: list[SearchResult] = []
        for index in scope:
            for ordinal, rank in self._execute(plan, index):
                document = copy.deepcopy(dict(index.documents[ordinal]))
                ranked.append(SearchResult(document=document, type=index.name, rank=rank))

        page = decode_page_cursor(request.page_cursor)
        start = page * plan.page_size
        end = start + plan.page_size
        logger.debug(
            "Query over %d indices matched %d documents, serving page %d",
            len(scope),
            len(ranked),
            page,
        )
        return SearchResultSet(
            results=ranked[start:end],
            next_page_cursor=encode_page_cursor(page + 1) if end < len(ranked) else None,
            previous_page_cursor=encode_page_cursor(page - 1) if page > 0 else None,
            total_count=len(ranked),
        )

    def _execute(self, plan: QueryPlan, index: TypeIndex) -> list[tuple[int, float]]:
        """Rank documents of ``index`` under ``plan``; ties keep document order."""
        candidates = set(range(len(index)))
        for clause in plan.filter_clauses:
            # An index that lacks the field cannot satisfy the filter.
            if not index.has_field(clause.field):
                return []
            candidates &= index.documents_with_value(clause.field, clause.value)
            if not candidates:
                return []

        if not plan.match_clauses:
            return [(ordinal, 0.0) for ordinal in sorted(candidates)]

        scores: dict[int, float] = defaultdict(float)
        for clause in plan.match_clauses:
            for ordinal in self._match_clause(index, clause):
                if ordinal in candidates:
                    scores[ordinal] += clause.boost

        return sorted(scores.items(), key=lambda item: (-item[1], item[0]))

    def _match_clause(self, index: TypeIndex, clause: MatchClause) -> set[int]:
        terms = self.analyzer.process_term(clause.term) if clause.use_pipeline else [clause.term]
        matched: set[int] = set()
        for term in terms:
            matched |= index.match(term, clause.mode, edit_distance=clause.edit_distance, fields=clause.fields)
        return matched
