"""Immutable per-type inverted index.

A :class:`TypeIndex` is built once from a batch of documents and never
mutated afterwards; re-indexing a type produces a new instance that the
registry swaps in.
"""

from __future__ import annotations

from bisect import bisect_left
from collections import defaultdict
from collections.abc import Iterable, Iterator, Mapping, Sequence
import copy
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

from catalog_search.search.analyzers import SearchAnalyzer
from catalog_search.search.errors import InvalidDocumentError
from catalog_search.search.fuzzy import find_fuzzy_matches


class MatchMode(str, Enum):
    """How a query term is compared with indexed terms."""

    EXACT = "exact"
    PREFIX = "prefix"
    FUZZY = "fuzzy"


@dataclass(frozen=True)
class Posting:
    """Occurrence of a term in one document."""

    doc: int
    fields: frozenset[str]


_SCALAR_TYPES = (str, int, float, bool)


def normalize_keyword(value: Any) -> str:
    """Canonical form used for exact-value filter comparisons."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).strip().lower()


def _scalar_values(value: Any) -> list[Any]:
    if isinstance(value, _SCALAR_TYPES):
        return [value]
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, _SCALAR_TYPES)]
    return []


def _text_values(value: Any) -> list[str]:
    return [str(item) for item in _scalar_values(value) if not isinstance(item, bool)]


@dataclass(frozen=True)
class TypeIndex:
    """Searchable snapshot of the documents registered under one type."""

    name: str
    documents: tuple[Mapping[str, Any], ...]
    field_names: frozenset[str]
    postings: Mapping[str, tuple[Posting, ...]]
    vocabulary: tuple[str, ...]
    keywords: Mapping[str, Mapping[str, frozenset[int]]]

    def __len__(self) -> int:
        return len(self.documents)

    def has_field(self, field: str) -> bool:
        return field in self.field_names

    def lookup_exact(self, term: str) -> tuple[Posting, ...]:
        return self.postings.get(term, ())

    def iter_prefixed_terms(self, prefix: str) -> Iterator[str]:
        start = bisect_left(self.vocabulary, prefix)
        for term in self.vocabulary[start:]:
            if not term.startswith(prefix):
                break
            yield term

    def iter_fuzzy_terms(self, term: str, max_distance: int) -> Iterator[str]:
        for candidate, _distance in find_fuzzy_matches(term, self.vocabulary, max_distance):
            yield candidate

    def match(
        self,
        term: str,
        mode: MatchMode,
        *,
        edit_distance: int = 0,
        fields: Sequence[str] | None = None,
    ) -> set[int]:
        """Return ordinals of documents containing ``term`` under ``mode``."""
        if mode is MatchMode.EXACT:
            candidates: Iterable[str] = (term,)
        elif mode is MatchMode.PREFIX:
            candidates = self.iter_prefixed_terms(term)
        else:
            candidates = self.iter_fuzzy_terms(term, edit_distance)

        wanted = frozenset(fields) if fields else None
        matched: set[int] = set()
        for candidate in candidates:
            for posting in self.lookup_exact(candidate):
                if wanted is None or posting.fields & wanted:
                    matched.add(posting.doc)
        return matched

    def documents_with_value(self, field: str, value: Any) -> frozenset[int]:
        """Ordinals of documents whose ``field`` equals ``value`` (or any item of a list ``value``)."""
        by_value = self.keywords.get(field)
        if not by_value:
            return frozenset()
        matched: set[int] = set()
        for item in _scalar_values(value):
            matched.update(by_value.get(normalize_keyword(item), ()))
        return frozenset(matched)


def build_type_index(
    name: str,
    documents: Sequence[Mapping[str, Any]],
    analyzer: SearchAnalyzer,
    *,
    identifier_field: str = "location",
) -> TypeIndex:
    """Validate ``documents`` and build a :class:`TypeIndex` over exactly them.

    Raises:
        InvalidDocumentError: when a document is not a mapping, has no usable
            identifier, or repeats an identifier from the same batch.
    """
    seen_ids: set[str] = set()
    field_names: set[str] = set()
    term_fields: dict[str, dict[int, set[str]]] = defaultdict(dict)
    keywords: dict[str, dict[str, set[int]]] = defaultdict(lambda: defaultdict(set))
    frozen_documents: list[Mapping[str, Any]] = []

    for ordinal, document in enumerate(documents):
        if not isinstance(document, Mapping):
            raise InvalidDocumentError(name, ordinal, f"expected a mapping, got {type(document).__name__}")
        identifier = document.get(identifier_field)
        if identifier is None or (isinstance(identifier, str) and not identifier.strip()):
            raise InvalidDocumentError(name, ordinal, f"missing identifier field '{identifier_field}'")
        key = str(identifier)
        if key in seen_ids:
            raise InvalidDocumentError(name, ordinal, f"duplicate {identifier_field} '{key}'")
        seen_ids.add(key)

        for field, value in document.items():
            field_names.add(field)
            for keyword in _scalar_values(value):
                keywords[field][normalize_keyword(keyword)].add(ordinal)
            for text in _text_values(value):
                for token in analyzer(text):
                    term_fields[token.text].setdefault(ordinal, set()).add(field)

        frozen_documents.append(MappingProxyType(copy.deepcopy(dict(document))))

    postings = {
        term: tuple(Posting(doc=doc, fields=frozenset(fields)) for doc, fields in sorted(per_doc.items()))
        for term, per_doc in term_fields.items()
    }
    frozen_keywords = {
        field: MappingProxyType({value: frozenset(docs) for value, docs in by_value.items()})
        for field, by_value in keywords.items()
    }

    return TypeIndex(
        name=name,
        documents=tuple(frozen_documents),
        field_names=frozenset(field_names),
        postings=MappingProxyType(postings),
        vocabulary=tuple(sorted(postings)),
        keywords=MappingProxyType(frozen_keywords),
    )
