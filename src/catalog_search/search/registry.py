"""Registry of named indices.

Indices are built outside the lock and swapped in atomically, so a reader
always sees either the previous or the new :class:`TypeIndex` for a type.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
import logging
import threading
from typing import Any

from catalog_search.search.analyzers import SearchAnalyzer, get_analyzer
from catalog_search.search.index import TypeIndex, build_type_index


logger = logging.getLogger(__name__)


class IndexRegistry:
    """Holds one immutable :class:`TypeIndex` per type name."""

    def __init__(self, analyzer: SearchAnalyzer | None = None, *, identifier_field: str = "location") -> None:
        self.analyzer = analyzer or get_analyzer(None)
        self.identifier_field = identifier_field
        self._indices: dict[str, TypeIndex] = {}
        self._lock = threading.Lock()

    def index(self, type_name: str, documents: Sequence[Mapping[str, Any]]) -> TypeIndex:
        """Replace the index for ``type_name`` with one built over ``documents``."""
        built = build_type_index(
            type_name,
            documents,
            self.analyzer,
            identifier_field=self.identifier_field,
        )
        with self._lock:
            replaced = type_name in self._indices
            # Re-assigning an existing key keeps its registration order.
            self._indices[type_name] = built
        logger.debug(
            "%s index '%s' with %d documents and %d terms",
            "Replaced" if replaced else "Created",
            type_name,
            len(built),
            len(built.vocabulary),
        )
        return built

    def get_index(self, type_name: str) -> TypeIndex | None:
        with self._lock:
            return self._indices.get(type_name)

    def list_types(self) -> list[str]:
        with self._lock:
            return list(self._indices)

    def snapshot(self, types: Iterable[str] | None = None) -> list[TypeIndex]:
        """Return the current indices for ``types`` (all when ``None``) in registration order."""
        with self._lock:
            if types is None:
                return list(self._indices.values())
            wanted = set(types)
            return [index for name, index in self._indices.items() if name in wanted]

    def remove(self, type_name: str) -> bool:
        with self._lock:
            return self._indices.pop(type_name, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._indices.clear()

    def __contains__(self, type_name: object) -> bool:
        with self._lock:
            return type_name in self._indices

    def __len__(self) -> int:
        with self._lock:
            return len(self._indices)
