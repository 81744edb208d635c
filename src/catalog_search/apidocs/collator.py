"""Build search documents from API catalog entities."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
import logging
from typing import Any

from catalog_search.apidocs.spec_parsers import SpecHandler, SpecParseError, default_spec_handler


logger = logging.getLogger(__name__)

API_DOCUMENT_TYPE = "api-definition"


class ApiDocumentCollator:
    """Collate API entities into documents ready for ``SearchEngine.index``.

    Entities follow the catalog descriptor shape::

        {"kind": "API",
         "metadata": {"name": ..., "namespace": ..., "title": ..., "description": ...},
         "spec": {"type": "openapi", "definition": "...", "lifecycle": ..., "owner": ...}}

    Entities whose ``spec.type`` has no registered parser are skipped.
    """

    def __init__(self, handler: SpecHandler | None = None, *, document_type: str = API_DOCUMENT_TYPE) -> None:
        self.handler = handler or default_spec_handler()
        self.document_type = document_type

    def collate(self, entities: Iterable[Mapping[str, Any]]) -> Iterator[dict[str, Any]]:
        for entity in entities:
            document = self.to_document(entity)
            if document is not None:
                yield document

    def to_document(self, entity: Mapping[str, Any]) -> dict[str, Any] | None:
        metadata = entity.get("metadata") or {}
        spec = entity.get("spec") or {}
        name = metadata.get("name")
        if not name:
            logger.debug("Skipping entity without metadata.name")
            return None

        spec_type = spec.get("type")
        parser = self.handler.get_spec_parser(spec_type) if spec_type else None
        if parser is None:
            logger.debug("No spec parser for type %r on API '%s'", spec_type, name)
            return None

        try:
            text = parser.get_spec_text(spec.get("definition") or "")
        except SpecParseError as exc:
            logger.warning("Skipping API '%s' with unreadable definition: %s", name, exc)
            return None

        namespace = metadata.get("namespace") or "default"
        kind = entity.get("kind") or "API"
        return {
            "title": metadata.get("title") or name,
            "location": f"/catalog/{namespace}/{kind.lower()}/{name}",
            "text": text,
            "kind": kind,
            "namespace": namespace,
            "lifecycle": spec.get("lifecycle") or "",
            "owner": spec.get("owner") or "",
        }
