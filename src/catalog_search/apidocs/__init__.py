"""API definition text extraction feeding the search engine."""

from catalog_search.apidocs.collator import API_DOCUMENT_TYPE, ApiDocumentCollator
from catalog_search.apidocs.spec_parsers import (
    OpenAPISpecParser,
    SpecHandler,
    SpecParseError,
    SpecParser,
    SpecVersion,
    default_spec_handler,
)


__all__ = [
    "API_DOCUMENT_TYPE",
    "ApiDocumentCollator",
    "OpenAPISpecParser",
    "SpecHandler",
    "SpecParseError",
    "SpecParser",
    "SpecVersion",
    "default_spec_handler",
]
