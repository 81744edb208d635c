"""Turn API definitions into flat, searchable text.

Parsers extract the human-readable parts of a definition (title,
description, per-operation summaries, tags and response descriptions) and
join them with ``" : "`` so the result reads well as a search excerpt.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import Enum
import logging
from typing import Any, Protocol

import yaml


logger = logging.getLogger(__name__)

TEXT_SEPARATOR = " : "

_V2_METHODS = ("get", "put", "post", "delete", "options", "head", "patch")
_V3_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


class SpecParseError(ValueError):
    """Raised when a definition cannot be read as a YAML/JSON mapping."""


class SpecParser(Protocol):
    """Interface implemented by every definition parser."""

    spec_type: str

    def get_spec_text(self, spec_definition: str) -> str:  # pragma: no cover - interface definition
        ...


class SpecHandler:
    """Stores parsers and looks them up by the spec type they handle."""

    def __init__(self) -> None:
        self.spec_parsers: dict[str, SpecParser] = {}

    def add_spec_parser(self, parser: SpecParser) -> SpecHandler:
        self.spec_parsers[parser.spec_type] = parser
        return self

    def get_spec_parser(self, spec_type: str) -> SpecParser | None:
        return self.spec_parsers.get(spec_type)


class SpecVersion(str, Enum):
    SWAGGER_2 = "2"
    OPENAPI_3 = "3"
    UNKNOWN = "unknown"

    @classmethod
    def detect(cls, raw_version: Any) -> SpecVersion:
        if raw_version is None:
            return cls.UNKNOWN
        major = str(raw_version).strip().split(".")[0]
        if major == "2":
            return cls.SWAGGER_2
        if major == "3":
            return cls.OPENAPI_3
        return cls.UNKNOWN


Fragments = list[str | None]


def _operation_text(operation: Any) -> Fragments:
    if not isinstance(operation, Mapping):
        return []
    fragments: Fragments = [operation.get("summary"), operation.get("description")]
    tags = operation.get("tags")
    if isinstance(tags, list) and tags:
        fragments.append(",".join(str(tag) for tag in tags))
    responses = operation.get("responses")
    if isinstance(responses, Mapping):
        for response in responses.values():
            if isinstance(response, Mapping):
                fragments.append(response.get("description"))
    return fragments


def _paths(spec: Mapping[str, Any]) -> list[tuple[str, Mapping[str, Any]]]:
    paths = spec.get("paths")
    if not isinstance(paths, Mapping):
        return []
    return [(str(path), details) for path, details in paths.items() if isinstance(details, Mapping)]


def _v2_text(spec: Mapping[str, Any]) -> Fragments:
    fragments: Fragments = []
    for _path, details in _paths(spec):
        for method in _V2_METHODS:
            fragments.extend(_operation_text(details.get(method)))
    return fragments


def _v3_text(spec: Mapping[str, Any]) -> Fragments:
    fragments: Fragments = []
    for path, details in _paths(spec):
        fragments.append(path)
        for method in _V3_METHODS:
            if method in details:
                fragments.extend(_operation_text(details[method]))
    return fragments


_VERSION_EXTRACTORS: dict[SpecVersion, Callable[[Mapping[str, Any]], Fragments]] = {
    SpecVersion.SWAGGER_2: _v2_text,
    SpecVersion.OPENAPI_3: _v3_text,
}


def join_fragments(fragments: Fragments) -> str:
    return TEXT_SEPARATOR.join(str(fragment) for fragment in fragments if fragment)


class OpenAPISpecParser:
    """Parser for OpenAPI 3 and Swagger 2 definitions written in YAML or JSON."""

    spec_type = "openapi"

    def load(self, spec_definition: str) -> Mapping[str, Any]:
        try:
            definition = yaml.safe_load(spec_definition)
        except yaml.YAMLError as exc:
            raise SpecParseError(f"Definition is not valid YAML/JSON: {exc}") from exc
        if not isinstance(definition, Mapping):
            raise SpecParseError(f"Definition must be a mapping, got {type(definition).__name__}")
        return definition

    def extract_fragments(self, definition: Mapping[str, Any]) -> Fragments:
        info = definition.get("info")
        info = info if isinstance(info, Mapping) else {}
        fragments: Fragments = [info.get("title"), info.get("description")]

        raw_version = definition.get("openapi") or definition.get("swagger")
        extractor = _VERSION_EXTRACTORS.get(SpecVersion.detect(raw_version))
        if extractor is None:
            logger.debug("No path extractor for spec version %r", raw_version)
        else:
            fragments.extend(extractor(definition))
        return fragments

    def get_spec_text(self, spec_definition: str) -> str:
        return join_fragments(self.extract_fragments(self.load(spec_definition)))


def default_spec_handler() -> SpecHandler:
    return SpecHandler().add_spec_parser(OpenAPISpecParser())
