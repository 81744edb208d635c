"""Index document files and run a single search query from the command line."""

# ruff: noqa: T201  # CLI intentionally prints results

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path
import sys
from typing import Any

import orjson
from pydantic import ValidationError
import yaml

from catalog_search.apidocs import API_DOCUMENT_TYPE, ApiDocumentCollator
from catalog_search.config import Settings
from catalog_search.domain.search import SearchQuery
from catalog_search.observability.logging import configure_logging
from catalog_search.observability.tracing import init_tracing
from catalog_search.search.engine import SearchEngine
from catalog_search.search.errors import SearchEngineError


def _split_pair(raw: str, option: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"{option} expects KEY=VALUE, got '{raw}'")
    return key, value


def load_records(path: Path) -> list[Any]:
    """Load a JSON or YAML file holding a list of records (or a single record)."""
    raw = path.read_bytes()
    if path.suffix.lower() in {".yaml", ".yml"}:
        data = list(yaml.safe_load_all(raw.decode("utf-8")))
        if len(data) == 1:
            data = data[0]
    else:
        data = orjson.loads(raw)
    if isinstance(data, list):
        return data
    return [data]


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("term", nargs="?", default="", help="Search term (empty matches everything)")
    parser.add_argument(
        "--index",
        action="append",
        default=[],
        metavar="TYPE=PATH",
        help="Index the documents in PATH (JSON or YAML) under TYPE; repeatable",
    )
    parser.add_argument(
        "--api",
        action="append",
        default=[],
        metavar="PATH",
        help=f"Index API entities from PATH under '{API_DOCUMENT_TYPE}'; repeatable",
    )
    parser.add_argument("--filter", action="append", default=[], metavar="FIELD=VALUE", help="Required field value")
    parser.add_argument("--type", action="append", default=[], dest="types", help="Restrict search to TYPE")
    parser.add_argument("--cursor", default=None, help="Page cursor returned by a previous search")
    parser.add_argument("--page-size", type=int, default=None, help="Override the configured page size")
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    overrides: dict[str, Any] = {}
    if args.page_size is not None:
        overrides["page_size"] = args.page_size
    if args.log_level:
        overrides["log_level"] = args.log_level
    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        parser.error(str(exc))
    configure_logging(settings.log_level, settings.json_logs, stream=sys.stderr)
    init_tracing(settings.service_name)

    try:
        filters = dict(_split_pair(raw, "--filter") for raw in args.filter)
        index_specs = [_split_pair(raw, "--index") for raw in args.index]
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))

    engine = SearchEngine(settings)
    try:
        for type_name, raw_path in index_specs:
            engine.index(type_name, load_records(Path(raw_path)))
        if args.api:
            collator = ApiDocumentCollator()
            entities = [entity for raw_path in args.api for entity in load_records(Path(raw_path))]
            engine.index(collator.document_type, list(collator.collate(entities)))

        result_set = engine.query(
            SearchQuery(term=args.term, filters=filters, types=args.types or None, page_cursor=args.cursor)
        )
    except (OSError, orjson.JSONDecodeError, yaml.YAMLError, SearchEngineError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(orjson.dumps(result_set.model_dump(), option=orjson.OPT_INDENT_2).decode("utf-8"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
