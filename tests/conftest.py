"""Shared test fixtures and configuration."""

import os
from pathlib import Path
import sys

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


# Complete test environment that overrides every configurable value
TEST_ENV = {
    "CATALOG_SEARCH_PAGE_SIZE": "25",
    "CATALOG_SEARCH_IDENTIFIER_FIELD": "location",
    "CATALOG_SEARCH_ANALYZER": "default",
    "CATALOG_SEARCH_FUZZY_EDIT_DISTANCE": "2",
    "CATALOG_SEARCH_LOG_LEVEL": "info",
    "CATALOG_SEARCH_JSON_LOGS": "true",
    "CATALOG_SEARCH_SERVICE_NAME": "catalog-search-tests",
}


for key, value in TEST_ENV.items():
    os.environ[key] = value

from catalog_search.config import Settings
from catalog_search.search.engine import SearchEngine


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset search settings to test defaults before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def engine(settings: Settings) -> SearchEngine:
    return SearchEngine(settings)


@pytest.fixture
def make_documents():
    """Factory for uniform documents with distinct locations."""

    def _make(count: int, *, prefix: str = "test/location/", **fields: str) -> list[dict[str, str]]:
        base = {"title": "testTitle", "text": "testText"}
        base.update(fields)
        return [{**base, "location": f"{prefix}{i}"} for i in range(count)]

    return _make
