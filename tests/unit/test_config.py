"""Unit tests for environment-driven settings."""

from pydantic import ValidationError
import pytest

from catalog_search.config import Settings


@pytest.mark.unit
class TestSettings:
    def test_test_environment_values(self, settings):
        assert settings.page_size == 25
        assert settings.identifier_field == "location"
        assert settings.analyzer == "default"
        assert settings.fuzzy_edit_distance == 2
        assert settings.service_name == "catalog-search-tests"

    def test_defaults_without_environment(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        for key in ("PAGE_SIZE", "SERVICE_NAME", "JSON_LOGS"):
            monkeypatch.delenv(f"CATALOG_SEARCH_{key}", raising=False)

        settings = Settings()

        assert settings.page_size == 25
        assert settings.service_name == "catalog-search"
        assert settings.json_logs is True

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("CATALOG_SEARCH_PAGE_SIZE", "50")
        monkeypatch.setenv("CATALOG_SEARCH_JSON_LOGS", "false")

        settings = Settings()

        assert settings.page_size == 50
        assert settings.json_logs is False

    def test_log_level_is_normalized(self, monkeypatch):
        monkeypatch.setenv("CATALOG_SEARCH_LOG_LEVEL", "DEBUG")

        assert Settings().log_level == "debug"

    def test_analyzer_name_is_normalized(self):
        assert Settings(analyzer="English-NoStem").analyzer == "english-nostem"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"page_size": 0},
            {"fuzzy_edit_distance": 4},
            {"analyzer": "klingon"},
            {"log_level": "verbose"},
            {"identifier_field": ""},
        ],
    )
    def test_invalid_values_rejected(self, overrides):
        with pytest.raises(ValidationError):
            Settings(**overrides)

    def test_invalid_environment_rejected(self, monkeypatch):
        monkeypatch.setenv("CATALOG_SEARCH_PAGE_SIZE", "-3")

        with pytest.raises(ValidationError):
            Settings()
