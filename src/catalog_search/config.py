"""Centralized configuration for catalog-search using Pydantic Settings."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from catalog_search.search.analyzers import available_analyzers


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``CATALOG_SEARCH_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Search behaviour
    page_size: int = Field(default=25, ge=1, description="Number of results returned per page")
    identifier_field: str = Field(
        default="location", min_length=1, description="Document field holding the unique identifier"
    )
    analyzer: str = Field(default="default", description="Analyzer used for indexing and query terms")
    fuzzy_edit_distance: int = Field(
        default=2, ge=0, le=3, description="Maximum edit distance for typo-tolerant matching"
    )

    # Logging
    log_level: Literal["debug", "info", "warning", "error", "critical"] = Field(
        default="info", description="Root logging level"
    )
    json_logs: bool = Field(default=True, description="Emit structured JSON logs")

    # Observability
    service_name: str = Field(default="catalog-search", description="Service name reported to OpenTelemetry")

    @field_validator("log_level", mode="before")
    @classmethod
    def _lower_log_level(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value

    @field_validator("analyzer")
    @classmethod
    def _check_analyzer(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in available_analyzers():
            raise ValueError(f"Unknown analyzer '{value}'. Available: {available_analyzers()}")
        return normalized
