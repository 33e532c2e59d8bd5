"""Configuration models for taskvault."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class StoreConfig(BaseModel):
    """Storage configuration."""

    db_path: str | None = Field(
        default=None, description="Path to the SQLite database (default: user data dir)"
    )


class SearchConfig(BaseModel):
    """Full-text search configuration."""

    ngram_length: int = Field(default=3, ge=1)
    min_word_length: int = Field(default=1, ge=1)
    min_score: float = Field(default=0.3, ge=0.0, le=1.0)
    locale: str | None = Field(default=None, description="Locale used for lowercasing")
    include_digits: bool = Field(default=True)

    @field_validator("locale")
    @classmethod
    def normalize_locale(cls, v: str | None) -> str | None:
        """Store locales as lowercase tags with '-' separators (e.g. 'tr-tr')."""
        if v is None or not v.strip():
            return None
        return v.strip().replace("_", "-").lower()


class OutputConfig(BaseModel):
    """Output configuration."""

    format: Literal["pretty", "json", "yaml"] = Field(default="pretty")
    timezone: str | None = Field(
        default=None, description="Default time zone for new tasks (default: system)"
    )


class AppConfig(BaseModel):
    """Application configuration."""

    store: StoreConfig = Field(default_factory=StoreConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
