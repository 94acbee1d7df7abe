"""Application configuration models."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LANGUAGE_RE = re.compile(r"^[a-z]{2}(-[A-Z]{2})?$")


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="TMDB Proxy (BY/RU)", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    tmdb_api_key: str | None = Field(
        default=None,
        alias="TMDB_KEY",
        validation_alias=AliasChoices("TMDB_KEY", "TMDB_API_KEY"),
    )
    tmdb_language: str = Field(default="ru-RU", alias="LANGUAGE")

    tmdb_api_url: HttpUrl = Field(
        default="https://api.themoviedb.org/3", alias="TMDB_API_URL"
    )
    tmdb_image_url: HttpUrl = Field(
        default="https://image.tmdb.org/t/p", alias="TMDB_IMAGE_URL"
    )
    image_relay_url: HttpUrl = Field(
        default="https://wsrv.nl/", alias="IMAGE_RELAY_URL"
    )
    poster_size: str = Field(default="w500", alias="POSTER_SIZE")
    background_size: str = Field(default="original", alias="BACKGROUND_SIZE")

    response_cache_seconds: int = Field(default=3_600, alias="CACHE_TTL", ge=60)
    upstream_timeout_seconds: float = Field(
        default=10.0, alias="UPSTREAM_TIMEOUT", gt=0, le=120
    )

    id_cache_size: int = Field(default=10_000, alias="ID_CACHE_SIZE", ge=1)
    id_cache_ttl_seconds: int = Field(
        default=604_800, alias="ID_CACHE_TTL", ge=0
    )

    cast_limit: int = Field(default=8, alias="CAST_LIMIT", ge=0, le=50)
    enable_test_catalog: bool = Field(default=False, alias="ENABLE_TEST_CATALOG")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )
    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("tmdb_api_key", mode="before")
    @classmethod
    def _blank_key_is_missing(cls, value: object) -> object:
        """Treat whitespace-only credentials as not configured."""

        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("tmdb_language")
    @classmethod
    def _validate_language(cls, value: str) -> str:
        value = value.strip()
        if not LANGUAGE_RE.match(value):
            raise ValueError("LANGUAGE must look like 'ru' or 'ru-RU'")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @property
    def language_code(self) -> str:
        """Return the two-letter language prefix, e.g. ``ru`` for ``ru-RU``."""

        return self.tmdb_language.split("-", 1)[0]

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
