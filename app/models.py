"""Pydantic models describing addon payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ContentType = Literal["movie", "series"]


class Outcome(str, Enum):
    """How an aggregator produced its result."""

    SUCCESS = "success"
    DEGRADED = "degraded"


class PreviewItem(BaseModel):
    """Minimal entry shown in a catalog row."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: ContentType
    title: str = Field(serialization_alias="name")
    poster_url: str | None = Field(default=None, serialization_alias="poster")
    description: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Trailer(BaseModel):
    """A playable trailer reference."""

    model_config = ConfigDict(populate_by_name=True)

    video_source: str = Field(serialization_alias="source")
    kind: Literal["Trailer"] = Field(default="Trailer", serialization_alias="type")


class MetadataRecord(BaseModel):
    """Normalized, localized metadata for a single movie or series."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: ContentType
    title: str = Field(serialization_alias="name")
    poster_url: str | None = Field(default=None, serialization_alias="poster")
    background_url: str | None = Field(default=None, serialization_alias="background")
    logo_url: str | None = Field(default=None, serialization_alias="logo")
    description: str
    release_year: str = Field(default="", serialization_alias="releaseInfo")
    runtime_label: str | None = Field(default=None, serialization_alias="runtime")
    genres: list[str] = Field(default_factory=list)
    rating_label: str | None = Field(default=None, serialization_alias="imdbRating")
    cast: list[str] = Field(default_factory=list)
    directors: list[str] = Field(default_factory=list, serialization_alias="director")
    trailers: list[Trailer] = Field(default_factory=list)

    @property
    def default_trailer_source(self) -> str | None:
        """Return the video played by default, i.e. the first trailer."""

        if not self.trailers:
            return None
        return self.trailers[0].video_source

    def to_payload(self) -> dict[str, Any]:
        """Return the Stremio-compatible meta object."""

        payload = self.model_dump(by_alias=True, exclude_none=True)
        hints: dict[str, Any] = {}
        default_source = self.default_trailer_source
        if default_source is not None:
            hints["defaultVideoId"] = default_source
        payload["behaviorHints"] = hints
        return payload


@dataclass(slots=True)
class MetaResult:
    """Result of a metadata lookup; ``record`` is ``None`` when degraded."""

    record: MetadataRecord | None
    outcome: Outcome = Outcome.SUCCESS
    reason: str | None = None

    @classmethod
    def degraded(cls, reason: str) -> "MetaResult":
        return cls(record=None, outcome=Outcome.DEGRADED, reason=reason)

    def to_payload(self) -> dict[str, Any]:
        if self.record is None:
            return {"meta": {}}
        return {"meta": self.record.to_payload()}


@dataclass(slots=True)
class CatalogResult:
    """Result of a catalog lookup."""

    items: list[PreviewItem] = field(default_factory=list)
    outcome: Outcome = Outcome.SUCCESS
    reason: str | None = None

    @classmethod
    def degraded(cls, reason: str) -> "CatalogResult":
        return cls(items=[], outcome=Outcome.DEGRADED, reason=reason)

    def to_payload(self) -> dict[str, Any]:
        return {"metas": [item.to_payload() for item in self.items]}
