"""Fixed catalog definitions backed by TMDB trending lists."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


ContentType = Literal["movie", "series"]
TrendingWindow = Literal["day", "week"]


@dataclass(frozen=True)
class StableCatalogDefinition:
    """Describes a fixed catalog row shown in Stremio."""

    id: str
    name: str
    content_type: ContentType
    window: TrendingWindow = "week"

    def to_manifest_entry(self) -> dict[str, object]:
        return {"type": self.content_type, "id": self.id, "name": self.name}


STABLE_CATALOGS: tuple[StableCatalogDefinition, ...] = (
    StableCatalogDefinition(
        id="tmdb.trending",
        name="TMDB: Фильмы (RU)",
        content_type="movie",
    ),
    StableCatalogDefinition(
        id="tmdb.series",
        name="TMDB: Сериалы (RU)",
        content_type="series",
    ),
)

TEST_CATALOG = StableCatalogDefinition(
    id="tmdb.test",
    name="TMDB: Test",
    content_type="movie",
    window="day",
)


def enabled_catalogs(
    *, include_test: bool = False
) -> tuple[StableCatalogDefinition, ...]:
    """Return the catalogs served by this deployment."""

    if include_test:
        return (*STABLE_CATALOGS, TEST_CATALOG)
    return STABLE_CATALOGS
