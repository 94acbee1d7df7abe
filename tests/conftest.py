"""Pytest configuration and test helpers."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest


# ``app`` is not installed as a distribution in a plain checkout; import it from the repo root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.config import Settings  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


def build_settings(**overrides: Any) -> Settings:
    """Return a settings object with defaults suitable for tests."""

    base: dict[str, Any] = {"TMDB_KEY": "test-key", "LANGUAGE": "ru-RU"}
    base.update(overrides)
    return Settings(_env_file=None, **base)  # type: ignore[arg-type]


def movie_details(**overrides: Any) -> dict[str, Any]:
    """Return a TMDB movie details payload with appended sub-resources."""

    payload: dict[str, Any] = {
        "id": 278,
        "title": "Побег из Шоушенка",
        "overview": "Бухгалтер Энди Дюфрейн обвинён в убийстве.",
        "poster_path": "/p.jpg",
        "backdrop_path": "/b.jpg",
        "release_date": "1994-09-23",
        "runtime": 142,
        "genres": [{"id": 18, "name": "драма"}, {"id": 80, "name": "криминал"}],
        "vote_average": 8.712,
        "videos": {
            "results": [
                {"key": "featurette", "site": "YouTube", "type": "Featurette"},
                {"key": "trailer-1", "site": "YouTube", "type": "Trailer"},
                {"key": "vimeo-1", "site": "Vimeo", "type": "Trailer"},
                {"key": "teaser-1", "site": "YouTube", "type": "Teaser"},
            ]
        },
        "images": {"logos": [{"file_path": "/logo.png"}, {"file_path": "/alt.png"}]},
        "credits": {
            "cast": [{"name": f"Actor {index}"} for index in range(1, 11)],
            "crew": [
                {"name": "Frank Darabont", "job": "Director"},
                {"name": "Niki Marvin", "job": "Producer"},
            ],
        },
    }
    payload.update(overrides)
    return payload
