"""Client and payload models for The Movie Database (TMDB) API."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from ..config import Settings
from ..stable_catalogs import TrendingWindow

logger = logging.getLogger(__name__)

DETAIL_APPENDS = "videos,images,credits"


class TMDBError(RuntimeError):
    """Raised when a TMDB request cannot produce a usable payload."""


class TMDBConfigurationError(TMDBError):
    """Raised when the service has no TMDB API key configured."""


class TMDBModel(BaseModel):
    """Base model for TMDB payloads; unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        """Let ``null`` fields fall back to their declared defaults."""

        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class TMDBGenre(TMDBModel):
    id: int | None = None
    name: str = ""


class TMDBVideo(TMDBModel):
    key: str | None = None
    site: str | None = None
    type: str | None = None
    name: str | None = None


class TMDBImage(TMDBModel):
    file_path: str | None = None


class TMDBImages(TMDBModel):
    logos: list[TMDBImage] = []
    posters: list[TMDBImage] = []
    backdrops: list[TMDBImage] = []


class TMDBCastMember(TMDBModel):
    name: str = ""
    character: str | None = None


class TMDBCrewMember(TMDBModel):
    name: str = ""
    job: str | None = None


class TMDBCredits(TMDBModel):
    cast: list[TMDBCastMember] = []
    crew: list[TMDBCrewMember] = []


class TMDBVideoList(TMDBModel):
    results: list[TMDBVideo] = []


class TMDBDetails(TMDBModel):
    """Movie or TV details with the appended sub-resources.

    Movies carry ``title``/``release_date``/``runtime`` while series carry
    ``name``/``first_air_date``/``episode_run_time``; every field is optional.
    """

    id: int
    title: str | None = None
    name: str | None = None
    overview: str | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    release_date: str | None = None
    first_air_date: str | None = None
    runtime: int | None = None
    episode_run_time: list[int] = []
    genres: list[TMDBGenre] = []
    vote_average: float | None = None
    videos: TMDBVideoList | None = None
    images: TMDBImages | None = None
    credits: TMDBCredits | None = None


class TMDBListItem(TMDBModel):
    """Entry of a find or trending result list."""

    id: int | None = None
    title: str | None = None
    name: str | None = None
    overview: str | None = None
    poster_path: str | None = None


class TMDBFindResult(TMDBModel):
    movie_results: list[TMDBListItem] = []
    tv_results: list[TMDBListItem] = []


class TMDBPage(TMDBModel):
    page: int | None = None
    results: list[TMDBListItem] = []


ModelT = TypeVar("ModelT", bound=TMDBModel)


def tmdb_media_type(content_type: str) -> str:
    """Map a Stremio content type onto the TMDB path segment."""

    return "movie" if content_type == "movie" else "tv"


class TMDBClient:
    """Thin typed wrapper around the TMDB v3 HTTP API."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client

    @property
    def language(self) -> str:
        return self._settings.tmdb_language

    async def find_by_imdb_id(self, imdb_id: str) -> TMDBFindResult:
        """Translate an IMDb identifier into TMDB movie/TV results."""

        return await self._get(
            f"/find/{imdb_id}",
            TMDBFindResult,
            params={"external_source": "imdb_id"},
        )

    async def fetch_details(self, tmdb_id: str, content_type: str) -> TMDBDetails:
        """Fetch an entity together with its videos, images and credits."""

        params = {
            "append_to_response": DETAIL_APPENDS,
            "include_image_language": f"{self._settings.language_code},en,null",
        }
        return await self._get(
            f"/{tmdb_media_type(content_type)}/{tmdb_id}", TMDBDetails, params=params
        )

    async def fetch_trending(
        self, content_type: str, window: TrendingWindow = "week"
    ) -> list[TMDBListItem]:
        """Return the trending list for a content type."""

        page = await self._get(
            f"/trending/{tmdb_media_type(content_type)}/{window}", TMDBPage
        )
        return page.results

    async def _get(
        self,
        path: str,
        model: type[ModelT],
        *,
        params: dict[str, Any] | None = None,
    ) -> ModelT:
        api_key = self._settings.tmdb_api_key
        if not api_key:
            raise TMDBConfigurationError("TMDB API key is not configured")

        query: dict[str, Any] = {"api_key": api_key, "language": self.language}
        if params:
            query.update(params)

        logger.debug("TMDB GET %s", path)
        try:
            response = await self._client.get(path, params=query)
        except httpx.HTTPError as exc:
            raise TMDBError(
                f"TMDB request to {path} failed: {exc.__class__.__name__}"
            ) from exc

        if response.status_code >= 400:
            raise TMDBError(
                f"TMDB request to {path} returned HTTP {response.status_code}"
            )

        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise TMDBError(f"TMDB returned a malformed body for {path}") from exc
