"""Aggregation of TMDB entity details into addon meta objects."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from ..models import MetadataRecord, MetaResult, Trailer
from ..utils import DEFAULT_LOCALE, ImageRelay, Locale, format_runtime
from .resolver import IdentifierResolver
from .tmdb import TMDBClient, TMDBDetails, TMDBError, TMDBVideo

logger = logging.getLogger(__name__)

SUPPORTED_TYPES = frozenset({"movie", "series"})
TRAILER_SITE = "YouTube"
TRAILER_KINDS = frozenset({"Trailer", "Teaser"})
DIRECTOR_JOB = "Director"


def select_trailers(videos: list[TMDBVideo]) -> list[Trailer]:
    """Keep YouTube trailers and teasers in the order TMDB lists them."""

    return [
        Trailer(video_source=video.key)
        for video in videos
        if video.key
        and video.site == TRAILER_SITE
        and video.type in TRAILER_KINDS
    ]


def _release_year(details: TMDBDetails) -> str:
    return (details.release_date or details.first_air_date or "")[:4]


def _runtime_minutes(details: TMDBDetails) -> int | None:
    if details.runtime:
        return details.runtime
    if details.episode_run_time:
        return details.episode_run_time[0]
    return None


def _rating_label(details: TMDBDetails) -> str | None:
    # TMDB reports 0 for entities without votes.
    if not details.vote_average:
        return None
    # Half-up on the exact binary value: 7.25 -> "7.3".
    rating = Decimal(details.vote_average).quantize(
        Decimal("0.1"), rounding=ROUND_HALF_UP
    )
    return str(rating)


def build_metadata_record(
    details: TMDBDetails,
    *,
    requested_id: str,
    content_type: str,
    images: ImageRelay,
    locale: Locale = DEFAULT_LOCALE,
    cast_limit: int = 8,
) -> MetadataRecord:
    """Map a TMDB details payload onto the normalized meta schema.

    The record keeps ``requested_id`` so clients can correlate the response
    with the identifier they asked for.
    """

    logos = details.images.logos if details.images else []
    logo_path = next((logo.file_path for logo in logos if logo.file_path), None)
    videos = details.videos.results if details.videos else []
    cast = details.credits.cast if details.credits else []
    crew = details.credits.crew if details.credits else []

    return MetadataRecord(
        id=requested_id,
        type=content_type,
        title=details.title or details.name or "",
        poster_url=images.poster(details.poster_path),
        background_url=images.background(details.backdrop_path),
        logo_url=images.poster(logo_path),
        description=details.overview or locale.no_description,
        release_year=_release_year(details),
        runtime_label=format_runtime(_runtime_minutes(details), locale),
        genres=[genre.name for genre in details.genres if genre.name],
        rating_label=_rating_label(details),
        cast=[member.name for member in cast[:cast_limit] if member.name],
        directors=[
            member.name for member in crew if member.job == DIRECTOR_JOB and member.name
        ],
        trailers=select_trailers(videos),
    )


class MetadataAggregator:
    """Resolves an identifier and builds its meta object from one TMDB call."""

    def __init__(
        self,
        tmdb_client: TMDBClient,
        resolver: IdentifierResolver,
        images: ImageRelay,
        *,
        locale: Locale = DEFAULT_LOCALE,
        cast_limit: int = 8,
    ):
        self._tmdb = tmdb_client
        self._resolver = resolver
        self._images = images
        self._locale = locale
        self._cast_limit = cast_limit

    async def fetch_meta(self, content_type: str, external_id: str) -> MetaResult:
        if content_type not in SUPPORTED_TYPES:
            return MetaResult.degraded("unsupported_type")

        tmdb_id = await self._resolver.resolve(content_type, external_id)
        if tmdb_id is None:
            return MetaResult.degraded("unresolved")

        try:
            details = await self._tmdb.fetch_details(tmdb_id, content_type)
        except TMDBError as exc:
            logger.warning("Meta error for %s: %s", external_id, exc)
            return MetaResult.degraded("upstream_error")

        record = build_metadata_record(
            details,
            requested_id=external_id,
            content_type=content_type,
            images=self._images,
            locale=self._locale,
            cast_limit=self._cast_limit,
        )
        return MetaResult(record=record)
