"""Tests for TMDB details aggregation into meta objects."""

from __future__ import annotations

import httpx
import pytest

from app.models import Outcome
from app.services.metadata import MetadataAggregator, build_metadata_record
from app.services.resolver import IdCache, IdentifierResolver
from app.services.tmdb import TMDBClient, TMDBDetails
from app.utils import LOCALES, ImageRelay
from conftest import build_settings, movie_details

BASE_URL = "https://api.example.com/3"
RELAY = ImageRelay("https://wsrv.nl/", "https://image.tmdb.org/t/p")
RU = LOCALES["ru"]


def build_record(payload, **kwargs):
    options = {
        "requested_id": "tt0111161",
        "content_type": "movie",
        "images": RELAY,
        "locale": RU,
    }
    options.update(kwargs)
    return build_metadata_record(TMDBDetails.model_validate(payload), **options)


def test_movie_record_fields() -> None:
    record = build_record(movie_details())

    assert record.id == "tt0111161"
    assert record.type == "movie"
    assert record.title == "Побег из Шоушенка"
    assert record.poster_url == (
        "https://wsrv.nl/?url=https%3A%2F%2Fimage.tmdb.org%2Ft%2Fp%2Fw500%2Fp.jpg"
    )
    assert record.background_url == (
        "https://wsrv.nl/?url=https%3A%2F%2Fimage.tmdb.org%2Ft%2Fp%2Foriginal%2Fb.jpg"
    )
    assert record.logo_url == RELAY.poster("/logo.png")
    assert record.release_year == "1994"
    assert record.runtime_label == "2 ч 22 мин"
    assert record.genres == ["драма", "криминал"]
    assert record.rating_label == "8.7"
    assert record.cast == [f"Actor {index}" for index in range(1, 9)]
    assert record.directors == ["Frank Darabont"]
    assert [trailer.video_source for trailer in record.trailers] == [
        "trailer-1",
        "teaser-1",
    ]
    assert {trailer.kind for trailer in record.trailers} == {"Trailer"}
    assert record.default_trailer_source == "trailer-1"


def test_series_record_falls_back_to_series_fields() -> None:
    payload = {
        "id": 1399,
        "name": "Игра престолов",
        "first_air_date": "2011-04-17",
        "episode_run_time": [60, 55],
        "overview": "",
        "poster_path": None,
        "vote_average": 0,
        "genres": None,
        "credits": {"cast": [{"name": "Emilia Clarke"}], "crew": []},
    }
    record = build_record(payload, requested_id="tmdb:1399", content_type="series")

    assert record.id == "tmdb:1399"
    assert record.title == "Игра престолов"
    assert record.release_year == "2011"
    assert record.runtime_label == "1 ч"
    assert record.description == RU.no_description
    assert record.poster_url is None
    assert record.background_url is None
    assert record.logo_url is None
    assert record.rating_label is None
    assert record.genres == []
    assert record.cast == ["Emilia Clarke"]
    assert record.directors == []


def test_record_without_optional_sections() -> None:
    record = build_record({"id": 1})

    assert record.title == ""
    assert record.release_year == ""
    assert record.runtime_label is None
    assert record.trailers == []
    assert record.default_trailer_source is None
    assert record.cast == []


def test_record_payload_uses_stremio_field_names() -> None:
    payload = build_record(movie_details()).to_payload()

    assert payload["name"] == "Побег из Шоушенка"
    assert payload["releaseInfo"] == "1994"
    assert payload["imdbRating"] == "8.7"
    assert payload["director"] == ["Frank Darabont"]
    assert payload["trailers"][0] == {"source": "trailer-1", "type": "Trailer"}
    assert payload["behaviorHints"] == {"defaultVideoId": "trailer-1"}


def test_record_payload_omits_missing_trailer_hint() -> None:
    payload = build_record(movie_details(videos={"results": []})).to_payload()

    assert payload["trailers"] == []
    assert payload["behaviorHints"] == {}
    assert "runtime" in payload


@pytest.mark.parametrize(
    ("vote_average", "expected"),
    [(8.712, "8.7"), (7.25, "7.3"), (6.25, "6.3"), (8.75, "8.8"), (10, "10.0")],
)
def test_rating_rounds_half_up(vote_average: float, expected: str) -> None:
    record = build_record(movie_details(vote_average=vote_average))

    assert record.rating_label == expected


def test_partial_video_and_logo_entries_are_skipped() -> None:
    payload = movie_details(
        videos={
            "results": [
                {"key": None, "site": "YouTube", "type": "Clip"},
                {"key": None, "site": "YouTube", "type": "Trailer"},
                {"key": "trailer-1", "site": "YouTube", "type": "Trailer"},
            ]
        },
        images={"logos": [{"file_path": None}, {"iso_639_1": "en"}, {"file_path": "/logo.png"}]},
    )
    record = build_record(payload)

    assert [trailer.video_source for trailer in record.trailers] == ["trailer-1"]
    assert record.logo_url == RELAY.poster("/logo.png")


def test_cast_limit_is_configurable() -> None:
    record = build_record(movie_details(), cast_limit=3)

    assert record.cast == ["Actor 1", "Actor 2", "Actor 3"]


def make_aggregator(http_client: httpx.AsyncClient, **settings_overrides):
    client = TMDBClient(build_settings(**settings_overrides), http_client)
    resolver = IdentifierResolver(client, IdCache())
    return MetadataAggregator(client, resolver, RELAY, locale=RU)


@pytest.mark.anyio("asyncio")
async def test_fetch_meta_resolves_then_fetches_once() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path.startswith("/3/find/"):
            return httpx.Response(200, json={"movie_results": [{"id": 278}]})
        return httpx.Response(200, json=movie_details())

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as http_client:
        result = await make_aggregator(http_client).fetch_meta("movie", "tt0111161")

    assert result.outcome is Outcome.SUCCESS
    assert result.record is not None
    assert result.record.id == "tt0111161"
    assert len(requests) == 2
    detail_request = requests[1]
    assert detail_request.url.path == "/3/movie/278"
    assert detail_request.url.params["append_to_response"] == "videos,images,credits"
    assert detail_request.url.params["include_image_language"] == "ru,en,null"


@pytest.mark.anyio("asyncio")
async def test_fetch_meta_tolerates_video_without_key() -> None:
    videos = movie_details()["videos"]["results"] + [
        {"key": None, "site": "YouTube", "type": "Clip"}
    ]

    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=movie_details(videos={"results": videos}))

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as http_client:
        result = await make_aggregator(http_client).fetch_meta("movie", "tmdb:278")

    assert result.outcome is Outcome.SUCCESS
    assert result.record is not None
    assert [trailer.video_source for trailer in result.record.trailers] == [
        "trailer-1",
        "teaser-1",
    ]


@pytest.mark.anyio("asyncio")
async def test_fetch_meta_series_uses_tv_endpoint() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"id": 1399, "name": "Игра престолов"})

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as http_client:
        result = await make_aggregator(http_client).fetch_meta("series", "tmdb:1399")

    assert [request.url.path for request in requests] == ["/3/tv/1399"]
    assert result.to_payload()["meta"]["name"] == "Игра престолов"


@pytest.mark.anyio("asyncio")
async def test_fetch_meta_degrades_when_unresolved() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"movie_results": [], "tv_results": []})

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as http_client:
        result = await make_aggregator(http_client).fetch_meta("movie", "tt0000001")

    assert result.outcome is Outcome.DEGRADED
    assert result.reason == "unresolved"
    assert result.to_payload() == {"meta": {}}


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"status_message": "boom"}),
        httpx.Response(200, content=b"not json"),
        httpx.Response(200, json={"title": "missing id"}),
    ],
)
async def test_fetch_meta_degrades_on_upstream_failure(response: httpx.Response) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return response

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as http_client:
        result = await make_aggregator(http_client).fetch_meta("movie", "tmdb:278")

    assert result.outcome is Outcome.DEGRADED
    assert result.reason == "upstream_error"
    assert result.to_payload() == {"meta": {}}


@pytest.mark.anyio("asyncio")
async def test_fetch_meta_rejects_unsupported_type() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=movie_details())

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as http_client:
        result = await make_aggregator(http_client).fetch_meta("channel", "tmdb:278")

    assert result.reason == "unsupported_type"
    assert requests == []
