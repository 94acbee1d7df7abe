"""Entry point for the FastAPI-powered Stremio addon."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, settings
from .models import Outcome
from .services.addon import (
    MANIFEST_VERSION,
    AddonInterface,
    TMDBAddon,
    resource_handlers,
)
from .services.catalog import CatalogAggregator
from .services.metadata import MetadataAggregator
from .services.resolver import IdCache, IdentifierResolver
from .services.tmdb import TMDBClient
from .stable_catalogs import enabled_catalogs
from .utils import ImageRelay, locale_for

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

MANIFEST_PATH = "/manifest.json"
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "*",
}

app: FastAPI


def build_addon(config: Settings, http_client: httpx.AsyncClient) -> TMDBAddon:
    """Wire the TMDB client, resolver and aggregators into an addon."""

    if not config.tmdb_api_key:
        logger.warning("TMDB_KEY is not set; catalog and meta responses will be empty")

    tmdb = TMDBClient(config, http_client)
    images = ImageRelay(
        str(config.image_relay_url),
        str(config.tmdb_image_url),
        poster_size=config.poster_size,
        background_size=config.background_size,
    )
    resolver = IdentifierResolver(
        tmdb, IdCache(config.id_cache_size, config.id_cache_ttl_seconds)
    )
    catalogs = CatalogAggregator(
        tmdb, images, enabled_catalogs(include_test=config.enable_test_catalog)
    )
    metadata = MetadataAggregator(
        tmdb,
        resolver,
        images,
        locale=locale_for(config.tmdb_language),
        cast_limit=config.cast_limit,
    )
    return TMDBAddon(config.app_name, catalogs, metadata)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    exit_stack = AsyncExitStack()
    tmdb_http_client = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            base_url=str(settings.tmdb_api_url),
            timeout=httpx.Timeout(settings.upstream_timeout_seconds, connect=5.0),
        )
    )
    fastapi_app.state.addon = build_addon(settings, tmdb_http_client)

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Localized TMDB catalogs and metadata for Stremio",
        version=MANIFEST_VERSION,
        lifespan=lifespan,
    )
    register_routes(fastapi_app)
    return fastapi_app


def get_addon(app: FastAPI) -> AddonInterface:
    addon = getattr(app.state, "addon", None)
    if addon is None:
        raise RuntimeError("Addon not initialised")
    return addon


def _error_response(
    status_code: int, message: str, **extra: Any
) -> JSONResponse:
    return JSONResponse({"err": message, **extra}, status_code=status_code)


def register_routes(fastapi_app: FastAPI, config: Settings | None = None) -> None:
    app_settings = config or settings
    cache_control = f"max-age={app_settings.response_cache_seconds}, public"

    @fastapi_app.middleware("http")
    async def cors_middleware(request: Request, call_next) -> Response:
        if request.method == "OPTIONS":
            response: Response = Response(status_code=200)
        else:
            response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @fastapi_app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        response = _error_response(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @fastapi_app.get("/", include_in_schema=False)
    @fastapi_app.get("/configure", include_in_schema=False)
    async def configure() -> RedirectResponse:
        return RedirectResponse(MANIFEST_PATH, status_code=302)

    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get(MANIFEST_PATH)
    async def manifest() -> dict[str, Any]:
        return get_addon(fastapi_app).manifest

    @fastapi_app.get("/{resource}/{content_type}/{resource_id}.json")
    async def resource_endpoint(
        resource: str, content_type: str, resource_id: str
    ) -> JSONResponse:
        try:
            handler = resource_handlers(get_addon(fastapi_app)).get(resource)
            if handler is None:
                return _error_response(404, "Resource not supported", resource=resource)

            result = await handler(content_type, resource_id)
            headers: dict[str, str] = {}
            if result.outcome is Outcome.SUCCESS:
                headers["Cache-Control"] = cache_control
            else:
                logger.info(
                    "Degraded %s response for %s/%s: %s",
                    resource,
                    content_type,
                    resource_id,
                    result.reason,
                )
            return JSONResponse(result.to_payload(), headers=headers)
        except Exception:
            logger.exception(
                "Handler error for /%s/%s/%s", resource, content_type, resource_id
            )
            return _error_response(500, "Handler error", resource=resource)


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual execution
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )
