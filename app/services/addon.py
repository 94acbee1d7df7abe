"""Addon capability set consumed by the HTTP router."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol, Sequence

from .. import __version__
from ..models import CatalogResult, MetaResult
from ..stable_catalogs import StableCatalogDefinition
from .catalog import CatalogAggregator
from .metadata import MetadataAggregator

MANIFEST_ID = "org.tmdbproxy.by"
MANIFEST_VERSION = __version__
MANIFEST_DESCRIPTION = "TMDB без VPN. Постеры и описание на русском."

ResourceResult = CatalogResult | MetaResult
ResourceHandler = Callable[[str, str], Awaitable[ResourceResult]]


class AddonInterface(Protocol):
    """One coroutine per supported resource plus the static manifest."""

    @property
    def manifest(self) -> dict[str, Any]: ...

    async def catalog(self, content_type: str, catalog_id: str) -> CatalogResult: ...

    async def meta(self, content_type: str, meta_id: str) -> MetaResult: ...


def resource_handlers(addon: AddonInterface) -> dict[str, ResourceHandler]:
    """Return the dispatch table keyed by resource name."""

    return {"catalog": addon.catalog, "meta": addon.meta}


def build_manifest(
    name: str, catalogs: Sequence[StableCatalogDefinition]
) -> dict[str, Any]:
    """Return the addon descriptor advertised at ``/manifest.json``."""

    return {
        "id": MANIFEST_ID,
        "version": MANIFEST_VERSION,
        "name": name,
        "description": MANIFEST_DESCRIPTION,
        "resources": ["catalog", "meta"],
        "types": ["movie", "series"],
        "idPrefixes": ["tmdb", "tt"],
        "catalogs": [definition.to_manifest_entry() for definition in catalogs],
    }


class TMDBAddon:
    """Addon backed by the TMDB catalog and metadata aggregators."""

    def __init__(
        self,
        name: str,
        catalogs: CatalogAggregator,
        metadata: MetadataAggregator,
    ):
        self._catalogs = catalogs
        self._metadata = metadata
        self._manifest = build_manifest(name, catalogs.definitions)

    @property
    def manifest(self) -> dict[str, Any]:
        return self._manifest

    async def catalog(self, content_type: str, catalog_id: str) -> CatalogResult:
        return await self._catalogs.fetch_catalog(content_type, catalog_id)

    async def meta(self, content_type: str, meta_id: str) -> MetaResult:
        return await self._metadata.fetch_meta(content_type, meta_id)
