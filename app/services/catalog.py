"""Aggregation of TMDB trending lists into catalog rows."""

from __future__ import annotations

import logging
from typing import Iterable

from ..models import CatalogResult, PreviewItem
from ..stable_catalogs import StableCatalogDefinition
from ..utils import ImageRelay
from .resolver import TMDB_PREFIX
from .tmdb import TMDBClient, TMDBError, TMDBListItem

logger = logging.getLogger(__name__)


class CatalogAggregator:
    """Serves the fixed trending catalogs."""

    def __init__(
        self,
        tmdb_client: TMDBClient,
        images: ImageRelay,
        catalogs: Iterable[StableCatalogDefinition],
    ):
        self._tmdb = tmdb_client
        self._images = images
        self._catalogs = {
            (definition.content_type, definition.id): definition
            for definition in catalogs
        }

    @property
    def definitions(self) -> list[StableCatalogDefinition]:
        return list(self._catalogs.values())

    async def fetch_catalog(self, content_type: str, catalog_id: str) -> CatalogResult:
        definition = self._catalogs.get((content_type, catalog_id))
        if definition is None:
            return CatalogResult.degraded("unknown_catalog")

        try:
            results = await self._tmdb.fetch_trending(
                content_type, window=definition.window
            )
        except TMDBError as exc:
            logger.warning("Catalog %s/%s failed: %s", content_type, catalog_id, exc)
            return CatalogResult.degraded("upstream_error")

        return CatalogResult(
            items=[
                self._preview(item, content_type)
                for item in results
                if item.id is not None
            ]
        )

    def _preview(self, item: TMDBListItem, content_type: str) -> PreviewItem:
        return PreviewItem(
            id=f"{TMDB_PREFIX}{item.id}",
            type=content_type,
            title=item.title or item.name or "",
            poster_url=self._images.poster(item.poster_path),
            description=item.overview,
        )
