"""Resolution of client identifiers into TMDB identifiers."""

from __future__ import annotations

import logging
import re
import threading
import time
from collections import OrderedDict
from typing import Callable

from .tmdb import TMDBClient, TMDBError

logger = logging.getLogger(__name__)

TMDB_PREFIX = "tmdb:"
IMDB_ID_RE = re.compile(r"^tt\d+$")

CacheKey = tuple[str, str]


class IdCache:
    """Bounded LRU cache of resolved TMDB identifiers.

    Entries older than ``ttl_seconds`` are treated as missing; a TTL of ``0``
    keeps entries until they are evicted by capacity.
    """

    def __init__(
        self,
        max_entries: int = 10_000,
        ttl_seconds: float = 0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._max_entries = max_entries
        self._ttl_seconds = max(0.0, float(ttl_seconds))
        self._clock = clock
        self._data: OrderedDict[CacheKey, tuple[float, str]] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: CacheKey) -> str | None:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._ttl_seconds and self._clock() - stored_at >= self._ttl_seconds:
                del self._data[key]
                return None
            self._data.move_to_end(key)
            return value

    def set(self, key: CacheKey, value: str) -> None:
        with self._lock:
            self._data[key] = (self._clock(), value)
            self._data.move_to_end(key)
            while len(self._data) > self._max_entries:
                self._data.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()


class IdentifierResolver:
    """Turns ``tmdb:<id>`` and IMDb identifiers into TMDB identifiers."""

    def __init__(self, tmdb_client: TMDBClient, cache: IdCache):
        self._tmdb = tmdb_client
        self._cache = cache

    async def resolve(self, content_type: str, external_id: str) -> str | None:
        """Return the TMDB id for ``external_id`` or ``None`` when unknown.

        Only successful lookups are cached so that a failed or empty lookup
        is retried on the next request.
        """

        if external_id.startswith(TMDB_PREFIX):
            return external_id[len(TMDB_PREFIX):] or None

        if not IMDB_ID_RE.match(external_id):
            logger.debug("Unsupported identifier %s for %s", external_id, content_type)
            return None

        key = (content_type, external_id)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Identifier cache hit for %s (%s)", external_id, content_type)
            return cached

        try:
            found = await self._tmdb.find_by_imdb_id(external_id)
        except TMDBError as exc:
            logger.warning("ID convert failed for %s: %s", external_id, exc)
            return None

        results = found.movie_results if content_type == "movie" else found.tv_results
        match_id = next((item.id for item in results if item.id is not None), None)
        if match_id is None:
            logger.info("No TMDB %s match for %s", content_type, external_id)
            return None

        tmdb_id = str(match_id)
        self._cache.set(key, tmdb_id)
        return tmdb_id
