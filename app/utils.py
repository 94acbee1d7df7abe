"""Presentation helpers for the TMDB proxy service."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote


@dataclass(frozen=True, slots=True)
class Locale:
    """Localized words used when rendering derived metadata fields."""

    hours: str
    minutes: str
    no_description: str


LOCALES: dict[str, Locale] = {
    "ru": Locale(hours="ч", minutes="мин", no_description="Описание отсутствует."),
    "en": Locale(hours="h", minutes="min", no_description="No description available."),
}
DEFAULT_LOCALE = LOCALES["en"]


def locale_for(language: str) -> Locale:
    """Return the locale matching a TMDB language tag such as ``ru-RU``."""

    prefix = (language or "").split("-", 1)[0].lower()
    return LOCALES.get(prefix, DEFAULT_LOCALE)


def format_runtime(minutes: int | None, locale: Locale = DEFAULT_LOCALE) -> str | None:
    """Render a minute count as ``1 h 40 min`` style text."""

    if not minutes:
        return None
    hours, rest = divmod(int(minutes), 60)
    if hours == 0:
        return f"{rest} {locale.minutes}"
    if rest == 0:
        return f"{hours} {locale.hours}"
    return f"{hours} {locale.hours} {rest} {locale.minutes}"


class ImageRelay:
    """Builds relay URLs that proxy TMDB artwork through an image service."""

    def __init__(
        self,
        relay_url: str,
        image_base_url: str,
        *,
        poster_size: str = "w500",
        background_size: str = "original",
    ) -> None:
        self._relay_url = relay_url
        self._image_base_url = image_base_url.rstrip("/")
        self._poster_size = poster_size
        self._background_size = background_size

    def poster(self, path: str | None) -> str | None:
        """Return the relayed poster URL for a TMDB image path."""

        return self._relay(path, self._poster_size)

    def background(self, path: str | None) -> str | None:
        """Return the relayed full-resolution backdrop URL."""

        return self._relay(path, self._background_size)

    def origin_url(self, path: str, size: str) -> str:
        return f"{self._image_base_url}/{size}{path}"

    def _relay(self, path: str | None, size: str) -> str | None:
        if not path:
            return None
        return f"{self._relay_url}?url={quote(self.origin_url(path, size), safe='')}"
