"""
Field normalization shared by all source adapters.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from urllib.parse import urljoin

from lxml.html import HtmlElement

from novelsource.schemas import DEFAULT_COVER, NovelStatus

COVER_ATTRS = ("data-src", "data-lazy-src", "src")

ONGOING_MARKERS = (
    "ongoing",
    "updating",
    "en curso",
    "devam ediyor",
    "em andamento",
    "продолжается",
    "مستمرة",
)

COMPLETED_MARKERS = (
    "completed",
    "finalizado",
    "completado",
    "completo",
    "tamamlandı",
    "завершено",
    "завершен",
    "مكتملة",
)


def resolve_cover(
    img: HtmlElement | None,
    default: str = DEFAULT_COVER,
    base_url: str | None = None,
) -> str:
    """Pick the cover URL of an ``<img>``, preferring lazy-load attributes.

    Args:
        img: The image element, or None when the selector found nothing.
        default: Placeholder returned when no attribute resolves.
        base_url: If given, relative URLs are resolved against it.

    Returns:
        The first non-blank of ``data-src``, ``data-lazy-src`` and ``src``,
        or ``default``.
    """
    if img is None:
        return default
    for attr in COVER_ATTRS:
        value = (img.get(attr) or "").strip()
        if value:
            return urljoin(base_url, value) if base_url else value
    return default


def join_genres(genres: Iterable[str]) -> str:
    """Join genre names into a single comma-separated string.

    Blank entries are dropped, so the result never has leading, trailing
    or doubled separators.
    """
    return ",".join(g for g in (s.strip() for s in genres) if g)


def map_status(text: str | None) -> NovelStatus:
    """Map a free-text status label onto :class:`NovelStatus`."""
    if not text:
        return NovelStatus.UNKNOWN
    lowered = text.strip().lower()
    if any(m in lowered for m in ONGOING_MARKERS):
        return NovelStatus.ONGOING
    if any(m in lowered for m in COMPLETED_MARKERS):
        return NovelStatus.COMPLETED
    return NovelStatus.UNKNOWN


class LabelTable:
    """Maps localized detail labels (``"Yazar:"``, ``"Autor:"``) to fields.

    Lookups ignore surrounding whitespace and letter case. Unknown labels
    return None so that new label variants are silently skipped.
    """

    __slots__ = ("_fields",)

    def __init__(self, labels: Mapping[str, str]) -> None:
        self._fields = {self._key(k): v for k, v in labels.items()}

    def lookup(self, label: str) -> str | None:
        return self._fields.get(self._key(label))

    @staticmethod
    def _key(label: str) -> str:
        return label.strip().casefold()

    def __len__(self) -> int:
        return len(self._fields)
