"""
Abstract base class providing common behavior for source adapters.
"""

from __future__ import annotations

import abc
import logging
import re
from collections.abc import Awaitable, Callable
from html import escape
from typing import Any, Self, TypeVar
from urllib.parse import urljoin

from lxml import html
from lxml.html import HtmlElement

from novelsource.plugins.base.fetcher import SourceFetcher
from novelsource.plugins.utils.throttle import DelayPolicy, FixedDelay
from novelsource.schemas import (
    DEFAULT_COVER,
    ChapterContent,
    ChapterSummary,
    NovelDetail,
    NovelSummary,
    PopularNovels,
    SourceConfig,
    SourceOptions,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_EMPTY_DOCUMENT = "<html><body></body></html>"


def supports_parse_page(source: object) -> bool:
    """Whether ``source`` implements the optional ``parse_page`` operation."""
    return callable(getattr(source, "parse_page", None))


class BaseSource(abc.ABC):
    """Base class for site adapters and template-family engines.

    Subclasses implement the four required operations. ``parse_page`` is
    not defined here: a subclass that supports it defines it, and
    callers detect it with :func:`supports_parse_page`.

    Every operation builds its own parse tree from freshly fetched markup;
    instances hold no parse state, so concurrent calls never interfere.
    """

    source_id: int
    source_name: str
    base_url: str
    language: str | None = None
    template: str = ""

    reverse_chapters: bool = False
    default_cover: str = DEFAULT_COVER
    page_interval: float = 0.5

    _SPACE_RE = re.compile(r"\s+")

    def __init__(
        self,
        fetcher: SourceFetcher,
        *,
        delay: DelayPolicy | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            fetcher: HTTP collaborator used for every request.
            delay: Policy awaited between sequential page requests. Defaults
                to a :class:`FixedDelay` of :attr:`page_interval` seconds.
        """
        self.fetcher = fetcher
        self._delay: DelayPolicy = delay or FixedDelay(self.page_interval)

    @abc.abstractmethod
    async def popular_novels(self, page: int) -> PopularNovels: ...

    @abc.abstractmethod
    async def parse_novel_and_chapters(self, novel_url: str) -> NovelDetail: ...

    @abc.abstractmethod
    async def parse_chapter(
        self, novel_url: str, chapter_url: str
    ) -> ChapterContent: ...

    @abc.abstractmethod
    async def search_novels(self, search_term: str) -> list[NovelSummary]: ...

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    async def _get_tree(self, url: str, **kwargs: Any) -> HtmlElement:
        """Fetch ``url`` and parse the body into a new tree."""
        body = await self.fetcher.fetch_html(url, source_id=self.source_id, **kwargs)
        return self._load(body)

    async def _paginate(
        self,
        total_pages: int,
        load_page: Callable[[int], Awaitable[list[T]]],
        *,
        first_page: list[T] | None = None,
    ) -> list[T]:
        """Fetch pages one after another and concatenate their items.

        The delay policy is awaited before every request except the first.

        Args:
            total_pages: Page count, read once from the site's pager.
            load_page: Coroutine function fetching and extracting page ``idx``.
            first_page: Items of page 1 when it was already fetched.

        Returns:
            Items of all pages, in page order.
        """
        items: list[T] = list(first_page) if first_page is not None else []
        start = 1 if first_page is None else 2

        for idx in range(start, total_pages + 1):
            if idx > 1:
                await self._delay(idx)
            items.extend(await load_page(idx))
            logger.debug(
                "[source %s] fetched page %d/%d", self.source_id, idx, total_pages
            )
        return items

    # ------------------------------------------------------------------
    # Tree helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _load(markup: str) -> HtmlElement:
        """Parse markup into a document tree; blank input yields an empty one."""
        if not markup or not markup.strip():
            markup = _EMPTY_DOCUMENT
        return html.document_fromstring(markup)

    @staticmethod
    def _select_one(root: HtmlElement, css: str) -> HtmlElement | None:
        found = root.cssselect(css)
        return found[0] if found else None

    @classmethod
    def _text(cls, root: HtmlElement | None, css: str | None = None) -> str:
        """Stripped text of ``root`` (or of its first ``css`` match)."""
        el = root if css is None or root is None else cls._select_one(root, css)
        if el is None:
            return ""
        return el.text_content().strip()

    @staticmethod
    def _texts(root: HtmlElement, css: str) -> list[str]:
        return [t for el in root.cssselect(css) if (t := el.text_content().strip())]

    @classmethod
    def _attr(cls, root: HtmlElement | None, css: str, attr: str) -> str:
        """Stripped attribute of the first element matching ``css`` having it."""
        if root is None:
            return ""
        for el in root.cssselect(css):
            value = (el.get(attr) or "").strip()
            if value:
                return value
        return ""

    @staticmethod
    def _remove(root: HtmlElement, css: str) -> None:
        """Drop every element matching ``css``, keeping surrounding text."""
        for el in root.cssselect(css):
            el.drop_tree()

    @staticmethod
    def _inner_html(el: HtmlElement | None) -> str:
        """Serialize the children of ``el``; ``""`` for a missing element."""
        if el is None:
            return ""
        parts = [escape(el.text or "", quote=False)]
        parts.extend(html.tostring(child, encoding="unicode") for child in el)
        return "".join(parts).strip()

    @staticmethod
    def _page_count(root: HtmlElement, css: str) -> int:
        """Largest page number among the pager links, 1 without a pager."""
        numbers = [
            int(text)
            for el in root.cssselect(css)
            if (text := el.text_content().strip()).isdigit()
        ]
        return max(numbers, default=1)

    @classmethod
    def _norm_space(cls, s: str, c: str = " ") -> str:
        """Collapse runs of whitespace."""
        return cls._SPACE_RE.sub(c, s).strip()

    # ------------------------------------------------------------------
    # Record helpers
    # ------------------------------------------------------------------

    def _abs_url(self, url: str) -> str:
        """Resolve a possibly relative URL against :attr:`base_url`."""
        if url.startswith("//"):
            return "https:" + url
        if url.startswith(("http://", "https://")):
            return url
        return urljoin(self.base_url + "/", url)

    def _novel_summary(
        self, novel_name: str, novel_cover: str | None, novel_url: str
    ) -> NovelSummary:
        return {
            "source_id": self.source_id,
            "novel_name": novel_name,
            "novel_cover": novel_cover,
            "novel_url": novel_url,
        }

    def _normalize_order(self, chapters: list[ChapterSummary]) -> list[ChapterSummary]:
        """Return the full chapter list oldest first.

        Must be called exactly once, on the complete list.
        """
        return chapters[::-1] if self.reverse_chapters else chapters

    @staticmethod
    def _check_page(page: int) -> None:
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page!r}")

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} source_id={self.source_id} "
            f"name={self.source_name!r}>"
        )


class TemplateSource(BaseSource):
    """A template-family engine configured per site deployment.

    Instances differ only by configuration: the engine's selectors are
    shared by every site of the family, while id, base URL, name and
    :class:`SourceOptions` come from a :class:`SourceConfig` row.
    """

    def __init__(
        self,
        source_id: int,
        base_url: str,
        source_name: str,
        options: SourceOptions | None = None,
        *,
        fetcher: SourceFetcher,
        delay: DelayPolicy | None = None,
    ) -> None:
        options = options or SourceOptions()

        self.source_id = source_id
        self.base_url = base_url.rstrip("/")
        self.source_name = source_name
        self.options = options
        self.language = options.language
        self.reverse_chapters = options.reverse_chapters
        self.default_cover = options.default_cover
        self.page_interval = options.page_interval

        super().__init__(fetcher, delay=delay)

    @classmethod
    def from_config(
        cls,
        cfg: SourceConfig,
        fetcher: SourceFetcher,
        *,
        delay: DelayPolicy | None = None,
    ) -> Self:
        return cls(
            cfg.source_id,
            cfg.base_url,
            cfg.source_name,
            cfg.options,
            fetcher=fetcher,
            delay=delay,
        )
