"""
Protocol definitions for source adapters.

A source adapter knows how to turn one website's markup into normalized
novel and chapter records. The host application depends only on this
contract and treats every configured source as interchangeable, keyed by
``source_id``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from novelsource.schemas import (
    ChapterContent,
    NovelDetail,
    NovelSummary,
    PopularNovels,
    SourcePage,
)


@runtime_checkable
class SourceProtocol(Protocol):
    """Protocol every source adapter implements.

    Attributes:
        source_id: Stable identifier attached to every record produced.
        source_name: Display name of the source.
        base_url: Site root URL without a trailing slash.
        language: Content language code, or None.
    """

    source_id: int
    source_name: str
    base_url: str
    language: str | None

    async def popular_novels(self, page: int) -> PopularNovels:
        """Lists one page of the site's popular novels.

        Args:
            page: 1-based page number.

        Returns:
            The page's entries; ``{"novels": []}`` for an empty page.

        Raises:
            ValueError: If ``page`` is lower than 1.
        """
        ...

    async def parse_novel_and_chapters(self, novel_url: str) -> NovelDetail:
        """Fetches a novel's metadata and its complete chapter list.

        All chapter-list pages are fetched before this returns, and the
        chapters are ordered oldest first.

        Args:
            novel_url: Novel address as produced by listing or search.
        """
        ...

    async def parse_chapter(self, novel_url: str, chapter_url: str) -> ChapterContent:
        """Fetches a chapter and returns its sanitized HTML.

        Args:
            novel_url: Address of the novel the chapter belongs to.
            chapter_url: Chapter address from :class:`ChapterSummary`.
        """
        ...

    async def search_novels(self, search_term: str) -> list[NovelSummary]:
        """Searches the site; returns an empty list when nothing matches."""
        ...


@runtime_checkable
class PageableSourceProtocol(SourceProtocol, Protocol):
    """A source that can also return a single chapter-list page."""

    async def parse_page(self, novel_url: str, page: str) -> SourcePage:
        """Fetches one page of a novel's chapter list.

        Args:
            novel_url: Novel address.
            page: Page identifier as exposed by the site (usually a number).
        """
        ...
