from enum import StrEnum
from typing import NotRequired, TypedDict


class NovelStatus(StrEnum):
    """Publication state of a novel as reported by its source site."""

    ONGOING = "Ongoing"
    COMPLETED = "Completed"
    UNKNOWN = "Unknown"


class NovelSummary(TypedDict):
    """Catalog entry produced by listing and search operations.

    Attributes:
        source_id: Identifier of the configured source that produced the entry.
        novel_name: Display title of the novel.
        novel_cover: Cover image URL, or None if the site exposes none.
        novel_url: Site-relative slug or absolute URL, as defined by the adapter.
    """

    source_id: int
    novel_name: str
    novel_cover: str | None
    novel_url: str


class ChapterSummary(TypedDict):
    """A single entry of a novel's chapter list.

    Attributes:
        chapter_name: Chapter title as displayed on the site.
        chapter_url: Chapter address, passed back to ``parse_chapter``.
        release_date: Unparsed, site-formatted release date, or None.
    """

    chapter_name: str
    chapter_url: str
    release_date: str | None


class NovelDetail(NovelSummary):
    """Full novel metadata together with its complete chapter list.

    Attributes:
        source_name: Display name of the source.
        url: Absolute URL of the novel page that was parsed.
        summary: Synopsis text.
        author: Author name, or None if the site does not state one.
        genre: Comma-joined genre list, or None.
        status: Normalized publication status.
        chapters: Chapters ordered oldest first.
    """

    source_name: str
    url: str
    summary: str
    author: str | None
    genre: str | None
    status: NovelStatus
    chapters: list[ChapterSummary]


class ChapterContent(TypedDict):
    """Rendered chapter returned by ``parse_chapter``.

    Attributes:
        source_id: Identifier of the source.
        novel_url: Novel address the chapter belongs to.
        chapter_url: Chapter address that was fetched.
        chapter_name: Chapter title.
        chapter_text: Sanitized HTML fragment, ``""`` when nothing was found.
    """

    source_id: int
    novel_url: str
    chapter_url: str
    chapter_name: str
    chapter_text: str


class PopularNovels(TypedDict):
    """One page of a source's popular-novel listing.

    Attributes:
        novels: Entries found on the page (possibly empty).
        total_pages: Page count, reported on page 1 by sites exposing a pager.
    """

    novels: list[NovelSummary]
    total_pages: NotRequired[int]


class SourcePage(TypedDict):
    """A single page of a paginated chapter list."""

    chapters: list[ChapterSummary]


class SourceInfo(TypedDict):
    """Registry catalog entry describing a configured source.

    Attributes:
        source_id: Stable, globally unique identifier.
        source_name: Display name.
        base_url: Site root URL without a trailing slash.
        language: Content language code, or None if unspecified.
        template: Template family key, or ``""`` for standalone adapters.
    """

    source_id: int
    source_name: str
    base_url: str
    language: str | None
    template: str
