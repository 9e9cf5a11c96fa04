"""
Engine for novel sites built on the Madara WordPress theme.

Novel and chapter addresses are kept as slugs relative to the site's
novels directory, e.g. ``"mi-novela"`` and ``"capitulo-1"``.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import quote_plus, urljoin, urlparse

from lxml.html import HtmlElement

from novelsource.plugins.base.source import TemplateSource
from novelsource.plugins.registry import hub
from novelsource.plugins.utils.normalize import join_genres, map_status, resolve_cover
from novelsource.schemas import (
    ChapterContent,
    ChapterSummary,
    NovelDetail,
    NovelSummary,
    PopularNovels,
)

logger = logging.getLogger(__name__)


@hub.register_template("madara")
class MadaraSource(TemplateSource):
    CHAPTER_LINKS = ".wp-manga-chapter > a"
    AJAX_ACTION = "manga_get_chapters"

    _LAST_PAGE_RE = re.compile(r"/page/(\d+)")

    @property
    def novels_root(self) -> str:
        return f"{self.base_url}/{self.options.novels_path.strip('/')}/"

    async def popular_novels(self, page: int) -> PopularNovels:
        self._check_page(page)
        tree = await self._get_tree(f"{self.novels_root}page/{page}")

        novels: list[NovelSummary] = []
        for item in tree.cssselect(".post-item"):
            href = self._attr(item, ".post-title a", "href")
            if not href:
                continue
            cover = resolve_cover(
                self._select_one(item, "img"), self.default_cover, self.base_url
            )
            novels.append(
                self._novel_summary(
                    self._text(item, ".post-title"), cover, self._slug(href)
                )
            )

        result: PopularNovels = {"novels": novels}
        if page == 1 and (total := self._last_page(tree)):
            result["total_pages"] = total
        return result

    async def search_novels(self, search_term: str) -> list[NovelSummary]:
        url = (
            f"{self.base_url}/?s={quote_plus(search_term)}"
            "&post_type=wp-manga&author=&artist=&release="
        )
        tree = await self._get_tree(url)

        novels: list[NovelSummary] = []
        for item in tree.cssselect(".c-tabs-item__content"):
            href = self._attr(item, ".h4 > a", "href")
            if not href:
                continue
            cover = resolve_cover(
                self._select_one(item, ".content-thumb img"),
                self.default_cover,
                self.base_url,
            )
            novels.append(
                self._novel_summary(self._text(item, ".h4 > a"), cover, self._slug(href))
            )
        return novels

    async def parse_novel_and_chapters(self, novel_url: str) -> NovelDetail:
        slug = self._slug(novel_url)
        url = self.novels_root + slug
        tree = await self._get_tree(url)

        links = tree.cssselect(self.CHAPTER_LINKS)
        if not links:
            links = await self._fetch_chapter_links(tree, url)

        chapters = [self._chapter_summary(a, url) for a in links]

        authors = self._texts(tree, ".author-content > a")
        statuses = self._texts(tree, ".status-content > a")
        cover = self._select_one(tree, ".summary_image > a > img")

        return {
            "source_id": self.source_id,
            "source_name": self.source_name,
            "url": url,
            "novel_url": slug,
            "novel_name": self._text(tree, "h1"),
            "novel_cover": resolve_cover(cover, self.default_cover, self.base_url),
            "summary": self._text(tree, ".summary__content"),
            "author": authors[-1] if authors else None,
            "genre": join_genres(self._texts(tree, ".genres-content > a")) or None,
            "status": map_status(statuses[-1] if statuses else None),
            "chapters": self._normalize_order(chapters),
        }

    async def parse_chapter(self, novel_url: str, chapter_url: str) -> ChapterContent:
        url = f"{self.novels_root}{self._slug(novel_url)}/{chapter_url.strip('/')}/"
        tree = await self._get_tree(url)

        content = self._select_one(tree, ".reading-content")
        if content is not None:
            self._remove(content, "script")

        return {
            "source_id": self.source_id,
            "novel_url": novel_url,
            "chapter_url": chapter_url,
            "chapter_name": self._text(tree, ".text-left > h4"),
            "chapter_text": self._inner_html(content),
        }

    async def _fetch_chapter_links(
        self, tree: HtmlElement, novel_page: str
    ) -> list[HtmlElement]:
        """Load the chapter list through the theme's AJAX endpoint.

        Newer Madara releases render an empty ``#manga-chapters-holder``
        and fill it client-side.
        """
        manga_id = self._attr(tree, "#manga-chapters-holder", "data-id")
        if not manga_id:
            return []

        logger.debug("[source %s] loading chapters via ajax", self.source_id)
        body = await self.fetcher.post_form(
            f"{self.base_url}/wp-admin/admin-ajax.php",
            {"action": self.AJAX_ACTION, "manga": manga_id},
            referer=novel_page,
            source_id=self.source_id,
        )
        return self._load(body).cssselect(self.CHAPTER_LINKS)

    def _chapter_summary(self, link: HtmlElement, novel_page: str) -> ChapterSummary:
        href = urljoin(novel_page + "/", (link.get("href") or "").strip())
        path = urlparse(href).path
        prefix = urlparse(novel_page).path.rstrip("/") + "/"
        if path.startswith(prefix):
            slug = path[len(prefix) :]
        else:
            # chapter outside the novel directory, keep its last segment
            slug = path.rstrip("/").rsplit("/", 1)[-1]

        return {
            "chapter_name": self._text(link, ".chapter-name")
            or self._norm_space(link.text_content()),
            "chapter_url": slug.strip("/"),
            "release_date": self._release_date(link),
        }

    def _release_date(self, link: HtmlElement) -> str | None:
        # older releases put the date inside the link, newer ones beside it
        for scope in (link, link.getparent()):
            if date := self._text(scope, ".chapter-release-date > i"):
                return date
        return None

    def _slug(self, url: str) -> str:
        if url.startswith(self.novels_root):
            url = url[len(self.novels_root) :]
        return url.strip("/")

    def _last_page(self, tree: HtmlElement) -> int | None:
        last = self._select_one(tree, ".pagination .last")
        if last is None:
            return None
        text = last.text_content().strip()
        if text.isdigit():
            return int(text)
        m = self._LAST_PAGE_RE.search(last.get("href") or "")
        return int(m.group(1)) if m else None
