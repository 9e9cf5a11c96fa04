"""
Engine for novel sites running the WPMangaStream WordPress theme.

One class serves every site of the family; the site list lives in the
sibling ``sites`` module as configuration rows.
"""

from __future__ import annotations

import re
from urllib.parse import quote_plus

from lxml.html import HtmlElement

from novelsource.plugins.base.source import TemplateSource
from novelsource.plugins.registry import hub
from novelsource.plugins.utils.normalize import (
    LabelTable,
    join_genres,
    map_status,
    resolve_cover,
)
from novelsource.schemas import (
    ChapterContent,
    ChapterSummary,
    NovelDetail,
    NovelSummary,
    PopularNovels,
    SourcePage,
)


@hub.register_template("wpmangastream")
class WPMangaStreamSource(TemplateSource):
    DETAIL_LABELS = LabelTable(
        {
            "Author:": "author",
            "Yazar:": "author",
            "Autor:": "author",
            "المؤلف:": "author",
            "Status:": "status",
            "Seviye:": "status",
            "Durum:": "status",
            "Estado:": "status",
            "الحالة:": "status",
        }
    )

    CHAPTER_PAGER = ".eplister .pagination a, .eplister ~ .pagination a"
    CONTENT_JUNK = "script, ins, .code-block"
    SUMMARY_JUNK = "h3, p.a, strong"

    _BLANK_LINES_RE = re.compile(r"\n{3,}")

    async def popular_novels(self, page: int) -> PopularNovels:
        self._check_page(page)
        url = f"{self.base_url}/series/?page={page}&status=&order=popular"
        tree = await self._get_tree(url)
        return {"novels": self._parse_cards(tree)}

    async def search_novels(self, search_term: str) -> list[NovelSummary]:
        url = f"{self.base_url}/?s={quote_plus(search_term)}"
        tree = await self._get_tree(url)
        return self._parse_cards(tree)

    async def parse_novel_and_chapters(self, novel_url: str) -> NovelDetail:
        url = self._abs_url(novel_url)
        tree = await self._get_tree(url)

        details = self._parse_details(tree)
        chapters = self._parse_chapter_list(tree)

        total_pages = self._page_count(tree, self.CHAPTER_PAGER)
        if total_pages > 1:

            async def load_page(idx: int) -> list[ChapterSummary]:
                page_tree = await self._get_tree(self._page_url(url, idx))
                return self._parse_chapter_list(page_tree)

            chapters = await self._paginate(
                total_pages, load_page, first_page=chapters
            )

        cover = self._select_one(tree, "img.wp-post-image")

        return {
            "source_id": self.source_id,
            "source_name": self.source_name,
            "url": url,
            "novel_url": novel_url,
            "novel_name": self._text(tree, ".entry-title"),
            "novel_cover": resolve_cover(cover, self.default_cover, self.base_url),
            "summary": self._parse_summary(tree),
            "author": details.get("author") or None,
            "genre": join_genres(self._texts(tree, ".genxed a")) or None,
            "status": map_status(details.get("status")),
            "chapters": self._normalize_order(chapters),
        }

    async def parse_page(self, novel_url: str, page: str) -> SourcePage:
        """Fetch a single page of the chapter list.

        Chapters come back oldest first within the page; ordering across
        pages is left to the caller.
        """
        idx = int(page)
        self._check_page(idx)
        tree = await self._get_tree(self._page_url(self._abs_url(novel_url), idx))
        return {"chapters": self._normalize_order(self._parse_chapter_list(tree))}

    async def parse_chapter(self, novel_url: str, chapter_url: str) -> ChapterContent:
        tree = await self._get_tree(self._abs_url(chapter_url))

        content = self._select_one(tree, "div.epcontent")
        if content is not None:
            self._remove(content, self.CONTENT_JUNK)

        return {
            "source_id": self.source_id,
            "novel_url": novel_url,
            "chapter_url": chapter_url,
            "chapter_name": self._text(tree, ".entry-title"),
            "chapter_text": self._inner_html(content),
        }

    def _parse_cards(self, tree: HtmlElement) -> list[NovelSummary]:
        novels: list[NovelSummary] = []
        for card in tree.cssselect("article.bs"):
            href = self._attr(card, "a", "href")
            if not href:
                continue
            cover = resolve_cover(
                self._select_one(card, "img"), self.default_cover, self.base_url
            )
            novels.append(
                self._novel_summary(self._text(card, ".ntitle"), cover, href)
            )
        return novels

    def _parse_details(self, tree: HtmlElement) -> dict[str, str]:
        details: dict[str, str] = {}
        for span in tree.cssselect("div.spe > span"):
            label_el = self._select_one(span, "b")
            if label_el is None:
                continue
            field = self.DETAIL_LABELS.lookup(label_el.text_content())
            if field is None:
                continue
            label_el.drop_tree()
            details[field] = self._norm_space(span.text_content())
        return details

    def _parse_summary(self, tree: HtmlElement) -> str:
        desc = self._select_one(tree, 'div[itemprop="description"]')
        if desc is None:
            return ""

        self._remove(desc, self.SUMMARY_JUNK)
        for br in desc.iter("br"):
            br.tail = "\n" + (br.tail or "")
        for p in desc.cssselect("p"):
            p.tail = "\n\n" + (p.tail or "")

        lines = [line.strip() for line in desc.text_content().splitlines()]
        return self._BLANK_LINES_RE.sub("\n\n", "\n".join(lines)).strip()

    def _parse_chapter_list(self, tree: HtmlElement) -> list[ChapterSummary]:
        chapters: list[ChapterSummary] = []
        for li in tree.cssselect(".eplister > ul > li"):
            href = self._attr(li, "a", "href")
            if not href:
                continue
            parts = (self._text(li, ".epl-num"), self._text(li, ".epl-title"))
            chapters.append(
                {
                    "chapter_name": " - ".join(p for p in parts if p),
                    "chapter_url": href,
                    "release_date": self._text(li, ".epl-date") or None,
                }
            )
        return chapters

    @staticmethod
    def _page_url(novel_url: str, page: int) -> str:
        if page == 1:
            return novel_url
        sep = "&" if "?" in novel_url else "?"
        return f"{novel_url}{sep}page={page}"

