"""
LNMTL (https://lnmtl.com), machine-translated web novels.

The chapter list is not part of the novel page: it is served as paginated
JSON per volume, and the volume ids are embedded in an inline script.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from lxml.html import HtmlElement

from novelsource.plugins.base.source import BaseSource
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


@hub.register_source()
class LNMTLSource(BaseSource):
    source_id = 37
    source_name = "LNMTL"
    base_url = "https://lnmtl.com"
    language = "en"

    _VOLUMES_RE = re.compile(r"lnmtl\.volumes\s*=\s*(\[.*?\])\s*;", re.S)
    _PREFETCH_RE = re.compile(r"prefetch:\s*'/([^']*?json)'")
    _GENRE_SPLIT_RE = re.compile(r"\s{2,}")

    async def popular_novels(self, page: int) -> PopularNovels:
        self._check_page(page)
        tree = await self._get_tree(f"{self.base_url}/novel?page={page}")

        novels: list[NovelSummary] = []
        for media in tree.cssselect(".media"):
            href = self._attr(media, "h4 > a", "href")
            if not href:
                continue
            cover = resolve_cover(
                self._select_one(media, "img"), self.default_cover, self.base_url
            )
            novels.append(
                self._novel_summary(self._text(media, "h4"), cover, self._slug(href))
            )
        return {"novels": novels}

    async def search_novels(self, search_term: str) -> list[NovelSummary]:
        home = await self.fetcher.fetch_html(self.base_url, source_id=self.source_id)
        m = self._PREFETCH_RE.search(home)
        if m is None:
            logger.warning("[source %s] search index not found", self.source_id)
            return []

        index = await self.fetcher.fetch_json(
            f"{self.base_url}/{m.group(1)}", source_id=self.source_id
        )
        needle = search_term.casefold()
        return [
            self._novel_summary(
                item.get("name", ""),
                self._cover(item.get("image")),
                item.get("slug", ""),
            )
            for item in index
            if needle in item.get("name", "").casefold()
        ]

    async def parse_novel_and_chapters(self, novel_url: str) -> NovelDetail:
        logger.info(
            "[source %s] loading chapter lists, this may take a while", self.source_id
        )

        slug = self._slug(novel_url)
        url = f"{self.base_url}/novel/{slug}"
        body = await self.fetcher.fetch_html(url, source_id=self.source_id)
        tree = self._load(body)

        details = self._parse_details(tree)

        chapters: list[ChapterSummary] = []
        for n, volume_id in enumerate(self._volume_ids(body)):
            if n:
                await self._delay(n + 1)
            chapters.extend(await self._volume_chapters(volume_id))

        cover = self._select_one(tree, ".novel img")

        return {
            "source_id": self.source_id,
            "source_name": self.source_name,
            "url": url,
            "novel_url": slug,
            "novel_name": self._text(tree, ".novel-name"),
            "novel_cover": resolve_cover(cover, self.default_cover, self.base_url),
            "summary": self._text(tree, ".description"),
            "author": details.get("Authors") or None,
            "genre": self._parse_genre(tree) or None,
            "status": map_status(details.get("Current status")),
            "chapters": self._normalize_order(chapters),
        }

    async def parse_chapter(self, novel_url: str, chapter_url: str) -> ChapterContent:
        tree = await self._get_tree(f"{self.base_url}/chapter/{chapter_url}")

        self._remove(tree, ".original, script")
        for sentence in tree.cssselect("sentence.translated"):
            self._wrap(sentence, "p")

        text = self._inner_html(self._select_one(tree, ".chapter-body"))
        text = text.replace("„", "“") or self._text(tree, ".alert.alert-warning")

        return {
            "source_id": self.source_id,
            "novel_url": novel_url,
            "chapter_url": chapter_url,
            "chapter_name": self._text(tree, "h3 > span.chapter-title"),
            "chapter_text": text,
        }

    async def _volume_chapters(self, volume_id: int) -> list[ChapterSummary]:
        async def load_json(idx: int) -> dict[str, Any]:
            return await self.fetcher.fetch_json(
                f"{self.base_url}/chapter",
                params={"page": idx, "volumeId": volume_id},
                source_id=self.source_id,
            )

        async def load_page(idx: int) -> list[ChapterSummary]:
            return self._chapter_rows(await load_json(idx))

        # page 1 carries the pager for the whole volume
        first = await load_json(1)
        last_page = int(first.get("last_page") or 1)
        return await self._paginate(
            last_page, load_page, first_page=self._chapter_rows(first)
        )

    @staticmethod
    def _chapter_rows(data: dict[str, Any]) -> list[ChapterSummary]:
        return [
            {
                "chapter_name": " ".join(
                    p for p in (f"#{row.get('number')}", row.get("title")) if p
                ),
                "chapter_url": row.get("slug", ""),
                "release_date": row.get("created_at"),
            }
            for row in data.get("data") or []
        ]

    def _volume_ids(self, body: str) -> list[int]:
        m = self._VOLUMES_RE.search(body)
        if m is None:
            return []
        return [vol["id"] for vol in json.loads(m.group(1)) if "id" in vol]

    def _parse_details(self, tree: HtmlElement) -> dict[str, str]:
        return {
            self._text(dl, "dt"): self._norm_space(self._text(dl, "dd"))
            for dl in tree.cssselect(".panel-body > dl")
        }

    def _parse_genre(self, tree: HtmlElement) -> str:
        for heading in tree.cssselect(".panel-heading"):
            if heading.text_content().strip() != "Genres":
                continue
            panel = heading.getnext()
            if panel is None:
                return ""
            return join_genres(
                self._GENRE_SPLIT_RE.split(panel.text_content().strip())
            )
        return ""

    def _cover(self, image: str | None) -> str:
        return self._abs_url(image) if image else self.default_cover

    def _slug(self, url: str) -> str:
        prefix = f"{self.base_url}/novel/"
        if url.startswith(prefix):
            url = url[len(prefix) :]
        return url.strip("/")

    @staticmethod
    def _wrap(el: HtmlElement, tag: str) -> None:
        parent = el.getparent()
        if parent is None:
            return
        wrapper = el.makeelement(tag, {})
        wrapper.tail, el.tail = el.tail, None
        parent.replace(el, wrapper)
        wrapper.append(el)
