from __future__ import annotations

import logging
import types
from typing import Self

from novelsource.infra.sessions import BaseSession
from novelsource.plugins.base.errors import UnsupportedOperation
from novelsource.plugins.base.fetcher import SourceFetcher
from novelsource.plugins.base.source import BaseSource, supports_parse_page
from novelsource.plugins.registry import hub
from novelsource.plugins.utils.throttle import DelayPolicy, FixedDelay
from novelsource.schemas import (
    ChapterContent,
    ChapterSummary,
    ClientConfig,
    NovelDetail,
    NovelSummary,
    PopularNovels,
    SourceInfo,
    SourcePage,
)

logger = logging.getLogger(__name__)


class SourceClient:
    """Host-facing entry point: every call is keyed by ``source_id``.

    The client owns one :class:`SourceFetcher` shared by all sources and
    builds each source lazily on first use.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        session: BaseSession | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Client configuration. If not provided, a default
                `ClientConfig` instance is created.
            session: Optional session instance to use for network requests.
        """
        cfg = config or ClientConfig()

        self._page_interval = cfg.page_interval
        self._source_intervals = dict(cfg.source_intervals)

        self.fetcher = SourceFetcher(cfg.fetcher_cfg, session=session)
        self._sources: dict[int, BaseSource] = {}

        if cfg.sources:
            hub.load_builtin()
            hub.add_sites(cfg.sources)

    async def init(self) -> None:
        """Initialize underlying resources."""
        await self.fetcher.init()

    async def close(self) -> None:
        """Close underlying resources."""
        await self.fetcher.close()

    def list_sources(self, language: str | None = None) -> list[SourceInfo]:
        return hub.list_sources(language)

    def get_source(self, source_id: int) -> BaseSource:
        """Return the adapter for ``source_id``, building it on first use.

        Raises:
            SourceNotFound: If no source uses this id.
        """
        source = self._sources.get(source_id)
        if source is None:
            source = hub.build_source(
                source_id, self.fetcher, delay=self._delay_for(source_id)
            )
            self._sources[source_id] = source
        return source

    async def popular_novels(self, source_id: int, page: int = 1) -> PopularNovels:
        return await self.get_source(source_id).popular_novels(page)

    async def search_novels(
        self, source_id: int, search_term: str
    ) -> list[NovelSummary]:
        return await self.get_source(source_id).search_novels(search_term)

    async def fetch_novel(self, source_id: int, novel_url: str) -> NovelDetail:
        return await self.get_source(source_id).parse_novel_and_chapters(novel_url)

    async def fetch_chapters(
        self, source_id: int, novel_url: str
    ) -> list[ChapterSummary]:
        """Complete chapter list of a novel, oldest first."""
        novel = await self.fetch_novel(source_id, novel_url)
        return novel["chapters"]

    async def fetch_chapter(
        self, source_id: int, novel_url: str, chapter_url: str
    ) -> ChapterContent:
        return await self.get_source(source_id).parse_chapter(novel_url, chapter_url)

    async def fetch_page(
        self, source_id: int, novel_url: str, page: str | int
    ) -> SourcePage:
        """Fetch a single chapter-list page from a source that supports it.

        Raises:
            UnsupportedOperation: If the source has no ``parse_page``; raised
                before any request is made.
        """
        source = self.get_source(source_id)
        if not supports_parse_page(source):
            raise UnsupportedOperation(source_id, "parse_page")
        return await source.parse_page(novel_url, str(page))  # type: ignore[attr-defined]

    def _delay_for(self, source_id: int) -> DelayPolicy | None:
        interval = self._source_intervals.get(source_id, self._page_interval)
        if interval is None:
            return None
        logger.debug("[source %s] page interval %.2fs", source_id, interval)
        return FixedDelay(interval)

    async def __aenter__(self) -> Self:
        await self.init()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        await self.close()
