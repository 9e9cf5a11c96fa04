"""
Data contracts and type definitions.
"""

__all__ = [
    "DEFAULT_COVER",
    "ClientConfig",
    "FetcherConfig",
    "SessionConfig",
    "SourceConfig",
    "SourceOptions",
    "ChapterContent",
    "ChapterSummary",
    "NovelDetail",
    "NovelStatus",
    "NovelSummary",
    "PopularNovels",
    "SourceInfo",
    "SourcePage",
]

from .config import (
    DEFAULT_COVER,
    ClientConfig,
    FetcherConfig,
    SessionConfig,
    SourceConfig,
    SourceOptions,
)
from .novel import (
    ChapterContent,
    ChapterSummary,
    NovelDetail,
    NovelStatus,
    NovelSummary,
    PopularNovels,
    SourceInfo,
    SourcePage,
)
