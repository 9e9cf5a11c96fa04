"""
Sites running the WPMangaStream theme.
"""

from novelsource.plugins.registry import hub
from novelsource.schemas import SourceConfig, SourceOptions

SITES = [
    SourceConfig(
        source_id=67,
        template="wpmangastream",
        base_url="https://kolnovel.com",
        source_name="KolNovel",
        options=SourceOptions(language="ar", reverse_chapters=True),
    ),
    SourceConfig(
        source_id=68,
        template="wpmangastream",
        base_url="https://noveltr.com",
        source_name="NovelTR",
        options=SourceOptions(language="tr", reverse_chapters=True),
    ),
]

hub.add_sites(SITES)
