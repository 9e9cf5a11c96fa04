import pytest

from novelsource.plugins.base.client import SourceClient
from novelsource.plugins.base.errors import SourceNotFound, UnsupportedOperation
from novelsource.plugins.multisrc.wpmangastream.source import WPMangaStreamSource
from novelsource.schemas import (
    ClientConfig,
    FetcherConfig,
    SourceConfig,
    SourceOptions,
)

KOLNOVEL = "https://kolnovel.com"

NOVEL_PAGE = """
<html><body>
<h1 class="entry-title">Novel</h1>
<div class="eplister"><ul>
<li><a href="https://kolnovel.com/n-2/"><div class="epl-num">2</div></a></li>
<li><a href="https://kolnovel.com/n-1/"><div class="epl-num">1</div></a></li>
</ul></div>
</body></html>
"""


def _client(fake_session, **kwargs) -> SourceClient:
    cfg = ClientConfig(fetcher_cfg=FetcherConfig(max_rps=0), **kwargs)
    return SourceClient(cfg, session=fake_session)


@pytest.mark.asyncio
@pytest.mark.parametrize("source_id", [23, 37])
async def test_fetch_page_unsupported_makes_no_request(fake_session, source_id):
    client = _client(fake_session)

    with pytest.raises(UnsupportedOperation) as exc:
        await client.fetch_page(source_id, "some-novel", 2)

    assert exc.value.source_id == source_id
    assert exc.value.operation == "parse_page"
    assert isinstance(exc.value, NotImplementedError)
    assert fake_session.fetch_count == 0


@pytest.mark.asyncio
async def test_fetch_page_supported(fake_session):
    novel_url = f"{KOLNOVEL}/series/novel/"
    fake_session.routes[f"{novel_url}?page=2"] = NOVEL_PAGE

    async with _client(fake_session) as client:
        page = await client.fetch_page(67, novel_url, 2)

    assert [c["chapter_name"] for c in page["chapters"]] == ["1", "2"]


@pytest.mark.asyncio
async def test_fetch_novel_and_chapters(fake_session):
    novel_url = f"{KOLNOVEL}/series/novel/"
    fake_session.routes[novel_url] = NOVEL_PAGE

    client = _client(fake_session)
    novel = await client.fetch_novel(67, novel_url)
    chapters = await client.fetch_chapters(67, novel_url)

    assert novel["chapters"] == chapters
    assert [c["chapter_url"] for c in chapters] == [
        f"{KOLNOVEL}/n-1/",
        f"{KOLNOVEL}/n-2/",
    ]


@pytest.mark.asyncio
async def test_popular_search_and_chapter_delegate(fake_session):
    fake_session.routes.update(
        {
            "https://lnmtl.com/novel?page=1": "<html><body></body></html>",
            f"{KOLNOVEL}/?s=abc": "<html><body></body></html>",
            f"{KOLNOVEL}/c/": "<html><body><div class='epcontent'>x</div></body></html>",
        }
    )
    client = _client(fake_session)

    assert await client.popular_novels(37) == {"novels": []}
    assert await client.search_novels(67, "abc") == []
    chapter = await client.fetch_chapter(67, "n", f"{KOLNOVEL}/c/")
    assert chapter["chapter_text"] == "x"
    assert chapter["source_id"] == 67


def test_sources_are_cached(fake_session):
    client = _client(fake_session)
    assert client.get_source(67) is client.get_source(67)


def test_unknown_source(fake_session):
    with pytest.raises(SourceNotFound):
        _client(fake_session).get_source(123456)


def test_custom_sources_are_registered(fake_session):
    custom = SourceConfig(
        source_id=9100,
        template="wpmangastream",
        base_url="https://custom.example",
        source_name="Custom",
        options=SourceOptions(language="id", reverse_chapters=True),
    )
    client = _client(fake_session, sources=[custom])

    src = client.get_source(9100)
    assert isinstance(src, WPMangaStreamSource)
    assert src.reverse_chapters is True
    assert any(i["source_id"] == 9100 for i in client.list_sources("id"))

    # constructing a second client with the same config is fine
    _client(fake_session, sources=[custom])


def test_page_interval_precedence(fake_session):
    client = _client(fake_session, page_interval=0.0, source_intervals={67: 3.0})

    assert client.get_source(67)._delay.seconds == 3.0
    assert client.get_source(23)._delay.seconds == 0.0


def test_source_default_interval_when_unset(fake_session):
    client = _client(fake_session)
    assert client.get_source(37)._delay.seconds == 0.5
