import json

import pytest

from novelsource.infra.http_defaults import AJAX_FORM_HEADERS
from novelsource.plugins.base.errors import SourceError, TransportError
from novelsource.plugins.base.fetcher import SourceFetcher
from novelsource.plugins.utils.throttle import TokenBucketRateLimiter
from novelsource.schemas import FetcherConfig


@pytest.mark.asyncio
async def test_fetch_html_returns_body(fetcher, fake_session):
    fake_session.routes["https://example.com/a"] = "<p>hi</p>"

    body = await fetcher.fetch_html("https://example.com/a", source_id=1)

    assert body == "<p>hi</p>"
    assert fake_session.requests[0]["method"] == "GET"


@pytest.mark.asyncio
async def test_non_success_status_raises_transport_error(fetcher, fake_session):
    fake_session.routes["https://example.com/down"] = (503, "maintenance")

    with pytest.raises(TransportError) as exc:
        await fetcher.fetch_html("https://example.com/down")

    err = exc.value
    assert err.status == 503
    assert err.url == "https://example.com/down"
    assert isinstance(err, ConnectionError)
    assert isinstance(err, SourceError)


@pytest.mark.asyncio
async def test_missing_page_raises_transport_error(fetcher):
    with pytest.raises(TransportError) as exc:
        await fetcher.fetch_html("https://example.com/nothing")
    assert exc.value.status == 404


@pytest.mark.asyncio
async def test_fetcher_never_retries(fetcher, fake_session):
    fake_session.routes["https://example.com/flaky"] = (500, "boom")

    with pytest.raises(TransportError):
        await fetcher.fetch_html("https://example.com/flaky")
    assert fake_session.fetch_count == 1


@pytest.mark.asyncio
async def test_params_are_forwarded(fetcher, fake_session):
    fake_session.routes["https://example.com/q?page=2&volumeId=9"] = "ok"

    body = await fetcher.fetch_html(
        "https://example.com/q", params={"page": 2, "volumeId": 9}
    )

    assert body == "ok"
    assert fake_session.requests[0]["params"] == {"page": 2, "volumeId": 9}


@pytest.mark.asyncio
async def test_extra_headers_merge_over_session_defaults(fetcher, fake_session):
    fake_session.routes["https://example.com/h"] = "ok"

    await fetcher.fetch_html("https://example.com/h", headers={"X-Test": "1"})

    sent = fake_session.requests[0]["headers"]
    assert sent["X-Test"] == "1"
    assert sent["User-Agent"] == fake_session.headers["User-Agent"]


@pytest.mark.asyncio
async def test_no_headers_kwarg_without_extra_headers(fetcher, fake_session):
    fake_session.routes["https://example.com/h"] = "ok"

    await fetcher.fetch_html("https://example.com/h")

    assert "headers" not in fake_session.requests[0]
    assert "params" not in fake_session.requests[0]


@pytest.mark.asyncio
async def test_fetch_json(fetcher, fake_session):
    fake_session.routes["https://example.com/data.json"] = {"last_page": 4}

    assert await fetcher.fetch_json("https://example.com/data.json") == {
        "last_page": 4
    }


@pytest.mark.asyncio
async def test_fetch_json_invalid_body(fetcher, fake_session):
    fake_session.routes["https://example.com/data.json"] = "<html>"

    with pytest.raises(json.JSONDecodeError):
        await fetcher.fetch_json("https://example.com/data.json")


@pytest.mark.asyncio
async def test_post_form(fetcher, fake_session):
    url = "https://example.com/wp-admin/admin-ajax.php"
    fake_session.routes[url] = "<ul></ul>"

    await fetcher.post_form(
        url, {"action": "manga_get_chapters", "manga": "7"}, referer="https://r/"
    )

    req = fake_session.requests[0]
    assert req["method"] == "POST"
    assert req["data"] == {"action": "manga_get_chapters", "manga": "7"}
    assert req["headers"]["Referer"] == "https://r/"
    for key, value in AJAX_FORM_HEADERS.items():
        assert req["headers"][key] == value


@pytest.mark.asyncio
async def test_rate_limiter_is_applied(fake_session, monkeypatch):
    calls = []

    fake_session.routes["https://example.com/a"] = "ok"
    f = SourceFetcher(FetcherConfig(max_rps=5), session=fake_session)

    async def fake_wait(self):
        calls.append(self.rate)

    monkeypatch.setattr(TokenBucketRateLimiter, "wait", fake_wait)

    await f.fetch_html("https://example.com/a")
    await f.fetch_html("https://example.com/a")
    assert calls == [5.0, 5.0]


def test_rate_limiter_disabled_with_zero_rps(fake_session):
    f = SourceFetcher(FetcherConfig(max_rps=0), session=fake_session)
    assert f._rate_limiter is None
