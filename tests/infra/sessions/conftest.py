from __future__ import annotations

from typing import Any

import aiohttp
import aiohttp.web
import pytest
import pytest_asyncio

from novelsource.infra.sessions import BACKENDS, BaseSession, create_session
from novelsource.schemas import SessionConfig

SUPPORTED_BACKENDS: list[str] = sorted(BACKENDS)


@pytest.fixture(autouse=True)
def allow_ip_cookies(monkeypatch):
    """Allow cookie acceptance for localhost tests."""
    import aiohttp.cookiejar

    monkeypatch.setattr(aiohttp.cookiejar, "is_ip_address", lambda host: False)


@pytest.fixture(params=SUPPORTED_BACKENDS)
def backend(request) -> str:
    return request.param


@pytest.fixture
def make_session():
    """
    Create backend instance, skipping test if backend dependency is missing.
    """

    def _make(backend: str, cfg: SessionConfig, **kw: Any) -> BaseSession:
        try:
            return create_session(backend, cfg, **kw)
        except ImportError as e:
            pytest.skip(f"backend {backend!r} not installed: {e}")

    return _make


@pytest_asyncio.fixture
async def test_server(aiohttp_server):
    async def handler_ok(request):
        return aiohttp.web.Response(text="hello", status=200)

    async def handler_form(request):
        data = await request.post()
        return aiohttp.web.json_response({"received": dict(data)})

    async def handler_json(request):
        data = await request.json()
        return aiohttp.web.json_response({"received": data})

    async def handler_query(request):
        return aiohttp.web.json_response({"query": dict(request.query)})

    async def handler_latin1(request):
        return aiohttp.web.Response(
            body="Capítulo único".encode("latin-1"),
            headers={"Content-Type": "text/html; charset=latin-1"},
        )

    async def handler_missing(request):
        return aiohttp.web.Response(text="gone", status=404)

    async def handler_redirect(request):
        raise aiohttp.web.HTTPFound("/ok")

    async def handler_echo_headers(request):
        return aiohttp.web.json_response({"headers": dict(request.headers)})

    async def handler_echo_cookies(request):
        return aiohttp.web.json_response({"cookies": dict(request.cookies)})

    app = aiohttp.web.Application()
    app.router.add_get("/ok", handler_ok)
    app.router.add_post("/form", handler_form)
    app.router.add_post("/json", handler_json)
    app.router.add_get("/query", handler_query)
    app.router.add_get("/latin1", handler_latin1)
    app.router.add_get("/missing", handler_missing)
    app.router.add_get("/redirect", handler_redirect)
    app.router.add_get("/echo-headers", handler_echo_headers)
    app.router.add_get("/echo-cookies", handler_echo_cookies)

    server = await aiohttp_server(app)
    return server


@pytest_asyncio.fixture
async def proxy_noauth_server(aiohttp_server):
    """Proxy that always returns 200 'proxied'."""
    seen = {"count": 0, "methods": [], "paths": []}

    async def handler(request):
        seen["count"] += 1
        seen["methods"].append(request.method)
        seen["paths"].append(request.raw_path)
        return aiohttp.web.Response(text="proxied", status=200)

    app = aiohttp.web.Application()
    app.router.add_route("*", "/{tail:.*}", handler)
    server = await aiohttp_server(app)
    server.seen = seen
    return server
