from __future__ import annotations

import json
from typing import Any
from urllib.parse import urlencode

import pytest

from novelsource.infra.sessions import BaseResponse, BaseSession
from novelsource.plugins.base.fetcher import SourceFetcher
from novelsource.schemas import FetcherConfig

Route = str | bytes | dict | list | tuple[int, str]


class FakeSession(BaseSession):
    """In-memory session serving canned bodies keyed by full URL.

    Query parameters passed via ``params`` are appended to the URL before the
    lookup. Unknown URLs answer 404. Every request is recorded.
    """

    def __init__(self, routes: dict[str, Route] | None = None) -> None:
        super().__init__()
        self.routes: dict[str, Route] = dict(routes or {})
        self.requests: list[dict[str, Any]] = []

    @property
    def fetch_count(self) -> int:
        return len(self.requests)

    @property
    def urls(self) -> list[str]:
        return [r["url"] for r in self.requests]

    @property
    def is_open(self) -> bool:
        # always usable; tests need not call init()
        return True

    async def _open(self) -> Any:
        return self

    async def _shutdown(self, client: Any) -> None:
        return None

    async def _send(
        self, method: str, url: str, encoding: str, options: dict[str, Any]
    ) -> BaseResponse:
        if params := options.get("params"):
            url = f"{url}?{urlencode(params)}"
        self.requests.append({"method": method, "url": url, **options})

        body = self.routes.get(url)
        if body is None:
            return BaseResponse(content=b"not found", status=404, url=url)

        status = 200
        if isinstance(body, tuple):
            status, body = body
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        return BaseResponse(content=body, status=status, url=url)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def fetcher(fake_session) -> SourceFetcher:
    """Fetcher over the fake session; the fake needs no init."""
    return SourceFetcher(FetcherConfig(max_rps=0), session=fake_session)
