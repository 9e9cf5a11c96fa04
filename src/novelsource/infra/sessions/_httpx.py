from typing import Any

import httpx

from .base import BaseSession
from .response import BaseResponse


class HttpxSession(BaseSession):
    """Backend based on :class:`httpx.AsyncClient`, with optional HTTP/2."""

    _client: httpx.AsyncClient | None

    async def _open(self) -> httpx.AsyncClient:
        cfg = self._cfg
        return httpx.AsyncClient(
            http2=cfg.http2,
            timeout=cfg.timeout,
            verify=cfg.verify_ssl,
            headers=self._headers,
            cookies=cfg.cookies or {},
            limits=httpx.Limits(
                max_keepalive_connections=cfg.max_connections,
                max_connections=cfg.max_connections,
            ),
            proxy=self._proxy_url(),
            trust_env=cfg.trust_env,
            follow_redirects=True,
        )

    async def _shutdown(self, client: httpx.AsyncClient) -> None:
        if not client.is_closed:
            await client.aclose()

    async def _send(
        self,
        method: str,
        url: str,
        encoding: str,
        options: dict[str, Any],
    ) -> BaseResponse:
        assert self._client is not None
        r = await self._client.request(method, url, **options)
        return BaseResponse(
            content=r.content,
            headers=r.headers.multi_items(),
            status=r.status_code,
            url=str(r.url),
            encoding=r.charset_encoding or encoding,
        )

    def _proxy_url(self) -> str | None:
        # httpx takes credentials embedded in the proxy URL
        proxy = self._cfg.proxy
        auth = self._proxy_auth()
        if not proxy or auth is None:
            return proxy
        scheme, _, rest = proxy.partition("://")
        return f"{scheme}://{auth[0]}:{auth[1]}@{rest}"
