from typing import Any

import aiohttp

from .base import BaseSession
from .response import BaseResponse


class AiohttpSession(BaseSession):
    """Default backend, built on :class:`aiohttp.ClientSession`."""

    _client: aiohttp.ClientSession | None

    async def _open(self) -> aiohttp.ClientSession:
        cfg = self._cfg
        return aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(
                ssl=cfg.verify_ssl,
                limit_per_host=cfg.max_connections,
            ),
            timeout=aiohttp.ClientTimeout(total=cfg.timeout),
            headers=self._headers,
            cookies=cfg.cookies or {},
            trust_env=cfg.trust_env,
        )

    async def _shutdown(self, client: aiohttp.ClientSession) -> None:
        if not client.closed:
            await client.close()

    async def _send(
        self,
        method: str,
        url: str,
        encoding: str,
        options: dict[str, Any],
    ) -> BaseResponse:
        assert self._client is not None
        if self._cfg.proxy:
            options["proxy"] = self._cfg.proxy
            if auth := self._proxy_auth():
                options["proxy_auth"] = aiohttp.BasicAuth(*auth)

        async with self._client.request(method, url, **options) as r:
            body = await r.read()
            return BaseResponse(
                content=body,
                headers=r.headers,
                status=r.status,
                url=str(r.url),
                encoding=r.charset or encoding,
            )
