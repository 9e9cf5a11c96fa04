# mypy: disable-error-code=unused-ignore

from typing import Any

from curl_cffi.requests import AsyncSession

from .base import BaseSession
from .response import BaseResponse


class CurlCffiSession(BaseSession):
    """Backend on curl_cffi, impersonating a browser TLS fingerprint.

    Use it for sources behind CDN bot checks that reject the handshake of
    plain Python clients.
    """

    _client: AsyncSession[Any] | None

    async def _open(self) -> AsyncSession[Any]:
        cfg = self._cfg
        return AsyncSession(
            headers=self._headers,
            cookies=cfg.cookies or {},
            timeout=cfg.timeout,
            impersonate=cfg.impersonate,  # type: ignore[arg-type]
            verify=cfg.verify_ssl,
            proxy=cfg.proxy,
            proxy_auth=self._proxy_auth(),
            trust_env=cfg.trust_env,
        )

    async def _shutdown(self, client: AsyncSession[Any]) -> None:
        await client.close()

    async def _send(
        self,
        method: str,
        url: str,
        encoding: str,
        options: dict[str, Any],
    ) -> BaseResponse:
        assert self._client is not None
        r = await self._client.request(method, url, **options)  # type: ignore[arg-type]
        return BaseResponse(
            content=r.content,
            headers=r.headers,
            status=r.status_code,
            url=str(r.url),
            encoding=r.encoding or encoding,
        )
