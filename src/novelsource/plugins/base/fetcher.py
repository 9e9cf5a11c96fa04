"""
HTTP fetcher shared by source adapters.

:class:`SourceFetcher` turns a URL into a response body. It owns header,
method and body construction but never parses markup and never retries:
retry and backoff belong to whoever calls the adapter.
"""

from __future__ import annotations

import logging
import types
from typing import Any, Literal, Self

from novelsource.infra.http_defaults import AJAX_FORM_HEADERS
from novelsource.infra.sessions import BaseResponse, BaseSession, create_session
from novelsource.plugins.base.errors import TransportError
from novelsource.plugins.utils.throttle import TokenBucketRateLimiter
from novelsource.schemas import FetcherConfig

logger = logging.getLogger(__name__)


class SourceFetcher:
    """Issues GET/POST requests on behalf of source adapters.

    A single fetcher may serve any number of sources; it keeps no
    per-source state.
    """

    def __init__(
        self,
        config: FetcherConfig | None = None,
        *,
        session: BaseSession | None = None,
        **kwargs: Any,
    ) -> None:
        """Initializes a new fetcher instance.

        Args:
            config: Optional fetcher configuration.
            session: Optional preconfigured HTTP session. If omitted, a new
                session is created via :func:`create_session`.
            **kwargs: Forwarded to :func:`create_session`.
        """
        config = config or FetcherConfig()

        self.session = session or create_session(
            backend=config.backend,
            cfg=config.session_cfg,
            **kwargs,
        )
        self._rate_limiter: TokenBucketRateLimiter | None = (
            TokenBucketRateLimiter(config.max_rps) if config.max_rps > 0 else None
        )

    async def init(self) -> None:
        """Initializes the underlying session."""
        await self.session.init()

    async def close(self) -> None:
        """Closes the underlying session."""
        await self.session.close()

    async def fetch_html(
        self,
        url: str,
        *,
        method: Literal["GET", "POST"] = "GET",
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        encoding: str = "utf-8",
        source_id: int | None = None,
    ) -> str:
        """Fetches a page and returns its decoded body.

        Args:
            url: Target URL.
            method: HTTP method.
            params: Optional query parameters.
            data: Optional form fields; sent form-encoded on POST.
            headers: Extra headers merged over the session defaults.
            encoding: Fallback encoding if the server declares none.
            source_id: Id of the requesting source, used for logging only.

        Returns:
            The decoded response body.

        Raises:
            TransportError: If the response status is not 2xx.
        """
        resp = await self._request(
            url,
            method=method,
            params=params,
            data=data,
            headers=headers,
            encoding=encoding,
            source_id=source_id,
        )
        return resp.text

    async def fetch_json(
        self,
        url: str,
        *,
        method: Literal["GET", "POST"] = "GET",
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        source_id: int | None = None,
    ) -> Any:
        """Fetches a JSON document.

        Raises:
            TransportError: If the response status is not 2xx.
            json.JSONDecodeError: If the body is not valid JSON.
        """
        resp = await self._request(
            url,
            method=method,
            params=params,
            data=data,
            headers=headers,
            encoding="utf-8",
            source_id=source_id,
        )
        return resp.json()

    async def post_form(
        self,
        url: str,
        data: dict[str, Any],
        *,
        referer: str | None = None,
        source_id: int | None = None,
    ) -> str:
        """Posts form fields to a WordPress-style AJAX endpoint.

        Args:
            url: Endpoint URL, typically ``.../wp-admin/admin-ajax.php``.
            data: Form fields.
            referer: Optional Referer header; some themes reject posts without it.
            source_id: Id of the requesting source, used for logging only.
        """
        headers = dict(AJAX_FORM_HEADERS)
        if referer:
            headers["Referer"] = referer
        return await self.fetch_html(
            url, method="POST", data=data, headers=headers, source_id=source_id
        )

    async def _request(
        self,
        url: str,
        *,
        method: str,
        params: dict[str, Any] | None,
        data: dict[str, Any] | None,
        headers: dict[str, str] | None,
        encoding: str,
        source_id: int | None,
    ) -> BaseResponse:
        if self._rate_limiter:
            await self._rate_limiter.wait()

        kwargs: dict[str, Any] = {}
        if params:
            kwargs["params"] = params
        if headers:
            kwargs["headers"] = headers
        if data is not None and method == "POST":
            kwargs["data"] = data

        logger.debug("[source %s] %s %s", source_id, method, url)
        resp = await self.session.request(method, url, encoding=encoding, **kwargs)

        if not resp.ok:
            raise TransportError(url, resp.status)
        return resp

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
