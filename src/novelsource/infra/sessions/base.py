"""
Abstract HTTP session shared by the fetcher and every backend.

A backend opens its client, closes it and sends a single request. Header
merging, request logging and the open/closed bookkeeping are handled here,
so that all backends behave the same.
"""

from __future__ import annotations

import abc
import logging
import time
import types
from collections.abc import Mapping
from typing import Any, Self, TypedDict, Unpack

from novelsource.infra.http_defaults import DEFAULT_USER_HEADERS
from novelsource.schemas import SessionConfig

from .response import BaseResponse

logger = logging.getLogger(__name__)


class RequestKwargs(TypedDict, total=False):
    headers: Mapping[str, str]
    params: dict[str, Any] | list[tuple[str, Any]] | None
    data: Any
    json: Any


class BaseSession(abc.ABC):
    """Abstract asynchronous HTTP session.

    Backends wrap a third-party client and translate every response into a
    :class:`BaseResponse`. Network errors raised by the backend library are
    not translated.
    """

    _client: Any

    def __init__(self, cfg: SessionConfig | None = None, **kwargs: Any) -> None:
        self._cfg = cfg or SessionConfig()
        self._client = None

        base = self._cfg.headers
        self._headers = dict(base) if base is not None else DEFAULT_USER_HEADERS.copy()
        if self._cfg.user_agent:
            self._headers["User-Agent"] = self._cfg.user_agent

    @property
    def headers(self) -> dict[str, str]:
        """Returns a copy of the default request headers."""
        return self._headers.copy()

    @property
    def is_open(self) -> bool:
        return self._client is not None

    async def init(self, **kwargs: Any) -> None:
        """Creates the backend client. Calling it twice is a no-op."""
        if self.is_open:
            return
        self._client = await self._open()
        logger.debug("%s opened", type(self).__name__)

    async def close(self) -> None:
        """Releases the backend client. Calling it twice is a no-op."""
        client, self._client = self._client, None
        if client is not None:
            await self._shutdown(client)

    async def get(
        self,
        url: str,
        *,
        encoding: str = "utf-8",
        **kwargs: Unpack[RequestKwargs],
    ) -> BaseResponse:
        return await self.request("GET", url, encoding=encoding, **kwargs)

    async def post(
        self,
        url: str,
        *,
        encoding: str = "utf-8",
        **kwargs: Unpack[RequestKwargs],
    ) -> BaseResponse:
        return await self.request("POST", url, encoding=encoding, **kwargs)

    async def request(
        self,
        method: str,
        url: str,
        *,
        encoding: str = "utf-8",
        **kwargs: Unpack[RequestKwargs],
    ) -> BaseResponse:
        """Sends one request through the backend client.

        Per-call headers are layered over the session defaults.

        Args:
            method: HTTP method, e.g. ``"GET"`` or ``"POST"``.
            url: Target URL.
            encoding: Fallback text encoding when the server declares none.
            **kwargs: Headers, query parameters, and a form or JSON body.

        Raises:
            RuntimeError: If the session has not been initialized.
        """
        if not self.is_open:
            raise RuntimeError(
                f"{type(self).__name__} is not initialized or has been closed."
            )

        options: dict[str, Any] = dict(kwargs)
        if extra := options.pop("headers", None):
            options["headers"] = {**self._headers, **extra}

        start = time.perf_counter()
        resp = await self._send(method.upper(), url, encoding, options)
        logger.debug(
            "%s %s -> %s (%.0f ms)",
            method.upper(),
            url,
            resp.status,
            (time.perf_counter() - start) * 1000,
        )
        return resp

    @abc.abstractmethod
    async def _open(self) -> Any:
        """Builds and returns the backend client."""
        ...

    @abc.abstractmethod
    async def _shutdown(self, client: Any) -> None:
        ...

    @abc.abstractmethod
    async def _send(
        self,
        method: str,
        url: str,
        encoding: str,
        options: dict[str, Any],
    ) -> BaseResponse:
        ...

    def _proxy_auth(self) -> tuple[str, str] | None:
        """Proxy credentials, when both parts are configured."""
        if self._cfg.proxy_user and self._cfg.proxy_pass:
            return self._cfg.proxy_user, self._cfg.proxy_pass
        return None

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
