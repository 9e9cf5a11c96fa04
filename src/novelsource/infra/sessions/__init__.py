"""
HTTP session backends.

Each backend lives in a private ``_<name>`` module and is imported only when
selected, so an install missing, say, ``curl_cffi`` still works with the
other two.
"""

__all__ = ["BACKENDS", "create_session", "BaseSession", "BaseResponse"]

from importlib import import_module
from typing import Any

from novelsource.schemas import SessionConfig

from .base import BaseSession
from .response import BaseResponse

# backend name -> class name in ``._<backend>``
BACKENDS: dict[str, str] = {
    "aiohttp": "AiohttpSession",
    "httpx": "HttpxSession",
    "curl_cffi": "CurlCffiSession",
}


def create_session(
    backend: str,
    cfg: SessionConfig | None = None,
    **kwargs: Any,
) -> BaseSession:
    """Creates a session for the named backend.

    Args:
        backend: One of the keys of :data:`BACKENDS`.
        cfg: Optional session configuration.
        **kwargs: Forwarded to the backend constructor.

    Raises:
        ValueError: If the backend name is not supported.
        ImportError: If the backend's library is not installed.
    """
    try:
        cls_name = BACKENDS[backend]
    except KeyError:
        raise ValueError(f"Unsupported backend: {backend!r}") from None

    module = import_module(f"{__name__}._{backend}")
    session_cls: type[BaseSession] = getattr(module, cls_name)
    return session_cls(cfg, **kwargs)
