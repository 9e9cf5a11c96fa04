"""
Backend-agnostic response object returned by every session implementation.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

# <meta charset="..."> or <meta http-equiv=... content="...; charset=...">
_META_CHARSET_RE = re.compile(rb"<meta[^>]+charset=[\"']?([A-Za-z0-9_\-]+)", re.I)

FALLBACK_ENCODINGS = ("utf-8", "cp1252")


class BaseResponse:
    """A lightweight HTTP response decoupled from the backend library.

    Header names are stored lower-cased; when a header repeats, the first
    value wins.

    Args:
        content: Raw response body.
        headers: Optional header mapping or sequence of header pairs.
        status: HTTP status code.
        url: Final URL after redirects, if the backend reports it.
        encoding: Charset declared by the server, or the caller's fallback.
    """

    __slots__ = ("content", "headers", "status", "url", "encoding")

    def __init__(
        self,
        *,
        content: bytes,
        headers: Mapping[str, str] | Sequence[tuple[str, str]] | None = None,
        status: int = 200,
        url: str = "",
        encoding: str = "utf-8",
    ) -> None:
        self.content = content
        self.status = status
        self.url = url
        self.encoding = encoding

        self.headers: dict[str, str] = {}
        for key, value in _header_pairs(headers):
            self.headers.setdefault(key.lower(), value)

    @property
    def text(self) -> str:
        """The decoded body.

        Tries the response encoding, then a charset declared in an HTML
        ``<meta>`` tag, then UTF-8 and cp1252; never raises.
        """
        for enc in self._candidate_encodings():
            try:
                return self.content.decode(enc)
            except (UnicodeDecodeError, LookupError):
                continue
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Parses the body as JSON, ignoring a leading byte-order mark.

        Raises:
            json.JSONDecodeError: If the content is not valid JSON.
        """
        return json.loads(self.text.lstrip("\ufeff"))

    @property
    def ok(self) -> bool:
        """True if the status code is in the 2xx range."""
        return 200 <= self.status < 300

    def _candidate_encodings(self) -> Iterator[str]:
        yield self.encoding
        if m := _META_CHARSET_RE.search(self.content[:2048]):
            yield m.group(1).decode("ascii")
        yield from FALLBACK_ENCODINGS

    def __repr__(self) -> str:
        return f"<BaseResponse status={self.status} len={len(self.content)}>"


def _header_pairs(
    headers: Mapping[str, str] | Sequence[tuple[str, str]] | None,
) -> Iterator[tuple[str, str]]:
    if headers is None:
        return iter(())
    if isinstance(headers, Mapping):
        return iter(headers.items())
    return iter(headers)
