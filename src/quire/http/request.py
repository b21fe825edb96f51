"""Incoming requests.

A ``Request`` is built once per ASGI ``http`` scope. Its metadata is
frozen; middleware that rewrites the path (``RemoveTrailingSlash``)
passes a ``dataclasses.replace`` copy down the chain instead.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field
from typing import Any

from quire._internal.types import Receive
from quire.http.cookies import parse_cookies
from quire.http.forms import FormData, parse_form_data
from quire.http.headers import Headers
from quire.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """Method, path, headers, query, cookies and path parameters of one request.

    ``path_params`` is empty until routing fills it in. The body is
    read lazily through ``body()``, ``text()`` or ``form()``.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    path_params: dict[str, str]
    http_version: str
    client: tuple[str, int] | None
    cookies: Mapping[str, str]
    _receive: Receive
    # Shared between replace() copies: the ASGI body can be received only once.
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any], receive: Receive) -> Request:
        headers = Headers(tuple(scope.get("headers", ())))
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=headers,
            query=QueryParams(scope.get("query_string", b"")),
            path_params={},
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            cookies=parse_cookies(headers.get("cookie", "")),
            _receive=receive,
        )

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """Declared body size, or ``None`` when absent or malformed."""
        raw = self.headers.get("content-length", "")
        return int(raw) if raw.isdigit() else None

    @property
    def url(self) -> str:
        """Path plus query string, as the client sent them."""
        if not self.query.raw:
            return self.path
        return f"{self.path}?{self.query.raw.decode('latin-1')}"

    async def stream(self) -> AsyncGenerator[bytes]:
        more_body = True
        while more_body:
            message = await self._receive()
            if chunk := message.get("body", b""):
                yield chunk
            more_body = message.get("more_body", False)

    async def body(self) -> bytes:
        if "body" not in self._cache:
            self._cache["body"] = b"".join([chunk async for chunk in self.stream()])
        return self._cache["body"]

    async def text(self) -> str:
        return (await self.body()).decode("utf-8")

    async def form(self) -> FormData:
        """The URL-encoded body as ``FormData``.

        A missing Content-Type is treated as URL-encoded. Any other
        type raises ``ValueError``.
        """
        if "form" not in self._cache:
            content_type = self.content_type or "application/x-www-form-urlencoded"
            self._cache["form"] = parse_form_data(await self.body(), content_type)
        return self._cache["form"]
