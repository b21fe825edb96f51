"""Outgoing responses.

``Response`` is frozen; every ``with_*`` call returns a modified copy,
so middleware can decorate whatever the inner handler produced::

    response = await next(request)
    return response.with_header("X-Frame-Options", "DENY")
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from quire.http.cookies import SetCookie


@dataclass(frozen=True, slots=True)
class Response:
    """Status, content type, extra headers, cookies and a body."""

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()
    cookies: tuple[SetCookie, ...] = ()

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_content_type(self, content_type: str) -> Response:
        return replace(self, content_type=content_type)

    def with_header(self, name: str, value: str) -> Response:
        """Append a header. Existing headers of the same name are kept."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        return replace(self, headers=self.headers + tuple(headers.items()))

    def with_cookie(self, name: str, value: str, **attrs: Any) -> Response:
        """Append a ``Set-Cookie``. *attrs* are ``SetCookie`` fields (``max_age=...``)."""
        return replace(self, cookies=(*self.cookies, SetCookie(name, value, **attrs)))

    def without_cookie(self, name: str, path: str = "/") -> Response:
        """Expire cookie *name* in the browser."""
        return self.with_cookie(name, "", max_age=0, path=path)

    @property
    def body_bytes(self) -> bytes:
        return self.body.encode("utf-8") if isinstance(self.body, str) else self.body

    @property
    def text(self) -> str:
        return self.body.decode("utf-8") if isinstance(self.body, bytes) else self.body


@dataclass(frozen=True, slots=True)
class Redirect:
    """Handler return value meaning "go to *url*".

    Content negotiation turns it into an empty ``Response`` carrying
    ``Location``. 302 unless *status* says otherwise.
    """

    url: str
    status: int = 302
    headers: tuple[tuple[str, str], ...] = ()
