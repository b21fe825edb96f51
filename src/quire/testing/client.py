"""In-process client for exercising an app over ASGI.

No sockets: requests are scope dicts handed straight to ``app(...)``
and the sent messages are folded back into a ``Response``.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlencode

from quire.app import App
from quire.http.response import Response


class _Capture:
    """ASGI ``send`` that records the response."""

    __slots__ = ("body", "headers", "status")

    def __init__(self) -> None:
        self.status = 500
        self.headers: list[tuple[str, str]] = []
        self.body = bytearray()

    async def __call__(self, message: dict[str, Any]) -> None:
        if message["type"] == "http.response.start":
            self.status = message["status"]
            self.headers = [
                (name.decode("latin-1"), value.decode("latin-1"))
                for name, value in message.get("headers", [])
            ]
        elif message["type"] == "http.response.body":
            self.body += message.get("body", b"")

    def to_response(self) -> Response:
        content_type = "text/html; charset=utf-8"
        headers: list[tuple[str, str]] = []
        for name, value in self.headers:
            if name == "content-type":
                content_type = value
            elif name != "content-length":
                headers.append((name, value))
        return Response(
            body=bytes(self.body),
            status=self.status,
            content_type=content_type,
            headers=tuple(headers),
        )


def _receiver(body: bytes):
    messages = [{"type": "http.request", "body": body, "more_body": False}]

    async def receive() -> dict[str, Any]:
        return messages.pop() if messages else {"type": "http.disconnect"}

    return receive


class TestClient:
    """Drive an ``App`` the way a browser would, without a server.

    Entering the context runs startup (freeze, database, migrations,
    hooks); leaving it runs shutdown. Cookies the app sets are replayed
    on later requests, so a login sticks::

        async with TestClient(app) as client:
            await client.post("/auth/dologin", form={"email": e, "password": p})
            response = await client.get("/")

    Responses are ordinary ``Response`` objects. Header names are
    lower-cased; ``header(response, "location")`` reads one.
    """

    __test__ = False  # not a pytest test class
    __slots__ = ("app", "cookies")

    def __init__(self, app: App) -> None:
        self.app = app
        self.cookies: dict[str, str] = {}

    async def __aenter__(self) -> TestClient:
        self.app._ensure_frozen()
        await self.app.startup()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.app.shutdown()

    async def get(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("GET", path, headers=headers)

    async def head(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("HEAD", path, headers=headers)

    async def delete(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("DELETE", path, headers=headers)

    async def put(
        self, path: str, *, headers: dict[str, str] | None = None, body: bytes = b""
    ) -> Response:
        return await self.request("PUT", path, headers=headers, body=body)

    async def post(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        form: dict[str, str] | None = None,
    ) -> Response:
        """POST *body*, or *form* URL-encoded with its content type set."""
        if form is not None:
            body = urlencode(form).encode("utf-8")
            headers = {"content-type": "application/x-www-form-urlencoded", **(headers or {})}
        return await self.request("POST", path, headers=headers, body=body)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes = b"",
    ) -> Response:
        path, _, query = path.partition("?")
        capture = _Capture()
        await self.app(self._scope(method, path, query, headers or {}), _receiver(body), capture)
        for name, value in capture.headers:
            if name == "set-cookie":
                self._store_cookie(value)
        return capture.to_response()

    def _scope(self, method: str, path: str, query: str, headers: dict[str, str]) -> dict[str, Any]:
        raw = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in headers.items()]
        if self.cookies and not any(name == b"cookie" for name, _ in raw):
            jar = "; ".join(f"{name}={value}" for name, value in self.cookies.items())
            raw.append((b"cookie", jar.encode("latin-1")))
        return {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "path": path,
            "raw_path": path.encode("latin-1"),
            "query_string": query.encode("latin-1"),
            "root_path": "",
            "headers": raw,
            "server": ("testserver", 80),
            "client": ("127.0.0.1", 0),
        }

    def _store_cookie(self, set_cookie: str) -> None:
        pair, _, attributes = set_cookie.partition(";")
        name, _, value = pair.strip().partition("=")
        if "max-age=0" in attributes.replace(" ", "").lower():
            self.cookies.pop(name, None)
        else:
            self.cookies[name] = value


def header(response: Response, name: str) -> str | None:
    """First value of header *name* on a response captured by ``TestClient``."""
    wanted = name.lower()
    return next((value for key, value in response.headers if key == wanted), None)
