"""Tests for quire.http — request, headers, query, cookies, response."""

from quire.http.cookies import SetCookie, parse_cookies
from quire.http.headers import Headers
from quire.http.query import QueryParams
from quire.http.request import Request
from quire.http.response import Response


def _receiver(*chunks: bytes):
    messages = [
        {"type": "http.request", "body": chunk, "more_body": i < len(chunks) - 1}
        for i, chunk in enumerate(chunks)
    ] or [{"type": "http.request", "body": b"", "more_body": False}]

    async def receive():
        return messages.pop(0)

    return receive


def _scope(**overrides):
    scope = {
        "type": "http",
        "method": "get",
        "path": "/articles",
        "query_string": b"",
        "headers": [],
        "http_version": "1.1",
        "client": ("127.0.0.1", 5000),
    }
    scope.update(overrides)
    return scope


class TestHeaders:
    def test_case_insensitive(self) -> None:
        headers = Headers(((b"Content-Type", b"text/plain"),))
        assert headers["content-type"] == "text/plain"
        assert headers.get("CONTENT-TYPE") == "text/plain"
        assert "Content-type" in headers

    def test_missing(self) -> None:
        headers = Headers()
        assert headers.get("x-missing") is None
        assert "x-missing" not in headers
        assert len(headers) == 0

    def test_repeated(self) -> None:
        headers = Headers(((b"accept", b"text/html"), (b"Accept", b"application/json")))
        assert headers["accept"] == "text/html"
        assert headers.get_list("accept") == ["text/html", "application/json"]
        assert list(headers) == ["accept"]


class TestQueryParams:
    def test_first_value(self) -> None:
        query = QueryParams(b"tag=a&tag=b&page=2")
        assert query["tag"] == "a"
        assert query.get_list("tag") == ["a", "b"]
        assert query.get("page") == "2"

    def test_blank_values_kept(self) -> None:
        query = QueryParams(b"q=")
        assert "q" in query
        assert query["q"] == ""

    def test_missing(self) -> None:
        query = QueryParams()
        assert query.get("q", "default") == "default"
        assert query.get_list("q") == []


class TestCookies:
    def test_parse(self) -> None:
        assert parse_cookies("session=abc; theme=dark") == {"session": "abc", "theme": "dark"}

    def test_parse_ignores_garbage(self) -> None:
        assert parse_cookies("novalue; a=1") == {"a": "1"}
        assert parse_cookies("") == {}

    def test_set_cookie_header(self) -> None:
        cookie = SetCookie(name="session", value="abc", max_age=60)
        assert cookie.to_header_value() == (
            "session=abc; Max-Age=60; Path=/; HttpOnly; SameSite=lax"
        )


class TestRequest:
    def test_from_asgi(self) -> None:
        request = Request.from_asgi(
            _scope(
                query_string=b"page=2",
                headers=[(b"cookie", b"theme=dark"), (b"content-length", b"5")],
            ),
            _receiver(),
        )
        assert request.method == "GET"
        assert request.path == "/articles"
        assert request.query["page"] == "2"
        assert request.cookies == {"theme": "dark"}
        assert request.client == ("127.0.0.1", 5000)
        assert request.content_length == 5
        assert request.url == "/articles?page=2"

    def test_url_without_query(self) -> None:
        request = Request.from_asgi(_scope(), _receiver())
        assert request.url == "/articles"

    async def test_body_is_joined_and_cached(self) -> None:
        request = Request.from_asgi(_scope(method="POST"), _receiver(b"hello ", b"world"))
        assert await request.body() == b"hello world"
        assert await request.text() == "hello world"

    async def test_form(self) -> None:
        request = Request.from_asgi(
            _scope(
                method="POST",
                headers=[(b"content-type", b"application/x-www-form-urlencoded")],
            ),
            _receiver(b"title=Hello+there&body=%C3%A9t%C3%A9"),
        )
        form = await request.form()
        assert form["title"] == "Hello there"
        assert form["body"] == "été"


class TestResponse:
    def test_defaults(self) -> None:
        response = Response("hi")
        assert response.status == 200
        assert response.content_type == "text/html; charset=utf-8"

    def test_chaining_returns_new_objects(self) -> None:
        original = Response("hi")
        changed = original.with_status(201).with_header("X-Test", "1")
        assert original.status == 200
        assert original.headers == ()
        assert changed.status == 201
        assert changed.headers == (("X-Test", "1"),)

    def test_cookies(self) -> None:
        response = Response().with_cookie("a", "1").without_cookie("b")
        assert [c.name for c in response.cookies] == ["a", "b"]
        assert response.cookies[1].max_age == 0

    def test_body_bytes(self) -> None:
        assert Response("é").body_bytes == "é".encode()
        assert Response(b"raw").text == "raw"
