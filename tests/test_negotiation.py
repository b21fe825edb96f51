"""Tests for quire.server.negotiation — handler return values to responses."""

import pytest
from kida import Environment, FileSystemLoader

from quire.errors import ConfigurationError
from quire.http.response import Redirect, Response
from quire.server.negotiation import negotiate
from quire.templating.returns import Template


@pytest.fixture
def kida_env(tmp_path) -> Environment:
    (tmp_path / "page.html").write_text("<h1>{{ title }}</h1>")
    return Environment(loader=FileSystemLoader(str(tmp_path)))


class TestNegotiatePassthrough:
    def test_response_passthrough(self) -> None:
        original = Response(body="hello", status=201)
        assert negotiate(original) is original

    def test_redirect(self) -> None:
        result = negotiate(Redirect("/login"))
        assert result.status == 302
        assert ("Location", "/login") in result.headers

    def test_redirect_301(self) -> None:
        assert negotiate(Redirect("/new", status=301)).status == 301


class TestNegotiateValues:
    def test_str(self) -> None:
        result = negotiate("hello")
        assert result.status == 200
        assert result.text == "hello"
        assert "text/html" in result.content_type

    def test_bytes(self) -> None:
        result = negotiate(b"\x00\x01")
        assert result.content_type == "application/octet-stream"

    def test_template(self, kida_env: Environment) -> None:
        result = negotiate(Template("page.html", title="Home"), kida_env=kida_env)
        assert result.text == "<h1>Home</h1>"

    def test_template_escapes(self, tmp_path) -> None:
        (tmp_path / "page.html").write_text("{{ title }}")
        env = Environment(loader=FileSystemLoader(str(tmp_path)), autoescape=True)
        result = negotiate(Template("page.html", title="<b>"), kida_env=env)
        assert "<b>" not in result.text

    def test_template_without_environment(self) -> None:
        with pytest.raises(ConfigurationError):
            negotiate(Template("page.html"))

    def test_status_tuple(self, kida_env: Environment) -> None:
        result = negotiate((Template("page.html", title="Oops"), 422), kida_env=kida_env)
        assert result.status == 422
        assert result.text == "<h1>Oops</h1>"

    def test_status_and_headers_tuple(self) -> None:
        result = negotiate(("created", 201, {"X-Id": "7"}))
        assert result.status == 201
        assert ("X-Id", "7") in result.headers

    def test_unsupported(self) -> None:
        with pytest.raises(TypeError, match="Cannot convert"):
            negotiate(42)
