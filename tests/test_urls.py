"""Tests for quire.routing.urls — lenient reverse resolution."""

import logging

from quire.routing.route import Route
from quire.routing.router import Router
from quire.routing.urls import name_to_url


def _handler() -> str:
    return "ok"


def _router() -> Router:
    r = Router()
    r.add(Route("/articles/{id:[0-9]+}", _handler, name="articles.show"))
    r.compile()
    return r


class TestNameToUrl:
    def test_resolves(self) -> None:
        assert name_to_url(_router(), "articles.show", "id", 3) == "/articles/3"

    def test_unknown_name_logs_and_returns_empty(self, caplog) -> None:
        with caplog.at_level(logging.ERROR, logger="quire.routing"):
            assert name_to_url(_router(), "nope") == ""
        assert "nope" in caplog.text

    def test_missing_param_returns_empty(self, caplog) -> None:
        with caplog.at_level(logging.ERROR, logger="quire.routing"):
            assert name_to_url(_router(), "articles.show") == ""
        assert "id" in caplog.text

    def test_odd_pairs_returns_empty(self, caplog) -> None:
        with caplog.at_level(logging.ERROR, logger="quire.routing"):
            assert name_to_url(_router(), "articles.show", "id") == ""
        assert caplog.records[0].levelno == logging.ERROR
