"""Tests for the top-level quire namespace."""

import pytest

import quire


class TestLazyExports:
    def test_app(self) -> None:
        from quire.app import App

        assert quire.App is App

    def test_errors(self) -> None:
        from quire.errors import NotFound

        assert quire.NotFound is NotFound

    def test_all_names_resolve(self) -> None:
        for name in quire.__all__:
            assert getattr(quire, name) is not None

    def test_unknown_attribute(self) -> None:
        with pytest.raises(AttributeError):
            quire.does_not_exist  # noqa: B018
