"""Quire — a small Python web framework for server-rendered sites.

Ordered route table, named routes with reverse URL resolution, and a
plain middleware chain. Ships with a sample blog (``quire.blog``).

Basic usage::

    from quire import App

    app = App()

    @app.route("/articles/{id:[0-9]+}", name="articles.show")
    def show(id: int):
        return f"Article {id}"

    app.url_for("articles.show", "id", 42)  # "/articles/42"
    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "HTTPError",
    "Middleware",
    "Next",
    "NotFound",
    "QuireError",
    "Redirect",
    "Request",
    "Response",
    "Template",
    "get_request",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import quire`` fast while providing a clean top-level API.
    """
    if name == "App":
        from quire.app import App

        return App

    if name == "AppConfig":
        from quire.config import AppConfig

        return AppConfig

    if name == "Request":
        from quire.http.request import Request

        return Request

    if name in ("Response", "Redirect"):
        from quire.http import response as _resp

        return getattr(_resp, name)

    if name == "Template":
        from quire.templating.returns import Template

        return Template

    if name in ("Middleware", "Next"):
        from quire.middleware import protocol as _mw

        return getattr(_mw, name)

    if name == "get_request":
        from quire.context import get_request

        return get_request

    if name in ("QuireError", "ConfigurationError", "HTTPError", "NotFound"):
        from quire import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
