"""Quire exception hierarchy.

Shared across Router, App, handler, and middleware so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class QuireError(Exception):
    """Base for all quire-specific errors."""


class ConfigurationError(QuireError):
    """Raised when app configuration is invalid.

    Raised at registration time or during ``App._freeze()`` at startup.
    """


class DuplicateRouteName(ConfigurationError):  # noqa: N818
    """A route name was registered twice.

    Names are the keys of reverse resolution, so a second registration
    under the same name is rejected rather than silently replacing the first.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Route name {name!r} is already registered.")


@dataclass(frozen=True, slots=True)
class HTTPError(QuireError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, middleware, or handlers. The ASGI handler
    catches these and dispatches to the matching ``@app.error()`` handler.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request path and method."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class Forbidden(HTTPError):  # noqa: N818
    """403 — the request is understood but refused."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status=403, detail=detail)


# -- Reverse URL resolution --


class URLResolutionError(QuireError):
    """Base for failures while building a URL from a route name."""


class RouteNotFound(URLResolutionError):  # noqa: N818
    """No route is registered under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No route named {name!r}.")


class MissingParameter(URLResolutionError):  # noqa: N818
    """A parameter in the route pattern has no value in the supplied pairs."""

    def __init__(self, name: str, param: str) -> None:
        self.name = name
        self.param = param
        super().__init__(f"Route {name!r} requires parameter {param!r}.")


class InvalidArgumentCount(URLResolutionError):  # noqa: N818
    """Key/value pairs were supplied with an odd number of items."""

    def __init__(self, name: str, count: int) -> None:
        self.name = name
        self.count = count
        super().__init__(
            f"url_for({name!r}) expects key/value pairs, got {count} item(s)."
        )


class InvalidParameterValue(URLResolutionError):  # noqa: N818
    """A supplied value does not satisfy the parameter's constraint."""

    def __init__(self, name: str, param: str, value: str, constraint: str) -> None:
        self.name = name
        self.param = param
        self.value = value
        super().__init__(
            f"Route {name!r}: value {value!r} for {param!r} "
            f"does not match constraint {constraint!r}."
        )
