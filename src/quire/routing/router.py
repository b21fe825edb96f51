"""Ordered route table with first-match dispatch and reverse resolution.

Routes are registered during setup and the table is frozen when the app
freezes. Matching scans it in registration order, so the first route
whose pattern and method both match wins.
"""

from dataclasses import dataclass
from urllib.parse import quote

from quire.errors import (
    ConfigurationError,
    DuplicateRouteName,
    InvalidArgumentCount,
    InvalidParameterValue,
    MissingParameter,
    NotFound,
    RouteNotFound,
)
from quire.routing.params import compile_constraint, satisfies
from quire.routing.route import PathSegment, Route, RouteMatch


def split_path(path: str) -> list[str]:
    """Split a request or pattern path into segments.

    ``"/"`` is the empty list. Empty segments are kept, so ``"/a/"``
    splits to ``["a", ""]`` and does not match the pattern ``"/a"``.
    """
    if path.startswith("/"):
        path = path[1:]
    if not path:
        return []
    return path.split("/")


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/articles"            -> [PathSegment("articles")]
        "/articles/{id}"       -> [..., PathSegment("{id}", is_param=True, param_name="id")]
        "/articles/{id:int}"   -> [..., PathSegment("{id:int}", ..., constraint="int")]
        "/articles/{id:[0-9]+}" -> [..., PathSegment("{id:[0-9]+}", ..., constraint="[0-9]+")]

    Raises ``ConfigurationError`` for malformed patterns.
    """
    if not path.startswith("/"):
        msg = f"Route path {path!r} must start with '/'."
        raise ConfigurationError(msg)

    segments: list[PathSegment] = []
    seen: set[str] = set()
    for part in split_path(path):
        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            if ":" in inner:
                param_name, constraint = inner.split(":", 1)
            else:
                param_name, constraint = inner, "str"
            if not param_name.isidentifier():
                msg = f"Invalid parameter name {param_name!r} in route {path!r}."
                raise ConfigurationError(msg)
            if param_name in seen:
                msg = f"Parameter {param_name!r} appears twice in route {path!r}."
                raise ConfigurationError(msg)
            if not constraint:
                msg = f"Empty constraint for {param_name!r} in route {path!r}."
                raise ConfigurationError(msg)
            compile_constraint(constraint)
            seen.add(param_name)
            segments.append(
                PathSegment(
                    value=part,
                    is_param=True,
                    param_name=param_name,
                    constraint=constraint,
                )
            )
        elif "<" in part or ">" in part or "{" in part or "}" in part:
            msg = (
                f"Route {path!r} has a malformed segment {part!r}. "
                "Use {name} or {name:constraint} for parameters."
            )
            raise ConfigurationError(msg)
        else:
            segments.append(PathSegment(value=part))
    return segments


@dataclass(frozen=True, slots=True)
class CompiledRoute:
    """A route together with its parsed pattern."""

    route: Route
    segments: tuple[PathSegment, ...]

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(s.param_name for s in self.segments if s.param_name)

    def match(self, parts: list[str]) -> dict[str, str] | None:
        """Return captured parameters if *parts* fit this pattern, else None."""
        if len(parts) != len(self.segments):
            return None
        params: dict[str, str] = {}
        for seg, part in zip(self.segments, parts, strict=True):
            if seg.is_param:
                if not satisfies(part, seg.constraint):
                    return None
                params[seg.param_name or ""] = part
            elif seg.value != part:
                return None
        return params

    def build(self, values: dict[str, str]) -> str:
        """Fill the pattern with *values*. Keys not in the pattern are ignored."""
        name = self.route.name or ""
        parts: list[str] = []
        for seg in self.segments:
            if not seg.is_param:
                parts.append(seg.value)
                continue
            param = seg.param_name or ""
            if param not in values:
                raise MissingParameter(name, param)
            value = str(values[param])
            if not satisfies(value, seg.constraint):
                raise InvalidParameterValue(name, param, value, seg.constraint)
            parts.append(quote(value, safe=""))
        return "/" + "/".join(parts)


class Router:
    """Ordered route table.

    Usage::

        router = Router()
        router.add(Route("/articles", index, "GET", name="articles.index"))
        router.add(Route("/articles/{id:[0-9]+}", show, "GET", name="articles.show"))
        router.compile()
        match = router.match("GET", "/articles/42")
        router.url_for("articles.show", "id", "42")  # "/articles/42"
    """

    __slots__ = ("_by_name", "_compiled", "_entries")

    def __init__(self) -> None:
        self._entries: list[CompiledRoute] = []
        self._by_name: dict[str, CompiledRoute] = {}
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route to the table. Must be called before compile().

        Raises ``DuplicateRouteName`` if the route's name is taken.
        """
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        if route.name and route.name in self._by_name:
            raise DuplicateRouteName(route.name)

        entry = CompiledRoute(route=route, segments=tuple(parse_path(route.path)))
        self._entries.append(entry)
        if route.name:
            self._by_name[route.name] = entry

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes in registration order."""
        return [entry.route for entry in self._entries]

    def compile(self) -> None:
        """Freeze the table. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Find the first route matching *method* and *path*.

        A route whose pattern matches but whose method differs does not
        stop the scan. Raises ``NotFound`` when nothing matches.
        """
        parts = split_path(path)
        for entry in self._entries:
            if entry.route.method != method:
                continue
            params = entry.match(parts)
            if params is not None:
                return RouteMatch(route=entry.route, path_params=params)
        raise NotFound(f"No route matches {method} {path!r}")

    def get(self, name: str) -> Route:
        """Return the route registered as *name*.

        Raises ``RouteNotFound`` if no such route exists.
        """
        entry = self._by_name.get(name)
        if entry is None:
            raise RouteNotFound(name)
        return entry.route

    def url_for(self, name: str, *pairs: object) -> str:
        """Build the path for route *name* from alternating key/value pairs.

        ``router.url_for("articles.show", "id", 42)`` returns ``"/articles/42"``.
        Keys bind to parameters by name; keys the pattern does not use
        are ignored.
        """
        if len(pairs) % 2:
            raise InvalidArgumentCount(name, len(pairs))
        entry = self._by_name.get(name)
        if entry is None:
            raise RouteNotFound(name)
        values = {str(pairs[i]): str(pairs[i + 1]) for i in range(0, len(pairs), 2)}
        return entry.build(values)
