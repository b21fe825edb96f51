"""Route and RouteMatch frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:      ``/articles``       (is_param=False)
    Param:       ``/{id}``           (is_param=True, param_name="id")
    Typed:       ``/{id:int}``       (is_param=True, constraint="int")
    Constrained: ``/{id:[0-9]+}``    (is_param=True, constraint="[0-9]+")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    constraint: str = "str"


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    One route answers exactly one method. Registering the same path for
    GET and POST produces two routes, each with its own name.
    """

    path: str
    handler: Callable[..., Any]
    method: str = "GET"
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match.

    ``path_params`` is built fresh for every match.
    """

    route: Route
    path_params: dict[str, str]
