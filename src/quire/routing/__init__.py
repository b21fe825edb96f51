"""Routing — ordered route table with first-match dispatch.

Routes are registered during setup and frozen when the app freezes.
Names resolve back to paths through ``Router.url_for``.
"""

from quire.routing.route import PathSegment, Route, RouteMatch
from quire.routing.router import Router, parse_path, split_path
from quire.routing.urls import name_to_url

__all__ = [
    "PathSegment",
    "Route",
    "RouteMatch",
    "Router",
    "name_to_url",
    "parse_path",
    "split_path",
]
