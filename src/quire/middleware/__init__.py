"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

The first middleware registered is the outermost layer.

Built-in middleware:
    AuthMiddleware -- Load the logged-in user (requires SessionMiddleware)
    ForceHTML -- Mark responses as text/html
    RemoveTrailingSlash -- Normalize "/path/" to "/path" before routing
    SessionMiddleware -- Per-request sessions with a pluggable store
    StaticFiles -- Serve static files from a directory
"""

from quire.middleware.auth import AuthConfig, AuthMiddleware
from quire.middleware.builtin import ForceHTML, RemoveTrailingSlash
from quire.middleware.protocol import Middleware, Next
from quire.middleware.sessions import (
    CookieSessionStore,
    MemorySessionStore,
    SessionConfig,
    SessionMiddleware,
)
from quire.middleware.static import StaticFiles

__all__ = [
    "AuthConfig",
    "AuthMiddleware",
    "CookieSessionStore",
    "ForceHTML",
    "MemorySessionStore",
    "Middleware",
    "Next",
    "RemoveTrailingSlash",
    "SessionConfig",
    "SessionMiddleware",
    "StaticFiles",
]
