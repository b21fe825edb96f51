"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> Response: ...

No base class required. The framework checks the shape, not the lineage.
A middleware may act before calling ``next``, after it returns, or
both, and may answer without calling ``next`` at all.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from quire.http.request import Request
from quire.http.response import Response

# The next handler in the middleware chain
type Next = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for quire middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(request: Request, next: Next) -> Response:
            start = time.monotonic()
            response = await next(request)
            elapsed = time.monotonic() - start
            return response.with_header("X-Time", f"{elapsed:.3f}")

        # Class middleware
        class ForceHTML:
            async def __call__(self, request: Request, next: Next) -> Response:
                ...
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...
