"""Built-in middleware: trailing-slash normalization and forced HTML.

Both are small request/response adjusters that never block a request.
"""

from dataclasses import replace

from quire.http.request import Request
from quire.http.response import Response
from quire.middleware.protocol import Next

HTML_CONTENT_TYPE = "text/html; charset=utf-8"


def strip_trailing_slash(path: str) -> str:
    """Remove exactly one trailing ``/`` from any path except the root."""
    if path != "/" and path.endswith("/"):
        return path[:-1]
    return path


class RemoveTrailingSlash:
    """Rewrite ``/articles/`` to ``/articles`` before routing.

    Must sit outside every other layer so static files, sessions and
    the router all see the normalized path. ``App`` installs it as the
    outermost layer when ``AppConfig.strip_trailing_slash`` is set.
    """

    __slots__ = ()

    async def __call__(self, request: Request, next: Next) -> Response:
        path = strip_trailing_slash(request.path)
        if path != request.path:
            request = replace(request, path=path)
        return await next(request)


class ForceHTML:
    """Mark every response as ``text/html; charset=utf-8``.

    Only the response side is touched. Static files should be served by
    a layer registered before this one so their types survive.
    """

    __slots__ = ()

    async def __call__(self, request: Request, next: Next) -> Response:
        response = await next(request)
        return response.with_content_type(HTML_CONTENT_TYPE)
