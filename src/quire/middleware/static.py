"""Static file serving middleware.

Serves files from one directory for a set of URL prefixes. Falls
through to the next handler for non-matching paths and missing files.
"""

import mimetypes
from pathlib import Path

from quire.errors import Forbidden
from quire.http.request import Request
from quire.http.response import Response
from quire.middleware.protocol import Next


class StaticFiles:
    """Middleware that serves static files from a directory.

    Security: resolves symlinks and verifies the final path
    is within the configured directory to prevent path traversal.

    Usage::

        # /css/app.css -> ./public/css/app.css
        app.add_middleware(StaticFiles("./public", prefixes=("/css", "/js")))
    """

    __slots__ = ("_cache_control", "_directory", "_prefixes")

    def __init__(
        self,
        directory: str | Path,
        prefixes: tuple[str, ...] = ("/static",),
        *,
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._prefixes = tuple("/" + p.strip("/") for p in prefixes)
        self._cache_control = cache_control

    def _candidate(self, path: str) -> Path | None:
        """Map a request path to a file under the directory, or None."""
        for prefix in self._prefixes:
            if path.startswith(prefix + "/"):
                return (self._directory / path.lstrip("/")).resolve()
        return None

    async def __call__(self, request: Request, next: Next) -> Response:
        """Serve a static file or fall through."""
        if request.method not in ("GET", "HEAD"):
            return await next(request)

        file_path = self._candidate(request.path)
        if file_path is None:
            return await next(request)
        if not file_path.is_relative_to(self._directory):
            raise Forbidden(f"Path {request.path!r} escapes the static directory")
        if not file_path.is_file():
            return await next(request)

        content_type, _ = mimetypes.guess_type(str(file_path))
        return Response(
            body=file_path.read_bytes(),
            content_type=content_type or "application/octet-stream",
        ).with_header("Cache-Control", self._cache_control)
