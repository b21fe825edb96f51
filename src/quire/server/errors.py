"""Turn exceptions raised during dispatch into responses.

``HTTPError`` subclasses (``NotFound``, ``Forbidden``) keep their
status. Anything else becomes a 500 and is logged with its traceback.
A handler registered with ``@app.error(...)`` wins over the plain
default page in both cases. If that handler itself fails, the plain
default page is sent instead.
"""

import html
import inspect
import logging
import traceback
from collections.abc import Callable
from http import HTTPStatus
from typing import Any

from kida import Environment

from quire._internal.invoke import invoke
from quire.errors import HTTPError
from quire.http.request import Request
from quire.http.response import Response
from quire.server.negotiation import negotiate

logger = logging.getLogger("quire.server")

type ErrorHandlers = dict[int | type, Callable[..., Any]]


def _lookup(handlers: ErrorHandlers, exc: Exception, status: int) -> Callable[..., Any] | None:
    # exception class first, then the bare status code
    return handlers.get(type(exc)) or handlers.get(status)


def _reason(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return f"Error {status}"


async def _run_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
    status: int,
    kida_env: Environment | None,
) -> Response | None:
    """Call *handler* with as many of ``(request, exc)`` as it accepts.

    A handler that returns a plain 200 value gets the error's status;
    one that sets its own status (``return page, 404``) keeps it.
    Returns ``None`` when the handler raises.
    """
    arity = len(inspect.signature(handler).parameters)
    try:
        result = await invoke(handler, *(request, exc)[:arity])
        response = negotiate(result, kida_env=kida_env)
    except Exception:
        logger.exception("Error handler for %d failed", status)
        return None
    return response.with_status(status) if response.status == 200 else response


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: ErrorHandlers,
    kida_env: Environment | None,
    debug: bool,
) -> Response:
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    handler = _lookup(error_handlers, exc, exc.status)
    if handler is not None:
        response = await _run_handler(handler, request, exc, exc.status, kida_env)
        if response is not None:
            return response

    # detail can carry routing internals; only debug pages show it
    text = str(exc) if debug else _reason(exc.status)
    response = Response(body=html.escape(text), status=exc.status)
    return response.with_headers(dict(exc.headers)) if exc.headers else response


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: ErrorHandlers,
    kida_env: Environment | None,
    debug: bool,
) -> Response:
    logger.exception("500 %s %s", request.method, request.path)

    handler = _lookup(error_handlers, exc, 500)
    if handler is not None:
        response = await _run_handler(handler, request, exc, 500, kida_env)
        if response is not None:
            return response

    if not debug:
        return Response(body="Internal Server Error", status=500)
    trace = "".join(traceback.format_exception(exc))
    return Response(body=f"<pre>{html.escape(trace)}</pre>", status=500)


async def error_response(
    exc: Exception,
    request: Request,
    error_handlers: ErrorHandlers,
    kida_env: Environment | None,
    debug: bool,
) -> Response:
    """Dispatch *exc* to ``handle_http_error`` or ``handle_internal_error``."""
    if isinstance(exc, HTTPError):
        return await handle_http_error(exc, request, error_handlers, kida_env, debug)
    return await handle_internal_error(exc, request, error_handlers, kida_env, debug)
