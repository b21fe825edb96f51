"""One HTTP request, from ASGI scope to ASGI messages.

The scope becomes a ``Request``, travels through the middleware chain
to the matched route's handler, and whatever comes back (or whatever
was raised) is turned into a ``Response`` and sent.
"""

import inspect
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import replace
from typing import Any

from kida import Environment

from quire._internal.invoke import invoke
from quire._internal.types import Receive, Scope, Send
from quire.context import request_var
from quire.http.request import Request
from quire.http.response import Response
from quire.middleware.protocol import Next
from quire.routing.route import RouteMatch
from quire.routing.router import Router
from quire.server.errors import error_response
from quire.server.negotiation import negotiate
from quire.server.sender import send_response


def build_pipeline(
    middleware: Sequence[Callable[..., Any]],
    endpoint: Callable[[Request], Awaitable[Response]],
) -> Next:
    """Nest *endpoint* inside *middleware*; ``[a, b]`` runs as ``a(b(endpoint))``."""
    handler: Next = endpoint
    for mw in reversed(middleware):
        handler = _bind(mw, handler)
    return handler


def _bind(mw: Callable[..., Any], inner: Next) -> Next:
    async def layer(request: Request) -> Response:
        return await mw(request, inner)

    return layer


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: tuple[Callable[..., Any], ...],
    error_handlers: dict[int | type, Callable[..., Any]],
    kida_env: Environment | None = None,
    debug: bool,
) -> None:
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    token = request_var.set(request)

    # Handler and no-match errors become responses at the innermost layer,
    # so every middleware sees them on the way out.
    async def dispatch(req: Request) -> Response:
        try:
            return await _call_route(router.match(req.method, req.path), req, kida_env)
        except Exception as exc:
            return await error_response(exc, req, error_handlers, kida_env, debug)

    try:
        response = await build_pipeline(middleware, dispatch)(request)
    except Exception as exc:
        response = await error_response(exc, request, error_handlers, kida_env, debug)
    finally:
        request_var.reset(token)

    await send_response(response, send)


async def _call_route(
    match: RouteMatch, request: Request, kida_env: Environment | None
) -> Response:
    # replace() shares _cache, so a body already read upstream stays readable
    request = replace(request, path_params=match.path_params)
    request_var.set(request)
    handler = match.route.handler
    result = await invoke(handler, **handler_arguments(handler, request))
    return negotiate(result, kida_env=kida_env)


def handler_arguments(handler: Callable[..., Any], request: Request) -> dict[str, Any]:
    """Keyword arguments for *handler*, chosen by its parameter names.

    A parameter called ``request`` or annotated ``Request`` receives the
    request. A parameter named after a path parameter receives its
    value, passed through the annotation (``id: int``) when there is
    one. If conversion fails the raw string is passed.
    """
    kwargs: dict[str, Any] = {}
    for name, param in inspect.signature(handler, eval_str=True).parameters.items():
        if name == "request" or param.annotation is Request:
            kwargs[name] = request
        elif name in request.path_params:
            kwargs[name] = _convert(request.path_params[name], param.annotation)
    return kwargs


def _convert(value: str, annotation: Any) -> Any:
    if annotation is inspect.Parameter.empty:
        return value
    try:
        return annotation(value)
    except (TypeError, ValueError):
        return value
