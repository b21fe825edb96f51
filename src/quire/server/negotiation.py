"""Turn a handler's return value into a ``Response``.

Handlers return whatever is most natural: a string, a ``Template``, a
``Redirect``, a finished ``Response``, or any of those paired with a
status (``return Template(...), 422``).
"""

from typing import Any

from kida import Environment

from quire.errors import ConfigurationError
from quire.http.response import Redirect, Response
from quire.templating.integration import render_template
from quire.templating.returns import Template


def _redirect(value: Redirect) -> Response:
    headers = (("Location", value.url), *value.headers)
    return Response(body="", status=value.status, headers=headers)


def negotiate(value: Any, *, kida_env: Environment | None = None) -> Response:
    """Map *value* to a ``Response``.

    ``str`` and rendered templates are HTML, ``bytes`` are
    ``application/octet-stream``. A ``(value, status)`` or
    ``(value, status, headers)`` tuple negotiates *value* and then
    applies the status and extra headers. Anything else is a
    ``TypeError``.
    """
    match value:
        case Response():
            return value
        case Redirect():
            return _redirect(value)
        case Template():
            if kida_env is None:
                msg = (
                    f"Cannot render {value.name!r}: no template environment. "
                    "Set AppConfig.template_dir."
                )
                raise ConfigurationError(msg)
            return Response(body=render_template(kida_env, value))
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case str():
            return Response(body=value)
        case (inner, int() as status):
            return negotiate(inner, kida_env=kida_env).with_status(status)
        case (inner, int() as status, dict() as headers):
            return negotiate(inner, kida_env=kida_env).with_status(status).with_headers(headers)
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. "
                "Return str, bytes, Template, Response or Redirect."
            )
            raise TypeError(msg)
