"""Serve a live App object with pounce.

Pounce's ``run()`` takes an import string; quire has a live ``App``,
so ``pounce.Server`` is used directly with the ASGI callable.
pounce is imported lazily so the library and its tests do not need it.
"""

from typing import Any


def run_server(
    app: Any,
    host: str,
    port: int,
    *,
    reload: bool = False,
    app_path: str | None = None,
) -> None:
    """Start a single-worker pounce server for *app*.

    Args:
        app: ASGI callable (quire App instance).
        host: Bind host address.
        port: Bind port number.
        reload: Restart on file changes (development).
        app_path: Optional ``"module:attribute"`` import string; with
            reload, pounce reimports the app from it on each cycle.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(host=host, port=port, workers=1, reload=reload)
    Server(config, app, app_path=app_path).run()
