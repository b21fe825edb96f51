"""The ``App`` object: route table, middleware and lifecycle in one place.

An app has two phases. During setup, routes, middleware, error
handlers and template helpers are registered. The first request (or
the ASGI lifespan startup) freezes it: the route table is compiled,
the middleware tuple is fixed and the kida environment is built.
Registration after that point raises ``RuntimeError``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from kida import Environment

from quire._internal.invoke import invoke
from quire._internal.types import ErrorHandler, Handler, Receive, Scope, Send
from quire.config import AppConfig
from quire.data.database import Database
from quire.middleware.builtin import RemoveTrailingSlash
from quire.middleware.protocol import Middleware
from quire.routing.route import Route
from quire.routing.router import Router
from quire.routing.urls import name_to_url
from quire.server.handler import handle_request
from quire.templating.integration import create_environment

logger = logging.getLogger("quire.app")

type Decorator = Callable[[Callable[..., Any]], Callable[..., Any]]


class App:
    """A quire web application.

    Build one per process and pass it to whatever registers routes or
    needs ``url_for``::

        app = App(AppConfig(template_dir="templates"), db="sqlite:///blog.db")

        @app.route("/articles/{id:[0-9]+}", name="articles.show")
        async def show(id: int):
            ...

    *db* may be a ``Database`` or a ``sqlite:///`` URL. With *migrations*
    set, pending ``NNN_name.sql`` files are applied at startup.
    """

    __slots__ = (
        "_db",
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_kida_env",
        "_middleware",
        "_middleware_list",
        "_migrations_dir",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "_template_filters",
        "_template_globals",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        db: Database | str | None = None,
        migrations: str | Path | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._router = Router()
        self._db = Database(db) if isinstance(db, str) else db
        self._migrations_dir = migrations

        self._middleware_list: list[Middleware] = []
        self._error_handlers: dict[int | type, ErrorHandler] = {}
        self._template_filters: dict[str, Callable[..., Any]] = {}
        self._template_globals: dict[str, Any] = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []

        self._frozen = False
        self._freeze_lock = threading.Lock()
        self._middleware: tuple[Callable[..., Any], ...] = ()
        self._kida_env: Environment | None = None

    # -- Routes --

    def add_route(
        self,
        path: str,
        handler: Handler,
        *,
        method: str = "GET",
        name: str | None = None,
    ) -> Route:
        """Append a route. Earlier routes win when several match.

        *path* segments are literal or ``{param}`` / ``{param:constraint}``,
        where the constraint is ``str``, ``int``, ``float`` or a regular
        expression. Raises ``DuplicateRouteName`` if *name* is taken.
        """
        self._check_not_frozen()
        route = Route(path=path, handler=handler, method=method.upper(), name=name or None)
        self._router.add(route)
        return route

    def route(
        self,
        path: str,
        *,
        method: str = "GET",
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Decorator form of ``add_route``."""

        def decorator(func: Handler) -> Handler:
            self.add_route(path, func, method=method, name=name)
            return func

        return decorator

    @property
    def routes(self) -> list[Route]:
        return self._router.routes

    @property
    def router(self) -> Router:
        return self._router

    def url_for(self, name: str, *pairs: object) -> str:
        """Path for route *name*, or ``""`` (logged) if it cannot be built.

        ``app.url_for("articles.show", "id", 42)`` -> ``"/articles/42"``.
        ``app.router.url_for`` raises instead of logging.
        """
        return name_to_url(self._router, name, *pairs)

    # -- Database --

    @property
    def db(self) -> Database:
        if self._db is None:
            msg = "No database configured. Pass db= to App()."
            raise LookupError(msg)
        return self._db

    # -- Registration helpers --

    def error(
        self, code_or_exception: int | type[Exception]
    ) -> Callable[[ErrorHandler], ErrorHandler]:
        """Handle an HTTP status or exception class with the decorated function."""

        def decorator(func: ErrorHandler) -> ErrorHandler:
            self._check_not_frozen()
            self._error_handlers[code_or_exception] = func
            return func

        return decorator

    def not_found(self, func: ErrorHandler) -> ErrorHandler:
        """Shorthand for ``@app.error(404)``."""
        return self.error(404)(func)

    def add_middleware(self, middleware: Middleware) -> None:
        """Append *middleware*. The first one added sees the request first."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def template_filter(self, name: str | None = None) -> Decorator:
        return self._registrar(self._template_filters, name)

    def template_global(self, name: str | None = None) -> Decorator:
        return self._registrar(self._template_globals, name)

    def _registrar(self, store: dict[str, Any], name: str | None) -> Decorator:
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            store[name or func.__name__] = func
            return func

        return decorator

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Run *func* at startup, after the database is connected and migrated."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Run *func* at shutdown, before the database is closed."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Running --

    def run(
        self, host: str | None = None, port: int | None = None, *, reload: bool = False
    ) -> None:
        """Serve with pounce. Blocks until the server stops."""
        from quire.server.dev import run_server

        self._ensure_frozen()
        run_server(self, host or self.config.host, port or self.config.port, reload=reload)

    async def startup(self) -> None:
        if self._db is not None:
            await self._db.connect()
            if self._migrations_dir is not None:
                from quire.data.migrate import migrate

                result = await migrate(self._db, self._migrations_dir)
                logger.info(result.summary)
        for hook in self._startup_hooks:
            await invoke(hook)

    async def shutdown(self) -> None:
        for hook in self._shutdown_hooks:
            await invoke(hook)
        if self._db is not None:
            await self._db.disconnect()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return

        self._ensure_frozen()
        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            middleware=self._middleware,
            error_handlers=self._error_handlers,
            kida_env=self._kida_env,
            debug=self.config.debug,
        )

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        # Freezing here surfaces configuration errors before traffic arrives.
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    await self.startup()
                except Exception as exc:
                    logger.exception("Startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Freezing --

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if not self._frozen:
                self._freeze()

    def _freeze(self) -> None:
        """Compile routes, fix the middleware order and build templates.

        Called with ``_freeze_lock`` held.
        """
        self._router.compile()

        # Trailing-slash removal goes outermost so every layer sees the clean path.
        chain: list[Callable[..., Any]] = list(self._middleware_list)
        if self.config.strip_trailing_slash:
            chain.insert(0, RemoveTrailingSlash())
        self._middleware = tuple(chain)

        self._template_globals.setdefault("url_for", self.url_for)
        for mw in self._middleware:
            for name, value in (getattr(mw, "template_globals", None) or {}).items():
                self._template_globals.setdefault(name, value)

        self._kida_env = create_environment(
            self.config, self._template_filters, self._template_globals
        )
        self._frozen = True
        logger.debug("App frozen with %d routes", len(self._router.routes))

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, middleware, and filters before calling app.run()."
            )
            raise RuntimeError(msg)
