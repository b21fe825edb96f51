"""``quire-blog`` command line.

Entry point registered as ``quire-blog`` in ``pyproject.toml``::

    [project.scripts]
    quire-blog = "quire.blog.cli:main"

Commands:
    serve   Run the blog with pounce (migrations apply at startup)
    routes  Print the route table in match order
"""

import argparse
import logging
import sys

from quire.app import App
from quire.blog.app import create_app
from quire.blog.settings import load_config

logger = logging.getLogger("quire.blog")

_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=_LOG_FORMAT)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``quire-blog`` command."""
    parser = argparse.ArgumentParser(
        prog="quire-blog",
        description="A small blog built on quire.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- quire-blog serve ----------------------------------------------------
    serve_parser = subparsers.add_parser("serve", help="Start the server")
    serve_parser.add_argument("--host", default=None, help="Bind host address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    serve_parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart when source files change",
    )

    # -- quire-blog routes ---------------------------------------------------
    subparsers.add_parser("routes", help="List registered routes")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    settings = load_config()
    configure_logging(settings.app.log_level)
    app = create_app(settings)

    if args.command == "serve":
        serve(app, host=args.host, port=args.port, reload=args.reload)
    elif args.command == "routes":
        print_routes(app)


def serve(app: App, *, host: str | None, port: int | None, reload: bool) -> None:
    from quire.server.dev import run_server

    host = host or app.config.host
    port = port or app.config.port
    logger.info("Serving on http://%s:%d", host, port)
    run_server(
        app,
        host,
        port,
        reload=reload,
        app_path="quire.blog.asgi:app" if reload else None,
    )


def print_routes(app: App) -> None:
    """Print METHOD, PATH and NAME for every route, in match order."""
    rows = [(route.method, route.path, route.name or "") for route in app.routes]
    if not rows:
        print("No routes registered.")
        return

    max_method = max(6, *(len(r[0]) for r in rows))  # "METHOD" header
    max_path = max(4, *(len(r[1]) for r in rows))  # "PATH" header

    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "NAME"))
    print("-" * min(max_method + max_path + 4 + max(len(r[2]) for r in rows), 80))
    for method, path, name in rows:
        print(fmt.format(method, path, name))
