"""Blog application factory."""

from quire.app import App
from quire.blog.repositories import ArticleRepository, UserRepository
from quire.blog.routes import register_web_routes
from quire.blog.settings import BlogSettings, load_config
from quire.data import Database
from quire.middleware import (
    AuthConfig,
    AuthMiddleware,
    ForceHTML,
    SessionConfig,
    SessionMiddleware,
    StaticFiles,
)


def create_app(settings: BlogSettings | None = None) -> App:
    """Build the blog.

    Middleware, outermost first: trailing-slash removal (added by the
    app), static files, forced HTML, sessions, auth.
    """
    settings = settings or load_config()
    config = settings.app

    db = Database(settings.database_url, echo=config.debug)
    app = App(config, db=db, migrations=settings.migrations_dir)

    articles = ArticleRepository(db)
    users = UserRepository(db)

    if config.static_dir is not None:
        app.add_middleware(StaticFiles(config.static_dir, prefixes=config.static_prefixes))
    app.add_middleware(ForceHTML())
    app.add_middleware(SessionMiddleware(SessionConfig(secret_key=config.secret_key)))
    app.add_middleware(AuthMiddleware(AuthConfig(load_user=users.find_for_session)))

    register_web_routes(app, articles, users)
    return app
