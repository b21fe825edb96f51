"""The blog's route table.

Registration order is match order. ``articles.show`` precedes
``articles.create``; the numeric constraint keeps ``/articles/create``
from matching it.
"""

from quire.app import App
from quire.blog.controllers import (
    ArticlesController,
    AuthController,
    PagesController,
    UsersController,
)
from quire.blog.repositories import ArticleRepository, UserRepository

ID = "{id:[0-9]+}"


def register_web_routes(app: App, articles: ArticleRepository, users: UserRepository) -> None:
    """Register every page of the blog on *app*."""
    pc = PagesController()
    app.add_route("/about", pc.about, name="about")
    app.not_found(pc.not_found)

    ac = ArticlesController(app, articles)
    app.add_route("/", ac.index, name="home")
    app.add_route(f"/articles/{ID}", ac.show, name="articles.show")
    app.add_route("/articles", ac.index, name="articles.index")
    app.add_route("/articles", ac.store, method="POST", name="articles.store")
    app.add_route("/articles/create", ac.create, name="articles.create")
    app.add_route(f"/articles/{ID}/edit", ac.edit, name="articles.edit")
    app.add_route(f"/articles/{ID}", ac.update, method="POST", name="articles.update")
    app.add_route(f"/articles/{ID}/delete", ac.delete, method="POST", name="articles.delete")

    uc = UsersController(users, articles)
    app.add_route(f"/users/{ID}", uc.show, name="users.show")

    auc = AuthController(app, users)
    app.add_route("/auth/register", auc.register, name="auth.register")
    app.add_route("/auth/do-register", auc.do_register, method="POST", name="auth.doregister")
    app.add_route("/auth/login", auc.login, name="auth.login")
    app.add_route("/auth/dologin", auc.do_login, method="POST", name="auth.dologin")
    app.add_route("/auth/logout", auc.logout, method="POST", name="auth.logout")
