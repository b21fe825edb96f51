"""Request handlers for the blog, grouped by resource.

Controllers receive the app (for ``url_for``) and the repositories
they read from; routes bind their methods in ``quire.blog.routes``.
"""

from quire.blog.controllers.articles import ArticlesController
from quire.blog.controllers.auth import AuthController
from quire.blog.controllers.pages import PagesController
from quire.blog.controllers.users import UsersController

__all__ = ["ArticlesController", "AuthController", "PagesController", "UsersController"]
