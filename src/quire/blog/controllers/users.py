"""Author pages."""

from quire.blog.repositories import ArticleRepository, UserRepository
from quire.errors import NotFound
from quire.templating.returns import Template


class UsersController:
    __slots__ = ("_articles", "_users")

    def __init__(self, users: UserRepository, articles: ArticleRepository) -> None:
        self._users = users
        self._articles = articles

    async def show(self, id: int) -> Template:
        """An author and the articles they wrote."""
        user = await self._users.get(id)
        if user is None:
            raise NotFound(f"User {id} not found")
        articles = await self._articles.by_user(id)
        return Template("users/show.html", user=user, articles=articles)
