"""Article CRUD."""

import logging
from dataclasses import dataclass

from quire.app import App
from quire.blog.repositories import ArticleRepository
from quire.errors import NotFound
from quire.http.forms import form_from, form_values
from quire.http.request import Request
from quire.http.response import Redirect
from quire.middleware.auth import current_user
from quire.templating.returns import Template
from quire.validation import ValidationResult, length_between, min_length, required, validate

logger = logging.getLogger("quire.blog")


@dataclass(frozen=True, slots=True)
class ArticleForm:
    title: str = ""
    body: str = ""


ARTICLE_RULES = {
    "title": [required, length_between(3, 40)],
    "body": [required, min_length(10)],
}


def validate_article(form: dict[str, str]) -> ValidationResult:
    """Title 3 to 40 characters, body at least 10. Both required."""
    return validate(form, ARTICLE_RULES)


class ArticlesController:
    __slots__ = ("_app", "_articles")

    def __init__(self, app: App, articles: ArticleRepository) -> None:
        self._app = app
        self._articles = articles

    async def index(self) -> Template:
        articles = await self._articles.all()
        return Template("articles/index.html", articles=articles)

    async def show(self, id: int) -> Template:
        article = await self._articles.get(id)
        if article is None:
            raise NotFound(f"Article {id} not found")
        return Template("articles/show.html", article=article)

    def create(self) -> Template:
        return Template("articles/create.html", title="", body="", errors={})

    async def store(self, request: Request) -> Redirect | tuple[Template, int]:
        values = form_values(await form_from(request, ArticleForm))

        result = validate_article(values)
        if not result:
            return Template("articles/create.html", errors=result.errors, **values), 422

        user = current_user()
        user_id = user.id if user.is_authenticated else None
        article_id = await self._articles.create(values["title"], values["body"], user_id)
        logger.info("Created article %d", article_id)
        return Redirect(self._app.url_for("articles.show", "id", article_id))

    async def edit(self, id: int) -> Template:
        article = await self._articles.get(id)
        if article is None:
            raise NotFound(f"Article {id} not found")
        return Template(
            "articles/edit.html",
            article=article,
            title=article.title,
            body=article.body,
            errors={},
        )

    async def update(self, request: Request, id: int) -> Redirect | tuple[Template, int]:
        article = await self._articles.get(id)
        if article is None:
            raise NotFound(f"Article {id} not found")

        values = form_values(await form_from(request, ArticleForm))

        result = validate_article(values)
        if not result:
            return (
                Template("articles/edit.html", article=article, errors=result.errors, **values),
                422,
            )

        await self._articles.update(id, values["title"], values["body"])
        logger.info("Updated article %d", id)
        return Redirect(self._app.url_for("articles.show", "id", id))

    async def delete(self, id: int) -> Redirect:
        if not await self._articles.delete(id):
            raise NotFound(f"Article {id} not found")
        logger.info("Deleted article %d", id)
        return Redirect(self._app.url_for("articles.index"))
