"""Article queries."""

from quire.blog.models import Article, is_row_id
from quire.data import Database

_SELECT = """
SELECT a.id, a.title, a.body, a.user_id, a.created_at, a.updated_at,
       u.name AS author_name
FROM articles AS a
LEFT JOIN users AS u ON u.id = a.user_id
"""


class ArticleRepository:
    __slots__ = ("_db",)

    def __init__(self, db: Database) -> None:
        self._db = db

    async def all(self) -> list[Article]:
        """Every article, newest first."""
        return await self._db.fetch(Article, _SELECT + "ORDER BY a.id DESC")

    async def by_user(self, user_id: int) -> list[Article]:
        if not is_row_id(user_id):
            return []
        return await self._db.fetch(
            Article, _SELECT + "WHERE a.user_id = ? ORDER BY a.id DESC", user_id
        )

    async def get(self, article_id: int) -> Article | None:
        if not is_row_id(article_id):
            return None
        return await self._db.fetch_one(Article, _SELECT + "WHERE a.id = ?", article_id)

    async def create(self, title: str, body: str, user_id: int | None = None) -> int:
        """Insert an article and return its id."""
        return await self._db.insert(
            "INSERT INTO articles (title, body, user_id) VALUES (?, ?, ?)",
            title,
            body,
            user_id,
        )

    async def update(self, article_id: int, title: str, body: str) -> bool:
        """Return whether a row was updated."""
        if not is_row_id(article_id):
            return False
        count = await self._db.execute(
            "UPDATE articles SET title = ?, body = ?, updated_at = CURRENT_TIMESTAMP "
            "WHERE id = ?",
            title,
            body,
            article_id,
        )
        return count > 0

    async def delete(self, article_id: int) -> bool:
        """Return whether a row was deleted."""
        if not is_row_id(article_id):
            return False
        return await self._db.execute("DELETE FROM articles WHERE id = ?", article_id) > 0

    async def count(self) -> int:
        return await self._db.fetch_val("SELECT COUNT(*) FROM articles")
