"""Database access for the blog, one repository per table."""

from quire.blog.repositories.articles import ArticleRepository
from quire.blog.repositories.users import AuthenticationFailed, UserRepository

__all__ = ["ArticleRepository", "AuthenticationFailed", "UserRepository"]
