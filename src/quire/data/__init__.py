"""Typed async SQLite access for quire.

SQL in, frozen dataclasses out. Not an ORM.

Basic usage::

    from quire.data import Database, migrate

    db = Database("sqlite:///blog.db")
    await migrate(db, "migrations/")
    articles = await db.fetch(Article, "SELECT * FROM articles ORDER BY id DESC")
"""

from quire.data.database import Database
from quire.data.errors import DataError, MigrationError, QueryError
from quire.data.migrate import MigrationResult, migrate

__all__ = [
    "DataError",
    "Database",
    "MigrationError",
    "MigrationResult",
    "QueryError",
    "migrate",
]
