"""Async access to one SQLite database.

Queries are plain SQL with ``?`` placeholders; rows come back as
instances of whatever dataclass the caller names::

    db = Database("sqlite:///blog.db")

    articles = await db.fetch(Article, "SELECT * FROM articles ORDER BY id DESC")
    article = await db.fetch_one(Article, "SELECT * FROM articles WHERE id = ?", 42)
    article_id = await db.insert("INSERT INTO articles (title, body) VALUES (?, ?)", t, b)
    total = await db.fetch_val("SELECT COUNT(*) FROM articles")

    async with db.transaction():
        await db.execute("DELETE FROM articles WHERE user_id = ?", uid)
        await db.execute("DELETE FROM users WHERE id = ?", uid)

Only ``sqlite:///path`` and ``sqlite:///:memory:`` URLs are accepted.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any

import anyio

from quire.data._mapping import map_row, map_rows
from quire.data._sqlite import AsyncConnection, Result
from quire.data._sqlite import connect as sqlite_connect
from quire.data.errors import DataError, QueryError

logger = logging.getLogger("quire.data")

# The connection owned by the enclosing transaction() block, if any.
_txn_conn: ContextVar[AsyncConnection | None] = ContextVar("quire_txn_conn", default=None)

_SQLITE_PREFIXES = ("sqlite:///", "sqlite://")


def parse_sqlite_path(url: str) -> str:
    """``sqlite:///app.db`` -> ``app.db``. Other schemes raise ``DataError``."""
    for prefix in _SQLITE_PREFIXES:
        if url.startswith(prefix):
            return url.removeprefix(prefix)
    msg = f"Unsupported database URL: {url!r}. Expected sqlite:///path"
    raise DataError(msg)


class Database:
    """A lazily opened SQLite connection shared by every request.

    Statements are serialized: one task at a time holds the connection,
    and a ``transaction()`` holds it for its whole block.
    """

    __slots__ = ("_conn", "_echo", "_lock", "_open_lock", "_path", "url")

    def __init__(self, url: str, /, *, echo: bool = False) -> None:
        self.url = url
        self._path = parse_sqlite_path(url)
        self._echo = echo
        self._open_lock = threading.Lock()
        # anyio.Lock binds to the running event loop, so create it there
        self._lock: anyio.Lock | None = None
        self._conn: AsyncConnection | None = None

    # -- Lifecycle --

    async def connect(self) -> None:
        """Open the connection if it is not open yet. Queries call this themselves."""
        if self._conn is not None:
            return
        conn = await sqlite_connect(self._path)
        with self._open_lock:
            lost_race = self._conn is not None
            if not lost_race:
                self._conn = conn
        if lost_race:
            await conn.close()
            return
        await conn.execute("PRAGMA foreign_keys=ON")
        if self._path != ":memory:":
            await conn.execute("PRAGMA journal_mode=WAL")
        logger.debug("Connected to %s", self.url)

    async def disconnect(self) -> None:
        with self._open_lock:
            conn, self._conn = self._conn, None
        if conn is not None:
            await conn.close()
            logger.debug("Disconnected from %s", self.url)

    async def __aenter__(self) -> Database:
        await self.connect()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.disconnect()

    # -- Connection access --

    @asynccontextmanager
    async def _acquire(self) -> AsyncIterator[AsyncConnection]:
        await self.connect()
        if (conn := _txn_conn.get()) is not None:
            yield conn
            return
        if self._lock is None:
            self._lock = anyio.Lock()
        async with self._lock:
            assert self._conn is not None
            yield self._conn

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Commit the block's statements together, or roll all of them back.

        A ``transaction()`` inside another one joins the outer block.
        """
        if _txn_conn.get() is not None:
            yield
            return
        async with self._acquire() as conn:
            token = _txn_conn.set(conn)
            conn.autocommit = False
            try:
                yield
                await conn.commit()
            except BaseException:
                await conn.rollback()
                raise
            finally:
                conn.autocommit = True
                _txn_conn.reset(token)

    async def _execute(self, sql: str, params: Sequence[Any]) -> Result:
        started = time.perf_counter()
        try:
            async with self._acquire() as conn:
                return await conn.execute(sql, params)
        except QueryError:
            raise
        except Exception as exc:
            raise QueryError(str(exc)) from exc
        finally:
            if self._echo:
                elapsed = (time.perf_counter() - started) * 1000
                logger.debug("%6.1fms  %s  params=%r", elapsed, sql, tuple(params))

    # -- Queries --

    async def fetch[T](self, cls: type[T], sql: str, /, *params: Any) -> list[T]:
        """All rows, each mapped onto *cls*."""
        result = await self._execute(sql, params)
        return map_rows(cls, result.dicts())

    async def fetch_one[T](self, cls: type[T], sql: str, /, *params: Any) -> T | None:
        """The first row mapped onto *cls*, or ``None`` when there is none."""
        rows = (await self._execute(sql, params)).dicts()
        return map_row(cls, rows[0]) if rows else None

    async def fetch_val(self, sql: str, /, *params: Any) -> Any:
        """First column of the first row: ``COUNT(*)``, ``MAX(id)`` and the like."""
        rows = (await self._execute(sql, params)).rows
        return rows[0][0] if rows else None

    async def execute(self, sql: str, /, *params: Any) -> int:
        """Run an UPDATE or DELETE. Returns the number of rows it touched."""
        return (await self._execute(sql, params)).rowcount

    async def insert(self, sql: str, /, *params: Any) -> int:
        """Run an INSERT. Returns the new row's id."""
        result = await self._execute(sql, params)
        if result.lastrowid is None:
            msg = f"Statement did not insert a row: {sql}"
            raise QueryError(msg)
        return result.lastrowid

    async def execute_script(self, sql: str, /) -> None:
        """Run a multi-statement script, as migrations are."""
        try:
            async with self._acquire() as conn:
                await conn.executescript(sql)
        except Exception as exc:
            raise QueryError(str(exc)) from exc
