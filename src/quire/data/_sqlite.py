"""sqlite3 behind ``anyio.to_thread``.

Each statement runs and fetches its rows inside a single worker-thread
call, so no cursor outlives the thread hop. The connection is opened
with ``check_same_thread=False`` (successive calls may use different
pool threads) and ``autocommit=True``; ``Database.transaction()``
turns autocommit off for the duration of its block.
"""

import sqlite3
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from anyio import to_thread


@dataclass(frozen=True, slots=True)
class Result:
    """Everything a statement produced, fetched eagerly."""

    columns: tuple[str, ...]
    rows: list[tuple[Any, ...]]
    rowcount: int
    lastrowid: int | None

    def dicts(self) -> list[dict[str, Any]]:
        return [dict(zip(self.columns, row, strict=True)) for row in self.rows]


def _execute(conn: sqlite3.Connection, sql: str, params: Sequence[Any]) -> Result:
    cursor = conn.execute(sql, params)
    try:
        rows = cursor.fetchall()
        columns = tuple(desc[0] for desc in cursor.description or ())
        return Result(columns, rows, cursor.rowcount, cursor.lastrowid)
    finally:
        cursor.close()


class AsyncConnection:
    __slots__ = ("_conn",)

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    @property
    def autocommit(self) -> bool:
        return bool(self._conn.autocommit)

    @autocommit.setter
    def autocommit(self, value: bool) -> None:
        self._conn.autocommit = value

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> Result:
        return await to_thread.run_sync(_execute, self._conn, sql, params)

    async def executescript(self, sql: str) -> None:
        """Run several ``;``-separated statements.

        sqlite3 commits any open transaction before the script runs.
        """
        await to_thread.run_sync(self._conn.executescript, sql)

    async def commit(self) -> None:
        await to_thread.run_sync(self._conn.commit)

    async def rollback(self) -> None:
        await to_thread.run_sync(self._conn.rollback)

    async def close(self) -> None:
        await to_thread.run_sync(self._conn.close)


def _open(path: str) -> sqlite3.Connection:
    return sqlite3.connect(path, autocommit=True, check_same_thread=False)


async def connect(path: str) -> AsyncConnection:
    return AsyncConnection(await to_thread.run_sync(_open, path))
