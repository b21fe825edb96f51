"""Apply numbered ``.sql`` files to a database, oldest first.

A migrations directory looks like::

    migrations/
        001_create_users.sql
        002_create_articles.sql

Each applied version is recorded in ``_quire_migrations`` and skipped
on later runs. There are no down migrations. The first failure aborts
the run with ``MigrationError``.
"""

import logging
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from quire.data.database import Database
from quire.data.errors import MigrationError

logger = logging.getLogger("quire.data")

_FILENAME_RE = re.compile(r"(\d+)_.+")

_TABLE = "_quire_migrations"


@dataclass(frozen=True, slots=True)
class Migration:
    version: int
    name: str
    sql: str


@dataclass(frozen=True, slots=True)
class MigrationResult:
    """What ``migrate()`` did: names applied now, and how many were already in."""

    applied: list[str]
    already_applied: int
    total_available: int

    @property
    def summary(self) -> str:
        if self.applied:
            return f"Applied {len(self.applied)} migration(s): {', '.join(self.applied)}"
        return f"Already up to date ({self.already_applied} migrations applied)"


@dataclass(frozen=True, slots=True)
class _AppliedRow:
    version: int


def _load(sql_file: Path) -> Migration:
    match = _FILENAME_RE.fullmatch(sql_file.stem)
    if match is None:
        msg = f"Invalid migration filename: {sql_file.name} (expected NNN_description.sql)"
        raise MigrationError(msg)
    sql = sql_file.read_text(encoding="utf-8").strip()
    if not sql:
        msg = f"Empty migration file: {sql_file.name}"
        raise MigrationError(msg)
    return Migration(version=int(match.group(1)), name=sql_file.stem, sql=sql)


def discover_migrations(directory: str | Path) -> list[Migration]:
    """Every migration in *directory*, sorted by version number."""
    path = Path(directory)
    if not path.is_dir():
        msg = f"Migration directory does not exist: {path}"
        raise MigrationError(msg)

    migrations = sorted((_load(f) for f in path.glob("*.sql")), key=lambda m: m.version)
    seen: set[int] = set()
    for migration in migrations:
        if migration.version in seen:
            msg = f"Duplicate migration version numbers found: {migration.version}"
            raise MigrationError(msg)
        seen.add(migration.version)
    return migrations


async def migrate(db: Database, directory: str | Path) -> MigrationResult:
    """Apply whatever in *directory* has not been applied to *db* yet."""
    migrations = discover_migrations(directory)
    await db.execute(
        f"CREATE TABLE IF NOT EXISTS {_TABLE} ("
        " version INTEGER PRIMARY KEY,"
        " name TEXT NOT NULL,"
        " applied_at TEXT NOT NULL)"
    )
    done = {row.version for row in await db.fetch(_AppliedRow, f"SELECT version FROM {_TABLE}")}

    applied: list[str] = []
    for migration in (m for m in migrations if m.version not in done):
        try:
            await db.execute_script(migration.sql)
            await db.execute(
                f"INSERT INTO {_TABLE} (version, name, applied_at) VALUES (?, ?, ?)",
                migration.version,
                migration.name,
                datetime.now(UTC).isoformat(),
            )
        except Exception as exc:
            msg = f"Migration {migration.name} failed: {exc}"
            raise MigrationError(msg) from exc
        logger.info("Applied migration %s", migration.name)
        applied.append(migration.name)

    return MigrationResult(
        applied=applied,
        already_applied=len(done),
        total_available=len(migrations),
    )
