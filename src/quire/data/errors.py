"""Data layer error hierarchy."""

from quire.errors import QuireError


class DataError(QuireError):
    """Base for all quire.data errors."""


class QueryError(DataError):
    """Raised when a SQL query fails."""


class MigrationError(DataError):
    """Raised when a migration cannot be discovered or applied."""
