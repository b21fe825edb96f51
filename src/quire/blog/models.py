"""Blog records, as the data layer maps them from rows."""

from dataclasses import dataclass

# SQLite INTEGER PRIMARY KEY range
MAX_ROW_ID = 2**63 - 1


def is_row_id(value: int) -> bool:
    """Whether *value* can name a row. Larger ids cannot be bound in a query."""
    return 0 < value <= MAX_ROW_ID


@dataclass(frozen=True, slots=True)
class User:
    """A registered author. Satisfies the auth middleware's user protocol."""

    id: int
    name: str
    email: str
    password: str
    created_at: str = ""
    updated_at: str = ""

    @property
    def is_authenticated(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Article:
    id: int
    title: str
    body: str
    user_id: int | None = None
    created_at: str = ""
    updated_at: str = ""
    # Filled by joins against users; absent for anonymous posts
    author_name: str | None = None
