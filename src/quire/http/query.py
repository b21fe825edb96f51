"""Immutable parsed key/value data: query strings and URL-encoded bodies."""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs


class MultiDict(Mapping[str, str]):
    """Read-only mapping of field name to one or more string values.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all of them.
    """

    __slots__ = ("_data",)

    def __init__(self, data: dict[str, list[str]] | None = None) -> None:
        object.__setattr__(self, "_data", data or {})

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.items())!r})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))


class QueryParams(MultiDict):
    """The request's query string, parsed once at request creation."""

    __slots__ = ("_raw",)

    def __init__(self, query_string: bytes = b"") -> None:
        object.__setattr__(self, "_raw", query_string)
        super().__init__(parse_qs(query_string.decode("latin-1"), keep_blank_values=True))

    @property
    def raw(self) -> bytes:
        return self._raw
