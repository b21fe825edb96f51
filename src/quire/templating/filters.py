"""Built-in template filters registered on every environment."""

from datetime import date, datetime
from typing import Any


def field_errors(errors: Any, field_name: str) -> list[str]:
    """Extract validation errors for a single form field.

    Safely navigates a ``{field: [messages]}`` dict, returning an
    empty list when *errors* is None, missing, or the field has no
    errors.

    Example:
        {% for msg in errors | field_errors("title") %}
          <p class="error">{{ msg }}</p>
        {% end %}

    """
    if isinstance(errors, dict):
        return list(errors.get(field_name) or [])
    return []


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Pluralize a word based on count.

    Example:
        {{ articles | length | pluralize("article") }}  → "5 articles"

    """
    if plural is None:
        plural = singular + "s"
    return f"{count} {singular if count == 1 else plural}"


def date_format(value: Any, fmt: str = "%Y-%m-%d") -> str:
    """Format a ``datetime``/``date`` or an ISO-8601 string.

    SQLite hands timestamps back as ``"YYYY-MM-DD HH:MM:SS"`` text, so
    strings are parsed before formatting. Unparseable values pass
    through unchanged.
    """
    if not value:
        return ""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return value
    if isinstance(value, date):
        return value.strftime(fmt)
    return str(value)


def excerpt(text: str, length: int = 100) -> str:
    """Shorten *text* to *length* characters, ending in an ellipsis when cut."""
    if len(text) <= length:
        return text
    return text[:length].rstrip() + "…"


# All built-in quire filters, registered automatically on every env.
BUILTIN_FILTERS: dict[str, Any] = {
    "date_format": date_format,
    "excerpt": excerpt,
    "field_errors": field_errors,
    "pluralize": pluralize,
}
