"""Field rules for ``validate()``.

A rule takes the submitted string and returns an error message, or
``None`` when the value is acceptable. Rules that need a parameter
(``min_length(10)``) are factories returning such a callable.

Lengths are measured in characters: "编程笔记" has length 4.
"""

import re
from collections.abc import Callable

type Validator = Callable[[str], str | None]

_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")


def _length_rule(ok: Callable[[int], bool], message: str) -> Validator:
    def rule(value: str) -> str | None:
        return None if ok(len(value)) else message

    return rule


def required(value: str) -> str | None:
    """Reject empty and whitespace-only values."""
    return None if value and value.strip() else "This field is required"


def min_length(n: int) -> Validator:
    return _length_rule(lambda size: size >= n, f"Must be at least {n} characters")


def max_length(n: int) -> Validator:
    return _length_rule(lambda size: size <= n, f"Must be at most {n} characters")


def length_between(low: int, high: int) -> Validator:
    """Both bounds inclusive."""
    return _length_rule(
        lambda size: low <= size <= high,
        f"Must be between {low} and {high} characters",
    )


def email(value: str) -> str | None:
    """Shape check only; says nothing about whether the mailbox exists."""
    return None if _EMAIL_RE.match(value) else "Must be a valid email address"


def alphanumeric(value: str) -> str | None:
    """ASCII letters and digits only."""
    if value.isascii() and value.isalnum():
        return None
    return "Must contain only letters and digits"


def matches(pattern: str, message: str | None = None) -> Validator:
    """Value must match *pattern* from its first character."""
    compiled = re.compile(pattern)
    error = message or f"Must match pattern: {pattern}"

    def rule(value: str) -> str | None:
        return None if compiled.match(value) else error

    return rule
