"""Path parameter constraints.

A constraint is either a named converter (``{id:int}``) or a regular
expression the whole segment must match (``{id:[0-9]+}``).
"""

import re
from functools import lru_cache

from quire.errors import ConfigurationError

# Named converters and the pattern each stands for
CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
}


@lru_cache(maxsize=256)
def compile_constraint(constraint: str) -> re.Pattern[str]:
    """Return the compiled pattern for a converter name or raw regex.

    Raises ``ConfigurationError`` if *constraint* is not valid regex.
    """
    pattern = CONVERTERS[constraint] if constraint in CONVERTERS else constraint
    try:
        return re.compile(pattern)
    except re.error as exc:
        msg = f"Invalid path parameter constraint {constraint!r}: {exc}"
        raise ConfigurationError(msg) from exc


def satisfies(value: str, constraint: str) -> bool:
    """True if *value* matches *constraint* in full."""
    if not value:
        return False
    return compile_constraint(constraint).fullmatch(value) is not None

