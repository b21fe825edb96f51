"""Form bodies: parsing and binding to dataclasses.

Only ``application/x-www-form-urlencoded`` is accepted; the blog's
forms carry no files. Binding (``form_from``) and rule checks
(``quire.validation``) are separate steps so a handler can bind once
and re-render the same values when validation fails.
"""

import types
from dataclasses import MISSING, Field, fields
from typing import Any, get_type_hints
from urllib.parse import parse_qs

from quire.http.query import MultiDict

_FORM_TYPE = "application/x-www-form-urlencoded"


class FormData(MultiDict):
    """A parsed form body. ``form.get("title", "")`` reads the first value."""

    __slots__ = ()


class FormBindingError(Exception):
    """The form could not be turned into the requested dataclass.

    ``errors`` maps each offending field to its messages.
    """

    def __init__(self, errors: dict[str, list[str]]) -> None:
        self.errors = errors
        super().__init__(f"Form binding failed for: {', '.join(sorted(errors))}")


def parse_form_data(body: bytes, content_type: str) -> FormData:
    """Decode a URL-encoded *body* as UTF-8. Blank values are kept.

    Raises ``ValueError`` for any other content type.
    """
    media_type = content_type.partition(";")[0].strip().lower()
    if media_type != _FORM_TYPE:
        msg = f"Unsupported form content type: {content_type!r}"
        raise ValueError(msg)
    return FormData(parse_qs(body.decode("utf-8"), keep_blank_values=True))


def _to_bool(raw: str) -> bool:
    return raw.lower() in {"1", "on", "true", "yes"}


_CONVERTERS: dict[type, Any] = {str: str.strip, bool: _to_bool, int: int, float: float}


def _field_type(hint: Any) -> type:
    # ``int | None`` binds as int; anything exotic binds as str
    if isinstance(hint, types.UnionType):
        hint = next((arg for arg in hint.__args__ if arg is not type(None)), str)
    return hint if isinstance(hint, type) else str


def _default(f: Field) -> Any:
    if f.default is not MISSING:
        return f.default
    if f.default_factory is not MISSING:
        return f.default_factory()
    return MISSING


async def form_from[T](request: Any, datacls: type[T]) -> T:
    """Read the request's form into a new *datacls* instance.

    Strings are stripped; ``int``, ``float`` and ``bool`` fields are
    converted. Fields without a default must be present::

        form = await form_from(request, ArticleForm)

    Raises ``FormBindingError`` listing every field that failed.
    """
    form = await request.form()
    hints = get_type_hints(datacls)
    values: dict[str, Any] = {}
    errors: dict[str, list[str]] = {}

    for f in fields(datacls):  # type: ignore[arg-type]
        raw = form.get(f.name)
        if raw is None:
            default = _default(f)
            if default is MISSING:
                errors[f.name] = [f"{f.name} is required."]
            else:
                values[f.name] = default
            continue

        target = _field_type(hints.get(f.name, str))
        try:
            values[f.name] = _CONVERTERS.get(target, target)(raw)
        except (TypeError, ValueError):
            errors[f.name] = [f"Invalid value for {f.name}: expected {target.__name__}."]

    if errors:
        raise FormBindingError(errors)
    return datacls(**values)


def form_values(form: Any) -> dict[str, str]:
    """String view of a bound form, for refilling inputs. ``None`` becomes ``""``."""
    values: dict[str, str] = {}
    for f in fields(form):
        value = getattr(form, f.name)
        values[f.name] = "" if value is None else str(value)
    return values
