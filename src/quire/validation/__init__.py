"""Form validation.

Rules are plain callables grouped per field::

    from quire.validation import validate, required, length_between, min_length

    result = validate(await request.form(), {
        "title": [required, length_between(3, 40)],
        "body": [required, min_length(10)],
    })
    if not result:
        return Template("articles/create.html", errors=result.errors), 422
"""

from collections.abc import Mapping

from quire.validation.result import ValidationResult
from quire.validation.rules import (
    Validator,
    alphanumeric,
    email,
    length_between,
    matches,
    max_length,
    min_length,
    required,
)

__all__ = [
    "ValidationResult",
    "Validator",
    "alphanumeric",
    "email",
    "length_between",
    "matches",
    "max_length",
    "min_length",
    "required",
    "validate",
]


def _check_field(value: str, validators: list[Validator]) -> list[str]:
    messages: list[str] = []
    for validator in validators:
        message = validator(value)
        if message is None:
            continue
        messages.append(message)
        # an empty value would fail the remaining rules too
        if validator is required:
            break
    return messages


def validate(data: Mapping[str, str], rules: dict[str, list[Validator]]) -> ValidationResult:
    """Run *rules* over *data* (``FormData``, ``QueryParams`` or a dict).

    Missing fields validate as the empty string. Every failing rule
    contributes a message, except that a failed ``required`` ends the
    field's checks.
    """
    errors: dict[str, list[str]] = {}
    cleaned: dict[str, str] = {}
    for field_name, validators in rules.items():
        value = data.get(field_name) or ""
        if messages := _check_field(value, validators):
            errors[field_name] = messages
        else:
            cleaned[field_name] = value
    return ValidationResult(data=cleaned, errors=errors)
