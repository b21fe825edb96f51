"""Outcome of a ``validate()`` call."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Cleaned values plus per-field error messages.

    Truthy only when there are no errors::

        if not result:
            return Template("auth/register.html", errors=result.errors), 422
    """

    data: dict[str, str]
    errors: dict[str, list[str]]

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        return not self.errors

    def with_error(self, field_name: str, message: str) -> ValidationResult:
        """Copy of this result with one more error on *field_name*.

        Used for checks that involve several fields or the database,
        such as password confirmation or a name already taken.
        """
        errors = {name: [*messages] for name, messages in self.errors.items()}
        errors.setdefault(field_name, []).append(message)
        data = dict(self.data)
        data.pop(field_name, None)
        return replace(self, data=data, errors=errors)
