"""Template return type.

A frozen value that handlers return. The content negotiation layer
renders it through the app's kida environment.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Template:
    """Render a full kida template.

    Usage::

        return Template("articles/show.html", article=article)
        return Template("articles/create.html", errors=errors), 422
    """

    name: str
    context: dict[str, Any] = field(default_factory=dict)

    def __init__(self, name: str, /, **context: Any) -> None:
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "context", context)
