"""Reading ``Cookie`` headers and writing ``Set-Cookie`` ones."""

from dataclasses import dataclass


def parse_cookies(header: str) -> dict[str, str]:
    """``"a=1; b=2"`` -> ``{"a": "1", "b": "2"}``. Pairs without ``=`` are skipped."""
    pairs = (chunk.strip().partition("=") for chunk in header.split(";"))
    return {name.strip(): value.strip() for name, sep, value in pairs if sep}


@dataclass(frozen=True, slots=True)
class SetCookie:
    """One cookie a response asks the browser to store (or drop, with ``max_age=0``)."""

    name: str
    value: str
    max_age: int | None = None
    path: str = "/"
    secure: bool = False
    httponly: bool = True
    samesite: str = "lax"

    def to_header_value(self) -> str:
        attributes = [
            f"{self.name}={self.value}",
            f"Max-Age={self.max_age}" if self.max_age is not None else "",
            f"Path={self.path}" if self.path else "",
            "Secure" if self.secure else "",
            "HttpOnly" if self.httponly else "",
            f"SameSite={self.samesite}" if self.samesite else "",
        ]
        return "; ".join(attr for attr in attributes if attr)
