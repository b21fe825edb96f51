"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, port=3000, secret_key="s3cr3t")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = False

    # Security
    secret_key: str = ""

    # Routing
    strip_trailing_slash: bool = True  # "/articles/" dispatches like "/articles"

    # Templates
    template_dir: str | Path = "templates"
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Static files
    static_dir: str | Path | None = None
    static_prefixes: tuple[str, ...] = ("/css", "/js")

    # Logging
    log_level: str = "info"
