"""Blog settings, read from the environment.

=====================  ==========================  =================
Variable               Meaning                     Default
=====================  ==========================  =================
``QUIRE_HOST``         Bind address                ``127.0.0.1``
``QUIRE_PORT``         Bind port                   ``3000``
``QUIRE_DEBUG``        Tracebacks, template reload ``false``
``QUIRE_SECRET_KEY``   Session signing key         dev-only key
``QUIRE_DATABASE_URL`` ``sqlite:///`` URL          ``sqlite:///blog.db``
``QUIRE_LOG_LEVEL``    Root log level              ``info``
=====================  ==========================  =================
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from quire.config import AppConfig
from quire.errors import ConfigurationError

logger = logging.getLogger("quire.blog")

PACKAGE_DIR = Path(__file__).parent
TEMPLATES_DIR = PACKAGE_DIR / "templates"
MIGRATIONS_DIR = PACKAGE_DIR / "migrations"
PUBLIC_DIR = PACKAGE_DIR / "public"

_DEV_SECRET = "dev-only-not-for-production"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, slots=True)
class BlogSettings:
    """Everything the blog needs beyond ``AppConfig``."""

    app: AppConfig
    database_url: str = "sqlite:///blog.db"
    migrations_dir: Path = MIGRATIONS_DIR


def load_config(environ: Mapping[str, str] | None = None) -> BlogSettings:
    """Build settings from *environ* (``os.environ`` when omitted)."""
    env = os.environ if environ is None else environ

    raw_port = env.get("QUIRE_PORT", "3000")
    try:
        port = int(raw_port)
    except ValueError:
        msg = f"QUIRE_PORT must be an integer, got {raw_port!r}"
        raise ConfigurationError(msg) from None

    secret_key = env.get("QUIRE_SECRET_KEY", "")
    if not secret_key:
        logger.warning("QUIRE_SECRET_KEY is not set; using an insecure development key")
        secret_key = _DEV_SECRET

    app_config = AppConfig(
        host=env.get("QUIRE_HOST", "127.0.0.1"),
        port=port,
        debug=env.get("QUIRE_DEBUG", "").lower() in _TRUTHY,
        secret_key=secret_key,
        template_dir=TEMPLATES_DIR,
        static_dir=PUBLIC_DIR,
        log_level=env.get("QUIRE_LOG_LEVEL", "info").lower(),
    )
    return BlogSettings(
        app=app_config,
        database_url=env.get("QUIRE_DATABASE_URL", "sqlite:///blog.db"),
    )
