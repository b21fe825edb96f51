"""Lenient reverse resolution for templates and handlers.

``Router.url_for`` raises on every failure. Page rendering should not
break because one link is wrong, so ``name_to_url`` logs the failure
and hands back an empty string instead.
"""

import logging

from quire.errors import URLResolutionError
from quire.routing.router import Router

logger = logging.getLogger("quire.routing")


def name_to_url(router: Router, name: str, *pairs: object) -> str:
    """Resolve *name* to a path, or log and return ``""`` on failure."""
    try:
        return router.url_for(name, *pairs)
    except URLResolutionError as exc:
        logger.error("URL resolution failed: %s", exc)
        return ""
