"""A small blog built on quire: articles, authors, registration and login.

Run it with ``quire-blog serve`` or ``python -m quire.blog``.
"""

from quire.blog.app import create_app
from quire.blog.settings import BlogSettings, load_config

__all__ = ["BlogSettings", "create_app", "load_config"]
