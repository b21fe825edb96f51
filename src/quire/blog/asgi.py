"""Module-level ASGI app, configured from the environment.

For servers that import an app by name::

    pounce quire.blog.asgi:app
"""

from quire.blog.app import create_app

app = create_app()
