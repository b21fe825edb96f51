"""Test utilities for quire applications.

    from quire.testing import TestClient
"""

from quire.testing.client import TestClient, header

__all__ = [
    "TestClient",
    "header",
]
