"""Security utilities — password hashing.

::

    from quire.security import hash_password, verify_password

    hashed = hash_password("my-password")
    ok = verify_password("my-password", hashed)
"""

from quire.security.passwords import hash_password, is_hashed, verify_password

__all__ = ["hash_password", "is_hashed", "verify_password"]
