"""Password hashing with argon2id via ``argon2-cffi``.

Hashes are PHC-format strings (``$argon2id$v=19$...``), safe for
database storage.

Usage::

    from quire.security.passwords import hash_password, verify_password

    hashed = hash_password("my-password")
    ok = verify_password("my-password", hashed)
"""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_ARGON2_PREFIX = "$argon2"

_hasher = PasswordHasher()


def is_hashed(value: str) -> bool:
    """True if *value* already looks like an argon2 hash."""
    return value.startswith(_ARGON2_PREFIX)


def hash_password(password: str) -> str:
    """Hash a password with argon2id.

    Raises ``ValueError`` for an empty password.
    """
    if not password:
        msg = "Password must not be empty."
        raise ValueError(msg)
    return _hasher.hash(password)


def verify_password(password: str, phc_hash: str) -> bool:
    """Check *password* against a stored hash. Never raises on mismatch."""
    if not password or not is_hashed(phc_hash):
        return False
    try:
        return _hasher.verify(phc_hash, password)
    except (VerificationError, InvalidHashError):
        return False
