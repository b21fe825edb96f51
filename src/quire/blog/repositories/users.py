"""User queries and credential checks."""

import logging

from quire.blog.models import User, is_row_id
from quire.data import Database
from quire.security import hash_password, is_hashed, verify_password

logger = logging.getLogger("quire.blog")


class AuthenticationFailed(Exception):
    """Unknown email or wrong password. The message does not say which."""

    def __init__(self) -> None:
        super().__init__("Account does not exist or password is incorrect")


class UserRepository:
    __slots__ = ("_db",)

    def __init__(self, db: Database) -> None:
        self._db = db

    async def create(self, name: str, email: str, password: str) -> User:
        """Insert a user. Plain-text passwords are hashed before saving."""
        if not is_hashed(password):
            password = hash_password(password)
        user_id = await self._db.insert(
            "INSERT INTO users (name, email, password) VALUES (?, ?, ?)",
            name,
            email,
            password,
        )
        logger.info("Registered user %d (%s)", user_id, name)
        user = await self.get(user_id)
        assert user is not None
        return user

    async def get(self, user_id: int) -> User | None:
        if not is_row_id(user_id):
            return None
        return await self._db.fetch_one(User, "SELECT * FROM users WHERE id = ?", user_id)

    async def get_by_email(self, email: str) -> User | None:
        return await self._db.fetch_one(User, "SELECT * FROM users WHERE email = ?", email)

    async def name_taken(self, name: str) -> bool:
        return bool(await self._db.fetch_val("SELECT 1 FROM users WHERE name = ?", name))

    async def email_taken(self, email: str) -> bool:
        return bool(await self._db.fetch_val("SELECT 1 FROM users WHERE email = ?", email))

    async def attempt(self, email: str, password: str) -> User:
        """Return the user owning *email* if *password* matches.

        Raises ``AuthenticationFailed`` otherwise.
        """
        user = await self.get_by_email(email)
        if user is None or not verify_password(password, user.password):
            raise AuthenticationFailed
        return user

    async def find_for_session(self, user_id: str) -> User | None:
        """Load the user for an id stored in the session."""
        if not user_id.isdigit():
            return None
        return await self.get(int(user_id))
