"""Session middleware — start a session per request, flush it afterwards.

The session is bound to a ContextVar for the duration of the request,
accessible via ``get_session()`` from any handler or middleware. Where
the data lives is up to the ``SessionStore``:

- ``CookieSessionStore`` keeps the whole session in a signed cookie.
- ``MemorySessionStore`` keeps it server side; the cookie only carries
  a signed session id.

Both sign with ``itsdangerous``. The store is flushed in a ``finally``
block, so a handler that raises still has its session written back. A
new session nothing wrote to is neither stored nor sent.
"""

import logging
import secrets
import threading
import time
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Protocol

from itsdangerous import BadSignature, URLSafeTimedSerializer

from quire.errors import ConfigurationError
from quire.http.request import Request
from quire.http.response import Response
from quire.middleware.protocol import Next

logger = logging.getLogger("quire.sessions")


class Session(dict[str, Any]):
    """Per-request session data.

    A plain dict with an id. ``regenerate()`` drops every key and
    assigns a fresh id so the previous one can no longer be replayed.
    """

    __slots__ = ("id", "is_new", "stale_ids")

    def __init__(
        self, session_id: str, data: dict[str, Any] | None = None, *, is_new: bool
    ) -> None:
        super().__init__(data or {})
        self.id = session_id
        self.is_new = is_new
        self.stale_ids: list[str] = []

    def regenerate(self) -> None:
        self.clear()
        self.stale_ids.append(self.id)
        self.id = new_session_id()


def new_session_id() -> str:
    return secrets.token_urlsafe(24)


# -- Session ContextVar --

_session_var: ContextVar[Session | None] = ContextVar("quire_session", default=None)


def get_session() -> Session:
    """Return the current session.

    Raises ``LookupError`` if called outside a request with
    ``SessionMiddleware`` active.
    """
    session = _session_var.get()
    if session is None:
        msg = (
            "No active session. Ensure SessionMiddleware is added "
            "to the app before accessing the session."
        )
        raise LookupError(msg)
    return session


def regenerate_session() -> Session:
    """Clear the session and rotate its id.

    Called by ``login()`` and ``logout()`` to prevent session fixation.
    """
    session = get_session()
    session.regenerate()
    return session


# -- Stores --


class SessionStore(Protocol):
    """Where session data lives between requests.

    ``load`` receives the raw cookie value (``None`` when absent) and
    always returns a usable session. ``save`` persists the session and
    returns the cookie value to send back.
    """

    def load(self, cookie: str | None) -> Session: ...

    def save(self, session: Session) -> str: ...


class CookieSessionStore:
    """Whole-session signed cookie. Signed, not encrypted."""

    __slots__ = ("_max_age", "_serializer")

    def __init__(self, secret_key: str, *, max_age: int = 86400) -> None:
        self._serializer = URLSafeTimedSerializer(secret_key, salt="quire.session")
        self._max_age = max_age

    def load(self, cookie: str | None) -> Session:
        if cookie:
            try:
                payload = self._serializer.loads(cookie, max_age=self._max_age)
            except BadSignature:
                logger.debug("Discarding session cookie with a bad signature")
            else:
                if isinstance(payload, dict) and isinstance(payload.get("id"), str):
                    return Session(payload["id"], payload.get("data"), is_new=False)
        return Session(new_session_id(), is_new=True)

    def save(self, session: Session) -> str:
        return self._serializer.dumps({"id": session.id, "data": dict(session)})


class MemorySessionStore:
    """Server-side sessions in a process-local dict.

    The cookie carries only the signed session id. Data is lost on
    restart and is not shared between worker processes. Entries not
    saved for ``max_age`` seconds are dropped.
    """

    __slots__ = ("_lock", "_max_age", "_next_sweep", "_serializer", "_sessions")

    def __init__(self, secret_key: str, *, max_age: int = 86400) -> None:
        self._serializer = URLSafeTimedSerializer(secret_key, salt="quire.session-id")
        self._max_age = max_age
        # id -> (monotonic time of last save, data)
        self._sessions: dict[str, tuple[float, dict[str, Any]]] = {}
        self._next_sweep = 0.0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def data(self, session_id: str) -> dict[str, Any] | None:
        """Stored data for *session_id*, or ``None``."""
        with self._lock:
            entry = self._sessions.get(session_id)
        return None if entry is None else dict(entry[1])

    def load(self, cookie: str | None) -> Session:
        if cookie:
            try:
                session_id = self._serializer.loads(cookie, max_age=self._max_age)
            except BadSignature:
                logger.debug("Discarding session id with a bad signature")
            else:
                with self._lock:
                    entry = self._sessions.get(session_id)
                if entry is not None and not self._expired(entry[0], time.monotonic()):
                    return Session(session_id, dict(entry[1]), is_new=False)
        return Session(new_session_id(), is_new=True)

    def save(self, session: Session) -> str:
        now = time.monotonic()
        with self._lock:
            for stale in session.stale_ids:
                self._sessions.pop(stale, None)
            self._sessions[session.id] = (now, dict(session))
            if now >= self._next_sweep:
                self._sweep(now)
        return self._serializer.dumps(session.id)

    def _expired(self, saved_at: float, now: float) -> bool:
        return now - saved_at > self._max_age

    def _sweep(self, now: float) -> None:
        # Called with _lock held.
        expired = [
            sid
            for sid, (saved_at, _) in self._sessions.items()
            if self._expired(saved_at, now)
        ]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug("Evicted %d expired sessions", len(expired))
        self._next_sweep = now + min(self._max_age, 60)


# -- Configuration --


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Session middleware configuration.

    ``secret_key`` is required unless a ready-made ``store`` is given.
    """

    secret_key: str = ""
    store: SessionStore | None = None
    cookie_name: str = "quire_session"
    max_age: int = 86400  # 24 hours
    path: str = "/"
    secure: bool = False
    httponly: bool = True
    samesite: str = "lax"


# -- Middleware --


class SessionMiddleware:
    """Start a session for every request and flush it when the request ends.

    Usage::

        from quire.middleware.sessions import SessionConfig, SessionMiddleware

        app.add_middleware(SessionMiddleware(SessionConfig(secret_key="...")))

        # In a handler:
        from quire.middleware.sessions import get_session

        @app.route("/visits")
        def visits():
            session = get_session()
            session["visits"] = session.get("visits", 0) + 1
            return f"Visits: {session['visits']}"
    """

    __slots__ = ("_config", "_store")

    def __init__(self, config: SessionConfig) -> None:
        if config.store is None and not config.secret_key:
            msg = "SessionConfig.secret_key must not be empty."
            raise ConfigurationError(msg)
        self._config = config
        self._store: SessionStore = config.store or CookieSessionStore(
            config.secret_key, max_age=config.max_age
        )

    @property
    def store(self) -> SessionStore:
        return self._store

    def _attach_cookie(self, response: Response, value: str) -> Response:
        cfg = self._config
        return response.with_cookie(
            name=cfg.cookie_name,
            value=value,
            max_age=cfg.max_age,
            path=cfg.path,
            secure=cfg.secure,
            httponly=cfg.httponly,
            samesite=cfg.samesite,
        )

    async def __call__(self, request: Request, next: Next) -> Response:
        """Load the session, dispatch, then flush the session to the store."""
        session = self._store.load(request.cookies.get(self._config.cookie_name))
        token = _session_var.set(session)
        try:
            response = await next(request)
        finally:
            _session_var.reset(token)
            cookie_value = self._flush(session)

        if cookie_value is None:
            return response
        # Re-sent every time to refresh the signature timestamp
        return self._attach_cookie(response, cookie_value)

    def _flush(self, session: Session) -> str | None:
        """Save *session*, or return ``None`` if a new session was never written to."""
        if session.is_new and not session and not session.stale_ids:
            return None
        return self._store.save(session)
