"""Authentication middleware — session-based login state.

Loads the logged-in user from the session and stores it in a
ContextVar, accessible via ``get_user()`` from any handler or
``current_user()`` from templates. Requires ``SessionMiddleware``
to be registered before it.

Usage::

    from quire.middleware.auth import AuthConfig, AuthMiddleware, get_user, login, logout

    app.add_middleware(SessionMiddleware(SessionConfig(secret_key="...")))
    app.add_middleware(AuthMiddleware(AuthConfig(load_user=users.find_for_session)))

    # In a handler:
    if get_user().is_authenticated:
        ...

    login(user)
    logout()
"""

import logging
from collections.abc import Awaitable, Callable
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, ClassVar, Protocol, runtime_checkable

from quire.errors import ConfigurationError
from quire.http.request import Request
from quire.http.response import Response
from quire.middleware.protocol import Next
from quire.middleware.sessions import get_session, regenerate_session

logger = logging.getLogger("quire.auth")


@runtime_checkable
class User(Protocol):
    """What ``AuthMiddleware`` needs from a user object: an id and a login flag."""

    @property
    def id(self) -> Any: ...

    @property
    def is_authenticated(self) -> bool: ...


@dataclass(frozen=True, slots=True)
class AnonymousUser:
    """Sentinel for unauthenticated requests.

    ``get_user()`` never returns ``None``; it returns this instead.
    """

    id: str = ""
    name: str = ""
    is_authenticated: bool = False


_ANONYMOUS = AnonymousUser()

_user_var: ContextVar[Any] = ContextVar("quire_user")


@dataclass(frozen=True, slots=True)
class AuthConfig:
    """Authentication middleware configuration.

    Attributes:
        load_user: Async callback loading a user by the id stored in
            the session. Returns ``None`` for unknown ids.
        session_key: Session key holding the user id.
    """

    load_user: Callable[[str], Awaitable[Any]] | None = None
    session_key: str = "uid"


_active_config: ContextVar[AuthConfig | None] = ContextVar("quire_auth_config", default=None)


def get_user() -> Any:
    """The logged-in user for this request, or ``AnonymousUser``.

    Outside a request handled by ``AuthMiddleware`` this raises
    ``LookupError``; templates use ``current_user()`` instead.
    """
    try:
        return _user_var.get()
    except LookupError:
        msg = (
            "get_user() called outside AuthMiddleware. "
            "Add AuthMiddleware to the app first."
        )
        raise LookupError(msg) from None


def current_user() -> Any:
    """Template-friendly ``get_user()``. Never raises.

    Registered as a template global when ``AuthMiddleware`` is active::

        {% if current_user().is_authenticated %}
            <span>{{ current_user().name }}</span>
        {% end %}
    """
    return _user_var.get(_ANONYMOUS)


def _config() -> AuthConfig:
    config = _active_config.get()
    if config is None:
        msg = "login() and logout() require AuthMiddleware to be active."
        raise LookupError(msg)
    return config


def login(user: Any) -> None:
    """Log in *user*: regenerate the session and record the user id."""
    config = _config()
    session = regenerate_session()
    session[config.session_key] = str(user.id)
    _user_var.set(user)
    logger.info("User %s logged in", user.id)


def logout() -> None:
    """Log out: discard every session key and reset to anonymous."""
    _config()
    regenerate_session()
    _user_var.set(_ANONYMOUS)


class AuthMiddleware:
    """Resolve the session's user id to a user object for each request."""

    __slots__ = ("_config",)

    # Template globals registered by App._freeze() when this
    # middleware is present.
    template_globals: ClassVar[dict[str, Any]] = {
        "current_user": current_user,
    }

    def __init__(self, config: AuthConfig) -> None:
        if config.load_user is None:
            msg = "AuthConfig.load_user must be set."
            raise ConfigurationError(msg)
        self._config = config

    async def _authenticate(self) -> Any:
        try:
            session = get_session()
        except LookupError:
            msg = "AuthMiddleware requires SessionMiddleware to be registered before it."
            raise ConfigurationError(msg) from None

        user_id = session.get(self._config.session_key)
        if not user_id:
            return None
        assert self._config.load_user is not None
        return await self._config.load_user(str(user_id))

    async def __call__(self, request: Request, next: Next) -> Response:
        user = await self._authenticate()
        token = _user_var.set(user if user is not None else _ANONYMOUS)
        config_token = _active_config.set(self._config)
        try:
            return await next(request)
        finally:
            _user_var.reset(token)
            _active_config.reset(config_token)
