"""Tests for quire.middleware.auth — session-backed login state."""

from dataclasses import dataclass

import pytest

from quire.app import App
from quire.errors import ConfigurationError
from quire.middleware.auth import (
    AnonymousUser,
    AuthConfig,
    AuthMiddleware,
    current_user,
    get_user,
    login,
    logout,
)
from quire.middleware.sessions import (
    MemorySessionStore,
    SessionConfig,
    SessionMiddleware,
    get_session,
)
from quire.testing import TestClient


@dataclass(frozen=True, slots=True)
class User:
    id: int
    name: str
    is_authenticated: bool = True


USERS = {"1": User(id=1, name="alice")}


async def load_user(user_id: str) -> User | None:
    return USERS.get(user_id)


def _app(store: MemorySessionStore | None = None) -> App:
    app = App()
    config = SessionConfig(store=store) if store else SessionConfig(secret_key="k")
    app.add_middleware(SessionMiddleware(config))
    app.add_middleware(AuthMiddleware(AuthConfig(load_user=load_user)))

    @app.route("/whoami")
    def whoami():
        user = get_user()
        return user.name if user.is_authenticated else "anonymous"

    @app.route("/login", method="POST")
    def do_login():
        get_session()["cart"] = "stale"
        login(USERS["1"])
        return "logged in"

    @app.route("/logout", method="POST")
    def do_logout():
        logout()
        return "logged out"

    @app.route("/session")
    def session_keys():
        return ",".join(sorted(get_session()))

    return app


class TestAuthMiddleware:
    async def test_anonymous_by_default(self) -> None:
        async with TestClient(_app()) as client:
            response = await client.get("/whoami")
        assert response.text == "anonymous"

    async def test_login_then_logout(self) -> None:
        async with TestClient(_app()) as client:
            await client.post("/login")
            assert (await client.get("/whoami")).text == "alice"
            await client.post("/logout")
            assert (await client.get("/whoami")).text == "anonymous"

    async def test_login_stores_only_user_id(self) -> None:
        async with TestClient(_app()) as client:
            await client.post("/login")
            response = await client.get("/session")
        assert response.text == "uid"

    async def test_login_regenerates_session(self) -> None:
        store = MemorySessionStore("k")
        async with TestClient(_app(store)) as client:
            await client.post("/login")
            before = set(store._sessions)
            await client.post("/login")
            after = set(store._sessions)
        assert len(after) == 1
        assert before.isdisjoint(after)

    async def test_logout_clears_session(self) -> None:
        async with TestClient(_app()) as client:
            await client.post("/login")
            await client.post("/logout")
            response = await client.get("/session")
        assert response.text == ""

    async def test_unknown_user_id_is_anonymous(self) -> None:
        store = MemorySessionStore("k")
        app = _app(store)

        @app.route("/forge")
        def forge():
            get_session()["uid"] = "999"
            return "forged"

        async with TestClient(app) as client:
            await client.get("/forge")
            response = await client.get("/whoami")
        assert response.text == "anonymous"

    async def test_requires_session_middleware(self) -> None:
        app = App()
        app.add_middleware(AuthMiddleware(AuthConfig(load_user=load_user)))
        app.add_route("/", lambda: "home")

        async with TestClient(app) as client:
            response = await client.get("/")
        assert response.status == 500

    def test_requires_loader(self) -> None:
        with pytest.raises(ConfigurationError):
            AuthMiddleware(AuthConfig())


class TestOutsideRequest:
    def test_current_user_is_anonymous(self) -> None:
        assert isinstance(current_user(), AnonymousUser)
        assert not current_user().is_authenticated

    def test_get_user_raises(self) -> None:
        with pytest.raises(LookupError):
            get_user()

    def test_login_raises(self) -> None:
        with pytest.raises(LookupError):
            login(USERS["1"])
