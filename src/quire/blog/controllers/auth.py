"""Registration, login and logout."""

from quire.app import App
from quire.blog.repositories import AuthenticationFailed, UserRepository
from quire.http.request import Request
from quire.http.response import Redirect
from quire.middleware.auth import login, logout
from quire.templating.returns import Template
from quire.validation import (
    ValidationResult,
    alphanumeric,
    email,
    length_between,
    min_length,
    required,
    validate,
)

REGISTRATION_RULES = {
    "name": [required, alphanumeric, length_between(3, 20)],
    "email": [required, length_between(4, 30), email],
    "password": [required, min_length(6)],
    "password_confirm": [required],
}

_FIELDS = ("name", "email", "password", "password_confirm")


class AuthController:
    __slots__ = ("_app", "_users")

    def __init__(self, app: App, users: UserRepository) -> None:
        self._app = app
        self._users = users

    def register(self) -> Template:
        return Template("auth/register.html", name="", email="", errors={})

    async def validate_registration(self, form: dict[str, str]) -> ValidationResult:
        """Field rules, then the checks that need the database or both passwords."""
        result = validate(form, REGISTRATION_RULES)
        if "password_confirm" in result.data and form["password_confirm"] != form["password"]:
            result = result.with_error("password_confirm", "Passwords do not match")
        if "name" in result.data and await self._users.name_taken(form["name"]):
            result = result.with_error("name", "Name is already taken")
        if "email" in result.data and await self._users.email_taken(form["email"]):
            result = result.with_error("email", "Email is already registered")
        return result

    async def do_register(self, request: Request) -> Redirect | tuple[Template, int]:
        data = await request.form()
        form = {name: data.get(name, "") for name in _FIELDS}

        result = await self.validate_registration(form)
        if not result:
            # Passwords are never echoed back into the page
            return (
                Template(
                    "auth/register.html",
                    name=form["name"],
                    email=form["email"],
                    errors=result.errors,
                ),
                422,
            )

        user = await self._users.create(form["name"], form["email"], form["password"])
        login(user)
        return Redirect(self._app.url_for("home"))

    def login(self) -> Template:
        return Template("auth/login.html", email="", error="")

    async def do_login(self, request: Request) -> Redirect | Template:
        form = await request.form()
        email_value = form.get("email", "")

        try:
            user = await self._users.attempt(email_value, form.get("password", ""))
        except AuthenticationFailed as exc:
            return Template("auth/login.html", email=email_value, error=str(exc))

        login(user)
        return Redirect(self._app.url_for("home"))

    def logout(self) -> Redirect:
        logout()
        return Redirect(self._app.url_for("home"))
