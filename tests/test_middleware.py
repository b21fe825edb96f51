"""Tests for the middleware chain and the built-in request/response adjusters."""

from quire.app import App
from quire.config import AppConfig
from quire.errors import HTTPError
from quire.http.request import Request
from quire.http.response import Response
from quire.middleware.builtin import ForceHTML, RemoveTrailingSlash, strip_trailing_slash
from quire.server.handler import build_pipeline
from quire.testing import TestClient


def _recorder(label: str, calls: list[str]):
    async def mw(request: Request, next):
        calls.append(f"{label}:pre")
        response = await next(request)
        calls.append(f"{label}:post")
        return response

    return mw


class TestBuildPipeline:
    async def test_first_entry_is_outermost(self) -> None:
        calls: list[str] = []

        async def endpoint(request):
            calls.append("endpoint")
            return Response("ok")

        pipeline = build_pipeline(
            [_recorder("A", calls), _recorder("B", calls), _recorder("C", calls)], endpoint
        )
        response = await pipeline(None)
        assert response.text == "ok"
        assert calls == ["A:pre", "B:pre", "C:pre", "endpoint", "C:post", "B:post", "A:post"]

    async def test_empty_chain_is_endpoint(self) -> None:
        async def endpoint(request):
            return Response("bare")

        assert build_pipeline([], endpoint) is endpoint

    async def test_short_circuit(self) -> None:
        calls: list[str] = []

        async def gate(request, next):
            return Response("blocked", status=403)

        async def endpoint(request):
            calls.append("endpoint")
            return Response("ok")

        pipeline = build_pipeline([_recorder("A", calls), gate], endpoint)
        response = await pipeline(None)
        assert response.status == 403
        assert calls == ["A:pre", "A:post"]


class TestAppMiddlewareOrder:
    async def test_registration_order(self) -> None:
        app = App()
        calls: list[str] = []
        app.add_middleware(_recorder("A", calls))
        app.add_middleware(_recorder("B", calls))

        @app.route("/")
        def index():
            calls.append("handler")
            return "ok"

        async with TestClient(app) as client:
            response = await client.get("/")
        assert response.status == 200
        assert calls == ["A:pre", "B:pre", "handler", "B:post", "A:post"]

    async def test_middleware_can_rewrite_response(self) -> None:
        app = App()

        async def tag(request, next):
            response = await next(request)
            return response.with_header("X-Tagged", "yes")

        app.add_middleware(tag)

        @app.route("/")
        def index():
            return "ok"

        async with TestClient(app) as client:
            response = await client.get("/")
        assert ("x-tagged", "yes") in response.headers

    async def test_middleware_sees_unmatched_requests(self) -> None:
        app = App()
        calls: list[str] = []
        app.add_middleware(_recorder("A", calls))

        async with TestClient(app) as client:
            response = await client.get("/nowhere")
        assert response.status == 404
        assert calls == ["A:pre"]


class TestStripTrailingSlash:
    def test_strips_one_slash(self) -> None:
        assert strip_trailing_slash("/about/") == "/about"

    def test_root_untouched(self) -> None:
        assert strip_trailing_slash("/") == "/"

    def test_only_one_slash_removed(self) -> None:
        assert strip_trailing_slash("/about//") == "/about/"

    def test_no_slash(self) -> None:
        assert strip_trailing_slash("/about") == "/about"


class TestRemoveTrailingSlash:
    async def test_rewrites_path_before_handler(self) -> None:
        seen: list[str] = []
        app = App()

        @app.route("/articles")
        def articles(request: Request):
            seen.append(request.path)
            return "articles"

        async with TestClient(app) as client:
            response = await client.get("/articles/")
        assert response.status == 200
        assert response.text == "articles"
        assert seen == ["/articles"]

    async def test_root_still_matches(self) -> None:
        app = App()
        app.add_route("/", lambda: "home")

        async with TestClient(app) as client:
            response = await client.get("/")
        assert response.text == "home"

    async def test_same_response_with_and_without_slash(self) -> None:
        app = App()
        app.add_route("/about", lambda: "about us")

        async with TestClient(app) as client:
            plain = await client.get("/about")
            slashed = await client.get("/about/")
        assert plain.status == slashed.status == 200
        assert plain.text == slashed.text

    async def test_double_slash_not_collapsed(self) -> None:
        app = App()
        app.add_route("/about", lambda: "about us")

        async with TestClient(app) as client:
            response = await client.get("/about//")
        assert response.status == 404

    async def test_disabled(self) -> None:
        app = App(AppConfig(strip_trailing_slash=False))
        app.add_route("/about", lambda: "about us")

        async with TestClient(app) as client:
            response = await client.get("/about/")
        assert response.status == 404

    async def test_runs_before_other_middleware(self) -> None:
        app = App()
        seen: list[str] = []

        async def spy(request, next):
            seen.append(request.path)
            return await next(request)

        app.add_middleware(spy)
        app.add_route("/about", lambda: "about us")

        async with TestClient(app) as client:
            await client.get("/about/")
        assert seen == ["/about"]

    async def test_standalone_layer(self) -> None:
        seen: list[str] = []

        async def endpoint(request):
            seen.append(request.path)
            return Response("ok")

        request = Request.from_asgi(
            {"type": "http", "method": "GET", "path": "/x/", "headers": []}, None
        )
        await RemoveTrailingSlash()(request, endpoint)
        assert seen == ["/x"]


class TestForceHTML:
    async def test_overrides_content_type(self) -> None:
        app = App()
        app.add_middleware(ForceHTML())

        @app.route("/data")
        def data():
            return Response(body="{}", content_type="application/json")

        async with TestClient(app) as client:
            response = await client.get("/data")
        assert response.content_type == "text/html; charset=utf-8"
        assert response.text == "{}"

    async def test_applies_to_responses_from_inner_layers(self) -> None:
        app = App()
        app.add_middleware(ForceHTML())

        async def plain_text(request, next):
            return Response("teapot", status=418, content_type="text/plain")

        app.add_middleware(plain_text)

        async with TestClient(app) as client:
            response = await client.get("/")
        assert response.status == 418
        assert response.content_type.startswith("text/html")

    async def test_applies_to_error_pages_from_raised_errors(self) -> None:
        app = App()
        app.add_middleware(ForceHTML())

        @app.error(418)
        def teapot():
            return Response("short and stout", content_type="text/plain")

        @app.route("/tea")
        def tea():
            raise HTTPError(status=418)

        async with TestClient(app) as client:
            response = await client.get("/tea")
        assert response.status == 418
        assert response.text == "short and stout"
        assert response.content_type.startswith("text/html")
