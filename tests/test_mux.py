"""Tests for pathmux.mux: registration, middleware order, and groups."""

import pytest

from pathmux.errors import ConfigurationError
from pathmux.http.response import Response
from pathmux.middleware.protocol import Next
from pathmux.mux import Mux
from pathmux.testing import TestClient


def _tag(name: str, calls: list[str]):
    def middleware(next: Next) -> Next:
        async def handler(request):
            calls.append(name)
            return await next(request)

        return handler

    return middleware


class TestHandle:
    async def test_plain_handler(self) -> None:
        mux = Mux()
        mux.handle("/hello", lambda request: "hello")
        async with TestClient(mux) as client:
            response = await client.get("/hello")
        assert response.status == 200
        assert response.text == "hello"

    async def test_unmatched_path_is_404(self) -> None:
        mux = Mux()
        mux.handle("/hello", lambda request: "hello")
        async with TestClient(mux) as client:
            response = await client.get("/missing")
        assert response.status == 404

    async def test_mux_middleware_runs_before_call_middleware(self) -> None:
        calls: list[str] = []
        mux = Mux(_tag("mux-1", calls), _tag("mux-2", calls))

        async def handler(request) -> Response:
            calls.append("handler")
            return Response("ok")

        mux.handle("/", handler, _tag("call-1", calls), _tag("call-2", calls))
        async with TestClient(mux) as client:
            await client.get("/")
        assert calls == ["mux-1", "mux-2", "call-1", "call-2", "handler"]

    async def test_call_middleware_is_per_registration(self) -> None:
        calls: list[str] = []
        mux = Mux()
        mux.handle("/a", lambda request: "a", _tag("only-a", calls))
        mux.handle("/b", lambda request: "b")
        async with TestClient(mux) as client:
            await client.get("/b")
            assert calls == []
            await client.get("/a")
        assert calls == ["only-a"]

    async def test_route_decorator(self) -> None:
        calls: list[str] = []
        mux = Mux()

        @mux.route("/items", _tag("items", calls))
        def items(request):
            return ["a", "b"]

        assert items(None) == ["a", "b"]
        async with TestClient(mux) as client:
            response = await client.get("/items")
        assert response.content_type == "application/json"
        assert response.text == '["a", "b"]'
        assert calls == ["items"]

    def test_none_handler(self) -> None:
        with pytest.raises(ConfigurationError, match="must not be None"):
            Mux().handle("/", None)  # type: ignore[arg-type]

    def test_duplicate_pattern(self) -> None:
        mux = Mux()
        mux.handle("/", lambda request: "")
        with pytest.raises(ConfigurationError, match="already registered"):
            mux.handle("/", lambda request: "")

    def test_patterns(self) -> None:
        mux = Mux()
        mux.handle("/a", lambda request: "")
        mux.group("/b/", lambda request: "")
        assert mux.patterns == ("/a", "/b/")


class TestGroup:
    async def test_prefix_is_stripped(self) -> None:
        seen: list[str] = []

        def sub(request):
            seen.append(request.path)
            return "sub"

        mux = Mux()
        mux.group("/api/", sub)
        async with TestClient(mux) as client:
            response = await client.get("/api/widgets")
        assert response.text == "sub"
        assert seen == ["/widgets"]

    async def test_group_root(self) -> None:
        seen: list[str] = []
        mux = Mux()
        mux.group("/api/", lambda request: seen.append(request.path))
        async with TestClient(mux) as client:
            await client.get("/api/")
        assert seen == ["/"]

    async def test_bare_prefix_redirects(self) -> None:
        mux = Mux()
        mux.group("/api/", lambda request: "sub")
        async with TestClient(mux) as client:
            response = await client.get("/api")
        assert response.status == 301
        assert response.header("location") == "/api/"

    async def test_nested_mux(self) -> None:
        calls: list[str] = []
        api = Mux(_tag("api", calls))
        api.handle("/widgets", lambda request: f"widgets under {request.root_path}")

        root = Mux(_tag("root", calls))
        root.group("/api/", api.serve, _tag("group", calls))

        async with TestClient(root) as client:
            response = await client.get("/api/widgets")
            missing = await client.get("/api/gadgets")

        assert response.text == "widgets under /api"
        assert missing.status == 404
        assert calls == ["root", "group", "api", "root", "group"]

    async def test_nested_redirect_keeps_outer_prefix(self) -> None:
        api = Mux()
        api.group("/v1/", lambda request: "v1")
        root = Mux()
        root.group("/api/", api.serve)
        async with TestClient(root) as client:
            response = await client.get("/api/v1")
        assert response.status == 301
        assert response.header("location") == "/api/v1/"

    def test_prefix_without_trailing_slash(self) -> None:
        with pytest.raises(ConfigurationError, match="must end with '/'"):
            Mux().group("/api", lambda request: "")


class TestFreeze:
    async def test_register_after_first_request(self) -> None:
        mux = Mux()
        mux.handle("/", lambda request: "")
        async with TestClient(mux) as client:
            await client.get("/")
        with pytest.raises(ConfigurationError, match="started serving"):
            mux.handle("/late", lambda request: "")
        with pytest.raises(ConfigurationError):
            mux.group("/late/", lambda request: "")


class TestASGIBridge:
    async def test_unhandled_exception_is_500(self, caplog: pytest.LogCaptureFixture) -> None:
        mux = Mux()

        async def broken(request):
            raise RuntimeError("bug in handler")

        mux.handle("/broken", broken)
        async with TestClient(mux) as client:
            response = await client.get("/broken")
        assert response.status == 500
        assert response.text == "Internal Server Error\n"
        assert "bug in handler" not in response.text
        assert any(r.name == "pathmux.server" and r.exc_info for r in caplog.records)

    async def test_non_http_scope_is_ignored(self) -> None:
        sent: list[dict] = []

        async def receive() -> dict:
            return {"type": "lifespan.startup"}

        async def send(message: dict) -> None:
            sent.append(message)

        await Mux()({"type": "lifespan"}, receive, send)
        assert sent == []

    async def test_request_body(self) -> None:
        mux = Mux()

        async def echo(request):
            return await request.json()

        mux.handle("/echo", echo)
        async with TestClient(mux) as client:
            response = await client.post("/echo", json={"name": "widget"})
        assert response.text == '{"name": "widget"}'
