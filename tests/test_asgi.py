"""The Mux as a plain ASGI app, driven by httpx."""

import httpx

from pathmux.error_handler import ErrorHandler
from pathmux.errors import error
from pathmux.mux import Mux
from pathmux.routing.methods import methods, with_get, with_post


def _app() -> Mux:
    errors = ErrorHandler(logger=None)
    api = Mux()

    @errors.err
    async def create(request):
        payload = await request.json()
        if "name" not in payload:
            raise error(KeyError("name"), 400, "name is required")
        return payload, 201

    api.handle("/widgets", methods(with_get(lambda request: []), with_post(create)))

    mux = Mux()
    mux.group("/api/", api.serve)
    return mux


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=_app()), base_url="http://test")


class TestHttpx:
    async def test_get(self) -> None:
        async with _client() as client:
            response = await client.get("/api/widgets")
        assert response.status_code == 200
        assert response.json() == []

    async def test_post_created(self) -> None:
        async with _client() as client:
            response = await client.post("/api/widgets", json={"name": "sprocket"})
        assert response.status_code == 201
        assert response.json() == {"name": "sprocket"}

    async def test_post_handler_error(self) -> None:
        async with _client() as client:
            response = await client.post("/api/widgets", json={})
        assert response.status_code == 400
        assert response.text == "name is required\n"

    async def test_options(self) -> None:
        async with _client() as client:
            response = await client.options("/api/widgets")
        assert response.status_code == 200
        assert set(response.headers["allow"].split(", ")) == {"GET", "POST"}

    async def test_unregistered_method(self) -> None:
        async with _client() as client:
            response = await client.delete("/api/widgets")
        assert response.status_code == 404
