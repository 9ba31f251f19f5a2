"""Tests for the request logging middleware."""

import logging

import pytest

from pathmux.middleware.logging import RequestLoggingMiddleware
from pathmux.mux import Mux
from pathmux.testing import TestClient


def _mux(**kwargs) -> Mux:
    mux = Mux(RequestLoggingMiddleware(**kwargs))
    mux.handle("/ok", lambda request: "ok")
    mux.handle("/fail", lambda request: ("down", 503))
    mux.group("/api/", lambda request: "api")
    return mux


class TestRequestLogging:
    async def test_logs_one_line_per_request(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="pathmux.access")
        async with TestClient(_mux()) as client:
            await client.get("/ok")
        records = [r for r in caplog.records if r.name == "pathmux.access"]
        assert len(records) == 1
        assert records[0].levelno == logging.INFO
        assert records[0].getMessage().startswith("GET /ok 200 ")

    async def test_server_errors_logged_as_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="pathmux.access")
        async with TestClient(_mux()) as client:
            await client.get("/fail")
        records = [r for r in caplog.records if r.name == "pathmux.access"]
        assert records[0].levelno == logging.WARNING
        assert " 503 " in records[0].getMessage()

    async def test_unmatched_paths_are_not_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="pathmux.access")
        async with TestClient(_mux()) as client:
            response = await client.get("/missing")
        assert response.status == 404
        assert not [r for r in caplog.records if r.name == "pathmux.access"]

    async def test_custom_logger(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="tests.access")
        async with TestClient(_mux(logger=logging.getLogger("tests.access"))) as client:
            await client.get("/ok")
        assert [r.name for r in caplog.records if r.name.endswith("access")] == ["tests.access"]
