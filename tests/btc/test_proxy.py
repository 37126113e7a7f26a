"""Tests for the /api/btc proxy routes."""

import asyncio

import httpx
import pytest
from fastapi import FastAPI

from app.btc.errors import ParseError
from app.btc.mock import MockPriceGenerator
from app.btc.proxy import create_proxy_router, normalize_latest, normalize_list
from app.btc.upstream import UpstreamClient

POINT_A = {"_id": "a", "price": 86300.0, "createdAt": "2025-03-01T12:00:00.000Z", "__v": 0}
POINT_B = {"_id": "b", "price": 86310.0, "createdAt": "2025-03-01T12:00:05.000Z", "__v": 0}


def _app(handler, timeout: float = 5.0) -> FastAPI:
    upstream = UpstreamClient(
        timeout=timeout,
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://upstream"),
    )
    app = FastAPI()
    app.include_router(create_proxy_router(upstream, MockPriceGenerator(seed=0)))
    return app


def _caller(app: FastAPI) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://dashboard")


class TestNormalize:
    """Tests for upstream payload normalization."""

    def test_latest_object(self):
        assert normalize_latest(POINT_A).id == "a"

    def test_latest_single_element_list(self):
        """Test that the older list-wrapped shape is unwrapped."""
        assert normalize_latest([POINT_B]).id == "b"

    def test_latest_empty_list(self):
        with pytest.raises(ParseError):
            normalize_latest([])

    def test_list_sorted_newest_first(self):
        points = normalize_list([POINT_A, POINT_B])
        assert [p.id for p in points] == ["b", "a"]

    def test_list_truncated(self):
        assert len(normalize_list([POINT_A] * 15)) == 10

    def test_list_rejects_object(self):
        with pytest.raises(ParseError):
            normalize_list(POINT_A)


@pytest.mark.asyncio
class TestProxyRoutes:
    """Route tests with a mocked upstream backend."""

    async def test_latest_passthrough(self):
        app = _app(lambda request: httpx.Response(200, json={"errors": {}, "data": POINT_B}))

        async with _caller(app) as client:
            response = await client.get("/api/btc/latest")

        assert response.status_code == 200
        assert response.json() == {"errors": {}, "data": POINT_B}
        assert response.headers["cache-control"] == "no-store"

    async def test_latest_list_shape_unwrapped(self):
        app = _app(lambda request: httpx.Response(200, json={"errors": {}, "data": [POINT_A]}))

        async with _caller(app) as client:
            response = await client.get("/api/btc/latest")

        assert response.json()["data"] == POINT_A

    async def test_latest_fallback_on_error_status(self):
        """Test that an upstream 500 still yields 200 with one mock point."""
        app = _app(lambda request: httpx.Response(500))

        async with _caller(app) as client:
            response = await client.get("/api/btc/latest")

        assert response.status_code == 200
        body = response.json()
        assert body["errors"] == {}
        assert isinstance(body["data"], dict)
        assert body["data"]["_id"].startswith("mock_")
        assert 86250.0 <= body["data"]["price"] <= 86350.0

    async def test_latest_fallback_on_slow_upstream(self):
        """Test that a 6s upstream stall is answered with mock data at the deadline."""

        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(6)
            return httpx.Response(200, json={"errors": {}, "data": POINT_A})

        app = _app(handler, timeout=0.2)
        loop = asyncio.get_running_loop()
        started = loop.time()

        async with _caller(app) as client:
            response = await client.get("/api/btc/latest")

        assert loop.time() - started < 2.0
        assert response.status_code == 200
        assert response.json()["data"]["_id"].startswith("mock_")

    async def test_latest_fallback_on_malformed_payload(self):
        app = _app(lambda request: httpx.Response(200, json={"errors": {}, "data": {"price": "n/a"}}))

        async with _caller(app) as client:
            response = await client.get("/api/btc/latest")

        assert response.status_code == 200
        assert response.json()["data"]["_id"].startswith("mock_")

    async def test_list_passthrough_sorted(self):
        app = _app(lambda request: httpx.Response(200, json={"errors": {}, "data": [POINT_A, POINT_B]}))

        async with _caller(app) as client:
            response = await client.get("/api/btc/list")

        assert response.status_code == 200
        assert response.json()["data"] == [POINT_B, POINT_A]

    async def test_list_fallback(self):
        """Test ten synthesized points, 5s apart, newest first."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        app = _app(handler)

        async with _caller(app) as client:
            response = await client.get("/api/btc/list")

        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data) == 10
        stamps = [item["createdAt"] for item in data]
        assert stamps == sorted(stamps, reverse=True)
