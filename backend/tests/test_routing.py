"""
Tests for dispatch, CORS headers and the not-found fallback.
"""

import pytest
from httpx import AsyncClient

from cinebook.main import app
from cinebook.db.session import get_db

CORS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "POST, GET, DELETE, OPTIONS",
    "access-control-allow-headers": "Content-Type",
}


def assert_cors(response):
    for header, value in CORS.items():
        assert response.headers[header] == value
    assert response.headers["content-type"].startswith("application/json")


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/api/signin", "/api/book", "/api/cancel", "/anything/else"])
async def test_options_preflight(client: AsyncClient, path):
    response = await client.options(path)
    assert response.status_code == 200
    assert response.json() == {}
    assert_cors(response)


@pytest.mark.asyncio
async def test_options_does_not_open_session(client: AsyncClient):
    """Preflight is answered before any database session is requested."""
    opened = []

    async def tracking_get_db():
        opened.append(True)
        yield None

    app.dependency_overrides[get_db] = tracking_get_db
    response = await client.options("/api/book")
    assert response.status_code == 200
    assert opened == []


@pytest.mark.asyncio
@pytest.mark.parametrize("method,path", [
    ("GET", "/api/signin"),
    ("GET", "/api/book"),
    ("GET", "/"),
    ("POST", "/api/cancel"),
    ("DELETE", "/api/book"),
    ("PUT", "/api/signin"),
    ("POST", "/api/unknown"),
    ("POST", "/api/signin/"),
    ("POST", "/api/book/"),
    ("GET", "/api/book/"),
    ("DELETE", "/api/cancel/"),
])
async def test_unknown_endpoint(client: AsyncClient, method, path):
    response = await client.request(method, path)
    assert response.status_code == 404
    assert response.json() == {"status": "error", "message": "Endpoint Not Found"}
    assert_cors(response)


@pytest.mark.asyncio
async def test_route_responses_carry_cors(client: AsyncClient):
    response = await client.post("/api/signin", data={"username": "zoe", "password": "pw"})
    assert response.status_code == 200
    assert_cors(response)


@pytest.mark.asyncio
async def test_error_responses_carry_cors(client: AsyncClient):
    response = await client.post("/api/book", data={})
    assert response.status_code == 400
    assert_cors(response)
