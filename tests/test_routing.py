import pytest
from httpx import AsyncClient, ASGITransport

from hostel_api.api.deps import get_db_session
from hostel_api.main import app

CORS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "GET, POST, PUT, DELETE, OPTIONS",
    "access-control-allow-headers": "Content-Type, Authorization",
}


def assert_cors(res):
    for header, value in CORS.items():
        assert res.headers[header] == value


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/api/signup", "/api/student/11232763", "/nowhere"])
async def test_preflight_short_circuits(client, path):
    res = await client.options(path, headers={"Origin": "http://localhost:5173"})

    assert res.status_code == 200
    assert res.content == b""
    assert_cors(res)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method, path",
    [
        ("GET", "/"),
        ("GET", "/api/unknown"),
        ("GET", "/api/signup"),
        ("DELETE", "/api/signup"),
        ("PATCH", "/api/student/11232763"),
        ("GET", "/api/student/"),
        ("GET", "/docs"),
    ],
)
async def test_unknown_route(client, method, path):
    res = await client.request(method, path)

    assert res.status_code == 404
    assert res.json() == {"error": "Route not found"}
    assert_cors(res)


@pytest.mark.asyncio
async def test_cors_headers_on_success_and_error(client, signup_student):
    created = await signup_student()
    conflict = await signup_student()
    profile = await client.get("/api/student/11232763")

    for res in (created, conflict, profile):
        assert_cors(res)
        assert res.headers["content-type"].startswith("application/json")


@pytest.mark.asyncio
async def test_failure_outside_handler_is_json_with_cors(client):
    async def broken_session():
        raise RuntimeError("database unreachable")
        yield

    app.dependency_overrides[get_db_session] = broken_session

    # The server error middleware re-raises after answering; read the answer
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        res = await ac.get("/api/student/11232763")

    assert res.status_code == 500
    assert res.json() == {"error": "Internal server error"}
    assert_cors(res)
