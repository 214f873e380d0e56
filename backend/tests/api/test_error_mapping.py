"""Error mapping — uniform status codes and {"error": ...} bodies across endpoints.

Invariants:
    - Validation failures never reach the store
    - Store outages are 503 on every endpoint
    - Unclassified failures are 500 with a generic message (no internal detail)
    - Malformed JSON and wrong field types are 400
"""

import pytest
from httpx import ASGITransport, AsyncClient

from app.api.dependencies import get_user_repository
from app.core.errors import UnclassifiedFailureError
from app.main import app


async def test_validation_failure_does_not_contact_store(fake_client, fake_repository):
    res = await fake_client.post("/api/users", json={"name": "", "email": ""})

    assert res.status_code == 400
    assert fake_repository.calls == 0


@pytest.mark.parametrize("method,path,body", [
    ("GET", "/api/users", None),
    ("GET", "/api/users/1", None),
    ("POST", "/api/users", {"name": "A", "email": "a@example.com"}),
    ("PUT", "/api/users/1", {"name": "A", "email": "a@example.com"}),
    ("DELETE", "/api/users/1", None),
])
async def test_store_outage_is_503_everywhere(fake_client, fake_repository, method, path, body):
    fake_repository.available = False

    res = await fake_client.request(method, path, json=body)

    assert res.status_code == 503
    assert "error" in res.json()


async def test_malformed_json_is_400(fake_client):
    res = await fake_client.post(
        "/api/users",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json() == {"error": "Request body must be valid JSON"}


async def test_non_string_field_is_400(fake_client, fake_repository):
    res = await fake_client.post("/api/users", json={"name": 123, "email": "a@example.com"})

    assert res.status_code == 400
    assert res.json()["error"].startswith("Invalid name")
    assert fake_repository.calls == 0


async def test_non_object_body_is_400(fake_client):
    res = await fake_client.post("/api/users", json=["Alice", "alice@example.com"])
    assert res.status_code == 400
    assert "error" in res.json()


async def test_unknown_route_uses_error_envelope(fake_client):
    res = await fake_client.get("/api/nothing-here")
    assert res.status_code == 404
    assert res.json() == {"error": "Not Found"}


async def test_unclassified_failure_is_generic_500(fake_client, fake_repository):
    async def broken_list():
        raise UnclassifiedFailureError("query", "relation users does not exist")

    fake_repository.list_users = broken_list

    res = await fake_client.get("/api/users")

    assert res.status_code == 500
    assert res.json() == {"error": "Internal server error"}


async def test_unexpected_exception_is_generic_500(fake_repository):
    async def broken_get(user_id):
        raise RuntimeError("secret internal detail")

    fake_repository.get_user = broken_get
    app.dependency_overrides[get_user_repository] = lambda: fake_repository
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        ) as c:
            res = await c.get("/api/users/1")
    finally:
        app.dependency_overrides.clear()

    assert res.status_code == 500
    assert res.json() == {"error": "Internal server error"}
