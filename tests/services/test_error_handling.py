"""Global Error Handling — every failure renders {timestamp, status, error, message, path}.

Tests cover:
    - malformed JSON and missing body → 400 malformed request
    - non-JSON or missing Content-Type on writes → 415
    - unknown endpoint → 404, wrong method → 405
    - storage failure → 500 with generic message, no internal detail
    - unexpected exception → 500 with generic message
"""

import pytest
from httpx import ASGITransport, AsyncClient

from user_api.api.routes.users import get_user_service
from user_api.core.errors import DatabaseError
from user_api.main import app
from user_api.services.user_service import UserService

USERS = "/api/v1/users"
ENVELOPE_KEYS = {"timestamp", "status", "error", "message", "path"}


async def test_malformed_json_returns_400(fake_client, fake_repository):
    res = await fake_client.post(
        USERS,
        content=b'{"name": "John", "email": ',
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400
    body = res.json()
    assert set(body) == ENVELOPE_KEYS
    assert body["message"] == "Malformed JSON request. Please check your request body."
    assert fake_repository.calls == []


async def test_missing_body_returns_400(fake_client):
    res = await fake_client.post(USERS, headers={"Content-Type": "application/json"})
    assert res.status_code == 400
    assert res.json()["message"].startswith("Malformed JSON request")


async def test_non_object_body_returns_400(fake_client):
    res = await fake_client.post(USERS, json=["not", "an", "object"])
    assert res.status_code == 400
    assert res.json()["message"].startswith("Malformed JSON request")


async def test_unsupported_media_type_returns_415(fake_client, fake_repository):
    res = await fake_client.post(
        USERS, content=b"name=John", headers={"Content-Type": "text/plain"},
    )
    assert res.status_code == 415
    body = res.json()
    assert body["error"] == "Unsupported Media Type"
    assert body["message"] == (
        "Content-Type 'text/plain' is not supported. Use 'application/json'."
    )
    assert fake_repository.calls == []


async def test_missing_content_type_returns_415(fake_client, fake_repository):
    res = await fake_client.post(
        USERS, content=b'{"name": "A", "email": "a@example.com", "age": 30}',
    )
    assert res.status_code == 415
    assert res.json()["message"] == (
        "Content-Type 'null' is not supported. Use 'application/json'."
    )
    assert fake_repository.calls == []


async def test_json_content_type_with_charset_is_accepted(fake_client):
    res = await fake_client.post(
        USERS,
        content=b'{"name": "John Doe", "email": "john.doe@example.com", "age": 30}',
        headers={"Content-Type": "application/json; charset=utf-8"},
    )
    assert res.status_code == 201


async def test_unknown_endpoint_returns_404(fake_client):
    res = await fake_client.get("/api/v1/nothing-here")
    assert res.status_code == 404
    body = res.json()
    assert set(body) == ENVELOPE_KEYS
    assert body["message"] == "The requested endpoint does not exist."


async def test_wrong_method_returns_405(fake_client):
    res = await fake_client.patch(f"{USERS}/some-id", json={"age": 20})
    assert res.status_code == 405
    body = res.json()
    assert body["error"] == "Method Not Allowed"
    assert body["message"] == "HTTP method 'PATCH' is not supported for this endpoint."


class _FailingRepository:
    def __init__(self, exc: Exception):
        self._exc = exc

    async def find_all(self):
        raise self._exc

    async def find_by_id(self, user_id):
        raise self._exc


@pytest.fixture
def failing_client_factory():
    async def _make(exc: Exception) -> AsyncClient:
        app.dependency_overrides[get_user_service] = (
            lambda: UserService(_FailingRepository(exc))
        )
        c = AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        )
        return c

    yield _make
    app.dependency_overrides.clear()


async def test_storage_failure_returns_500_without_detail(failing_client_factory):
    client = await failing_client_factory(
        DatabaseError("could not connect to server: 10.0.0.5", "execute"),
    )
    async with client:
        res = await client.get(USERS)
    assert res.status_code == 500
    body = res.json()
    assert body["error"] == "Internal Server Error"
    assert body["message"] == "A database error occurred. Please try again later."
    assert "10.0.0.5" not in res.text


async def test_unexpected_error_returns_generic_500(failing_client_factory):
    client = await failing_client_factory(RuntimeError("secret internals"))
    async with client:
        res = await client.get(f"{USERS}/any-id")
    assert res.status_code == 500
    body = res.json()
    assert body["message"] == "An unexpected error occurred. Please try again later."
    assert "secret internals" not in res.text
