"""Tests for the API gateway."""
import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from api.routers.gateway import resolve_upstream
from core.config import Settings, get_settings
from tests.conftest import AUTH_URL, PROPERTIES_URL, USERS_URL, RegisteredUser


async def test_health(gateway_client: AsyncClient) -> None:
    response = await gateway_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "OK"}


@pytest.mark.parametrize(
    ("prefix", "expected"),
    [
        ("auth", AUTH_URL),
        ("users", USERS_URL),
        ("properties", PROPERTIES_URL),
        ("favorites", PROPERTIES_URL),
        ("bookings", None),
    ],
)
def test_resolve_upstream(settings: Settings, prefix: str, expected: str | None) -> None:
    assert resolve_upstream(prefix, settings) == expected


async def test_forwards_with_api_prefix_stripped(gateway_client: AsyncClient) -> None:
    response = await gateway_client.post(
        "/api/auth/register",
        json={"username": "alice", "email": "alice@x.com", "password": "pw123456"},
    )

    assert response.status_code == 201
    assert response.json()["username"] == "alice"


async def test_forwards_query_string_and_errors_verbatim(gateway_client: AsyncClient) -> None:
    response = await gateway_client.get("/api/properties/search?location=Nowhere")

    assert response.status_code == 200
    assert response.json() == []

    response = await gateway_client.get("/api/properties/9999")

    assert response.status_code == 404
    assert response.json() == {"message": "Property not found"}


async def test_forwards_request_body_on_get(
    gateway_client: AsyncClient,
    alice: RegisteredUser,
) -> None:
    listing = {
        "title": "A",
        "rentalType": "monthly",
        "price": 100,
        "location": "X",
        "propertyType": "apartment",
    }
    response = await gateway_client.post("/api/properties", json=listing, headers=alice.headers)
    assert response.status_code == 201

    response = await gateway_client.request(
        "GET", "/api/properties/search", json={"location": "NoSuchCity"},
    )

    assert response.status_code == 200
    assert response.json() == []


async def test_forwards_authorization_header(gateway_client: AsyncClient) -> None:
    response = await gateway_client.get("/api/users", headers={"Authorization": "Bearer bad"})

    assert response.status_code == 401
    assert response.json() == {"message": "Invalid or expired token"}


async def test_collection_root_without_trailing_path(gateway_client: AsyncClient) -> None:
    response = await gateway_client.get("/api/properties")

    assert response.status_code == 200
    assert response.json() == []


async def test_unknown_prefix(gateway_client: AsyncClient) -> None:
    response = await gateway_client.get("/api/bookings/1")

    assert response.status_code == 404
    assert response.json() == {"message": "Route not found"}


async def test_unreachable_backend_is_bad_gateway(
    apps: dict[str, FastAPI],
    settings: Settings,
    gateway_client: AsyncClient,
) -> None:
    broken = settings.model_copy(update={"auth_service_url": "http://127.0.0.1:9"})
    apps["gateway"].dependency_overrides[get_settings] = lambda: broken

    response = await gateway_client.post(
        "/api/auth/login", json={"email": "a@x.com", "password": "pw123456"},
    )

    assert response.status_code == 502
    data = response.json()
    assert data["error"] == "Bad gateway"
    assert data["details"]
