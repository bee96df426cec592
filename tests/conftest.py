"""Pytest configuration and shared fixtures.

Every test gets a fresh application over its own SQLite file and upload
directory.  ``market`` hands out one ``TestClient`` per simulated user
so each keeps its own session cookie.
"""

import json
from contextlib import ExitStack
from typing import Any, Dict, Optional

import pytest
from fastapi.testclient import TestClient

from venue_booking_api.app.core.config import Settings
from venue_booking_api.app.main import create_app

PASSWORD = "s3cret"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=str(tmp_path / "booking.db"),
        upload_dir=str(tmp_path / "uploads"),
        secret_key="test-secret",
        access_token_expire_minutes=0,
        log_level="WARNING",
        log_file="",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


class Marketplace:
    """Builds signed in clients and common fixtures through the public API."""

    def __init__(self, app, stack: ExitStack) -> None:
        self.app = app
        self.stack = stack

    def client(self) -> TestClient:
        return self.stack.enter_context(TestClient(self.app))

    def register(self, client: TestClient, name: str, role: str = "attendee", **extra: Any) -> Dict[str, Any]:
        payload = {"name": name, "email": f"{name.lower()}@example.com", "password": PASSWORD, "role": role}
        payload.update(extra)
        response = client.post("/register", json=payload)
        assert response.status_code == 200, response.text
        return response.json()

    def login(self, client: TestClient, email: str, password: str = PASSWORD):
        return client.post("/login", json={"email": email, "password": password})

    def user(self, name: str, role: str = "attendee", **extra: Any):
        """Register ``name`` and return ``(client, user)`` with the session cookie set."""
        client = self.client()
        user = self.register(client, name, role, **extra)
        response = self.login(client, user["email"])
        assert response.status_code == 200, response.text
        return client, user

    def create_venue(self, client: TestClient, **overrides: Any) -> Dict[str, Any]:
        response = self.post_venue(client, **overrides)
        assert response.status_code == 201, response.text
        return response.json()

    def post_venue(self, client: TestClient, files=None, **overrides: Any):
        form = {
            "name": "Hall",
            "address": "1 Main St",
            "capacity": "100",
            "pricePerDay": "500",
            "amenities": json.dumps(["wifi"]),
            "availability": "true",
        }
        form.update(overrides)
        form = {key: value for key, value in form.items() if value is not None}
        return client.post("/venues", data=form, files=files)

    def post_event(self, client: TestClient, venue_id: Optional[int], files=None, **overrides: Any):
        form = {
            "title": "Launch",
            "description": "Product launch",
            "venue": str(venue_id) if venue_id is not None else None,
            "date": "2030-01-01",
            "time": "18:00",
            "expectedAttendees": "80",
            "budget": "600",
            "category": "business",
            "price": "10",
        }
        form.update(overrides)
        form = {key: value for key, value in form.items() if value is not None}
        return client.post("/events", data=form, files=files)

    def create_event(self, client: TestClient, venue_id: int, **overrides: Any) -> Dict[str, Any]:
        response = self.post_event(client, venue_id, **overrides)
        assert response.status_code == 201, response.text
        return response.json()


@pytest.fixture
def market(app):
    with ExitStack() as stack:
        yield Marketplace(app, stack)


@pytest.fixture
def client(market) -> TestClient:
    """An anonymous client."""
    return market.client()


def ticket_payload(user_id: int, event_id: int, **overrides: Any) -> Dict[str, Any]:
    payload = {
        "userId": user_id,
        "eventId": event_id,
        "quantity": 2,
        "totalAmount": 20,
        "eventDetails": {
            "title": "Launch",
            "date": "2030-01-01",
            "time": "18:00",
            "venue": "Hall",
            "price": 10,
        },
        "ticketDetails": {"price": 10, "purchaseDate": "2029-12-01"},
        "qrCode": "QR-123",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_ticket():
    return ticket_payload
