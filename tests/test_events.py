"""Event creation rules, listings, status workflow, reviews and deletion."""

import sqlite3

import pytest

from venue_booking_api.app.core.storage import LocalImageStorage


class WriteLockCheckingStorage(LocalImageStorage):
    """Takes and releases the database write lock before every save."""

    def __init__(self, directory: str, db_path: str) -> None:
        super().__init__(directory)
        self.db_path = db_path
        self.checked = 0

    async def save(self, upload):
        conn = sqlite3.connect(self.db_path, timeout=0)
        try:
            conn.execute("BEGIN IMMEDIATE")
            conn.rollback()
        finally:
            conn.close()
        self.checked += 1
        return await super().save(upload)


@pytest.fixture
def alice(market):
    client, user = market.user("Alice", "venue_owner", venueDetails={"company": "Alice Venues"})
    return client, user


@pytest.fixture
def bob(market):
    return market.user("Bob", "organizer", organizationDetails={"name": "Bob Events"})


@pytest.fixture
def venue(market, alice):
    alice_client, _ = alice
    return market.create_venue(alice_client, capacity="100", pricePerDay="500", availability="true")


def test_booking_scenario(market, client, alice, bob, venue):
    alice_client, _ = alice
    bob_client, bob_user = bob
    assert venue["rating"] == 0
    assert venue["reviews"] == []

    created = market.post_event(bob_client, venue["id"], expectedAttendees="50", budget="600")
    assert created.status_code == 201, created.text
    event = created.json()
    assert event["status"] == "pending"
    assert event["organizer"]["id"] == bob_user["id"]
    assert event["venue"] == {
        "id": venue["id"],
        "name": "Hall",
        "address": "1 Main St",
        "capacity": 100,
        "amenities": ["wifi"],
    }
    assert event["eventDate"] == "2030-01-01"
    assert event["eventTime"] == "18:00"

    too_many = market.post_event(bob_client, venue["id"], expectedAttendees="150", budget="600")
    assert too_many.status_code == 400
    assert too_many.json() == {
        "error": "Capacity exceeded",
        "details": "Expected attendees (150) exceed venue capacity (100)",
    }

    too_cheap = market.post_event(bob_client, venue["id"], expectedAttendees="50", budget="100")
    assert too_cheap.status_code == 400
    assert too_cheap.json() == {
        "error": "Insufficient budget",
        "details": "Budget (100) is insufficient for venue cost (500)",
    }

    alice_client.put(f"/venues/{venue['id']}/availability", json={"availability": False})
    unavailable = market.post_event(bob_client, venue["id"], expectedAttendees="50", budget="600")
    assert unavailable.status_code == 400
    assert unavailable.json()["error"] == "Venue not available"

    assert [e["id"] for e in client.get("/events").json()] == [event["id"]]


class TestCreateEvent:
    def test_missing_fields_are_listed(self, market, bob, venue):
        bob_client, _ = bob

        response = market.post_event(bob_client, venue["id"], title=None, budget="0", date=None)

        assert response.status_code == 400
        assert response.json() == {
            "error": "Missing required fields",
            "details": "Please fill in the following fields: title, eventDate, budget",
        }

    def test_event_date_and_time_aliases(self, market, bob, venue):
        bob_client, _ = bob

        event = market.create_event(
            bob_client, venue["id"], date=None, time=None, eventDate="2031-05-05", eventTime="09:30"
        )

        assert (event["eventDate"], event["eventTime"]) == ("2031-05-05", "09:30")

    @pytest.mark.parametrize("venue_id", ["424242", "not-an-id"])
    def test_unknown_venue(self, market, bob, venue_id):
        bob_client, _ = bob

        response = market.post_event(bob_client, None, venue=venue_id)

        assert response.status_code == 404
        assert response.json() == {"error": "Venue not found"}

    def test_only_organizers_create_events(self, market, alice, venue):
        alice_client, _ = alice

        assert market.post_event(alice_client, venue["id"]).status_code == 403

    def test_event_images(self, market, bob, venue):
        bob_client, _ = bob
        files = [("images", ("poster.png", b"png", "image/png"))]

        event = market.post_event(bob_client, venue["id"], files=files).json()

        assert [image.rsplit("/", 1)[-1] for image in event["images"]] == ["poster.png"]

    @pytest.mark.parametrize("attendees", ["2.5", "-3"])
    def test_expected_attendees_must_be_a_whole_number(self, market, client, bob, venue, attendees):
        bob_client, _ = bob

        response = market.post_event(bob_client, venue["id"], expectedAttendees=attendees)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid expected attendees"
        assert client.get("/events").json() == []

    def test_images_are_saved_outside_the_write_transaction(self, app, market, bob, venue):
        bob_client, _ = bob
        service = app.state.event_service
        service.storage = WriteLockCheckingStorage(str(service.storage.directory), app.state.db.path)
        files = [("images", ("poster.png", b"png", "image/png"))]

        response = market.post_event(bob_client, venue["id"], files=files)

        assert response.status_code == 201, response.text
        assert service.storage.checked == 1


class TestListEvents:
    def test_organizer_filter(self, market, client, venue):
        bob_client, _ = market.user("Bob", "organizer")
        carl_client, _ = market.user("Carl", "organizer")
        market.create_event(bob_client, venue["id"], title="Bob's")
        market.create_event(carl_client, venue["id"], title="Carl's")

        mine = bob_client.get("/events", params={"organizer": "true"}).json()

        assert [event["title"] for event in mine] == ["Bob's"]
        assert len(client.get("/events").json()) == 2

    def test_get_missing_event_is_null(self, client):
        response = client.get("/events/42")

        assert response.status_code == 200
        assert response.json() is None


class TestEventStatus:
    def test_venue_owner_sets_status(self, market, alice, bob, venue):
        alice_client, _ = alice
        bob_client, _ = bob
        event = market.create_event(bob_client, venue["id"])

        response = alice_client.put(f"/events/{event['id']}/status", json={"status": "approved"})

        assert response.status_code == 200
        assert response.json()["status"] == "approved"

    def test_other_venue_owner_is_forbidden(self, market, client, bob, venue):
        bob_client, _ = bob
        rival_client, _ = market.user("Oscar", "venue_owner")
        event = market.create_event(bob_client, venue["id"])

        response = rival_client.put(f"/events/{event['id']}/status", json={"status": "rejected"})

        assert response.status_code == 403
        assert response.json() == {"error": "Not authorized"}
        assert client.get(f"/events/{event['id']}").json()["status"] == "pending"

    def test_organizer_role_is_forbidden(self, market, bob, venue):
        bob_client, _ = bob
        event = market.create_event(bob_client, venue["id"])

        response = bob_client.put(f"/events/{event['id']}/status", json={"status": "approved"})

        assert response.status_code == 403
        assert response.json() == {"error": "Access denied"}

    def test_missing_event(self, alice):
        alice_client, _ = alice

        response = alice_client.put("/events/42/status", json={"status": "approved"})

        assert response.status_code == 404
        assert response.json() == {"error": "Event not found"}


class TestEventReviews:
    def test_reviews_are_appended_without_average(self, market, bob, venue):
        bob_client, _ = bob
        ann_client, ann = market.user("Ann")
        event = market.create_event(bob_client, venue["id"])

        ann_client.post(f"/events/{event['id']}/reviews", json={"rating": 5})
        response = ann_client.post(f"/events/{event['id']}/reviews", json={"rating": 1, "comment": "meh"})

        assert response.status_code == 200
        body = response.json()
        assert [review["rating"] for review in body["reviews"]] == [5, 1]
        assert body["reviews"][1]["user"] == {"id": ann["id"], "name": "Ann"}
        assert "rating" not in body

    def test_review_of_missing_event(self, market):
        ann_client, _ = market.user("Ann")

        response = ann_client.post("/events/42/reviews", json={"rating": 5})

        assert response.status_code == 404
        assert response.json() == {"error": "Event not found"}


class TestDeleteEvent:
    def test_organizer_deletes_event(self, market, client, bob, venue):
        bob_client, _ = bob
        event = market.create_event(bob_client, venue["id"])

        response = bob_client.delete(f"/events/{event['id']}")

        assert response.status_code == 204
        assert client.get(f"/events/{event['id']}").json() is None

    def test_other_organizer_cannot_delete(self, market, bob, venue):
        bob_client, _ = bob
        carl_client, _ = market.user("Carl", "organizer")
        event = market.create_event(bob_client, venue["id"])

        response = carl_client.delete(f"/events/{event['id']}")

        assert response.status_code == 403
