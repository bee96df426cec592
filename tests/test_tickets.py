"""Ticket purchase, listing and deletion."""

import pytest


@pytest.fixture
def event(market):
    owner_client, _ = market.user("Olga", "venue_owner")
    organizer_client, _ = market.user("Bob", "organizer")
    venue = market.create_venue(owner_client)
    return market.create_event(organizer_client, venue["id"])


@pytest.fixture
def buyer(market):
    return market.user("Ann")


def test_missing_purchase_date_is_rejected_and_not_stored(buyer, event, make_ticket):
    client, ann = buyer
    payload = make_ticket(ann["id"], event["id"], ticketDetails={"price": 10})

    response = client.post("/tickets", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required ticket details", "details": ["purchaseDate"]}
    assert client.get("/tickets/any").json() == []


class TestCreateTicket:
    def test_purchase(self, client, buyer, event, make_ticket):
        buyer_client, ann = buyer

        response = buyer_client.post("/tickets", json=make_ticket(ann["id"], event["id"]))

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        ticket = body["ticket"]
        assert ticket["userId"] == ann["id"]
        assert ticket["eventId"] == event["id"]
        assert ticket["quantity"] == 2
        assert ticket["totalAmount"] == 20
        assert ticket["eventDetails"]["title"] == "Launch"
        assert ticket["qrCode"] == "QR-123"

    def test_purchaser_becomes_attendee(self, client, buyer, event, make_ticket):
        buyer_client, ann = buyer

        buyer_client.post("/tickets", json=make_ticket(ann["id"], event["id"]))
        buyer_client.post("/tickets", json=make_ticket(ann["id"], event["id"]))

        attendees = client.get(f"/events/{event['id']}").json()["attendees"]
        assert attendees == [{"id": ann["id"], "name": "Ann", "email": "ann@example.com"}]

    def test_requires_session(self, client, event, make_ticket):
        response = client.post("/tickets", json=make_ticket(1, event["id"]))

        assert response.status_code == 401

    def test_missing_top_level_fields(self, buyer, event, make_ticket):
        buyer_client, ann = buyer
        payload = make_ticket(ann["id"], event["id"], quantity=0)
        del payload["qrCode"]

        response = buyer_client.post("/tickets", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields", "details": ["quantity", "qrCode"]}

    def test_missing_event_details(self, buyer, event, make_ticket):
        buyer_client, ann = buyer
        payload = make_ticket(ann["id"], event["id"], eventDetails={"title": "Launch", "price": 10})

        response = buyer_client.post("/tickets", json=payload)

        assert response.status_code == 400
        assert response.json() == {
            "error": "Missing required event details",
            "details": ["date", "time", "venue"],
        }


class TestListTickets:
    def test_get_by_id_returns_every_ticket(self, market, client, buyer, event, make_ticket):
        buyer_client, ann = buyer
        other_client, carl = market.user("Carl")
        buyer_client.post("/tickets", json=make_ticket(ann["id"], event["id"]))
        other_client.post("/tickets", json=make_ticket(carl["id"], event["id"]))

        response = client.get("/tickets/1")

        assert response.status_code == 200
        assert [ticket["userId"] for ticket in response.json()] == [ann["id"], carl["id"]]

    def test_user_tickets_embed_event(self, market, client, buyer, event, make_ticket):
        buyer_client, ann = buyer
        other_client, carl = market.user("Carl")
        buyer_client.post("/tickets", json=make_ticket(ann["id"], event["id"]))
        other_client.post("/tickets", json=make_ticket(carl["id"], event["id"]))

        tickets = client.get(f"/tickets/user/{ann['id']}").json()

        assert len(tickets) == 1
        assert tickets[0]["userId"] == ann["id"]
        assert tickets[0]["event"]["id"] == event["id"]
        assert tickets[0]["event"]["title"] == "Launch"

    def test_ticket_outlives_its_event(self, market, client, buyer, event, make_ticket):
        buyer_client, ann = buyer
        buyer_client.post("/tickets", json=make_ticket(ann["id"], event["id"]))
        organizer_client = market.client()
        market.login(organizer_client, "bob@example.com")

        assert organizer_client.delete(f"/events/{event['id']}").status_code == 204

        tickets = client.get(f"/tickets/user/{ann['id']}").json()
        assert tickets[0]["event"] is None
        assert tickets[0]["eventDetails"]["title"] == "Launch"


def test_delete_ticket(client, buyer, event, make_ticket):
    buyer_client, ann = buyer
    ticket = buyer_client.post("/tickets", json=make_ticket(ann["id"], event["id"])).json()["ticket"]

    response = client.delete(f"/tickets/{ticket['id']}")

    assert response.status_code == 204
    assert client.get(f"/tickets/user/{ann['id']}").json() == []
