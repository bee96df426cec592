"""
Business logic for tickets.

Tickets are accepted as submitted by the purchasing client: the
service checks that the payload and both snapshots are complete but
never compares them with the live event (quantity against remaining
capacity, price against the event price).  When the referenced event
exists the purchaser is added to its attendees.

Listing and deleting tickets carry no ownership checks.
"""

import logging
import sqlite3
from typing import List

from ..core import errors
from ..core.db import Database, dumps, loads
from ..schemas.ticket import TicketCreate, TicketRead, TicketWithEvent
from .event_service import EventService

REQUIRED_EVENT_DETAILS = ("title", "date", "time", "venue", "price")
REQUIRED_TICKET_DETAILS = ("price", "purchaseDate")

TICKET_COLUMNS = (
    "id, user_id, event_id, quantity, total_amount, event_details, ticket_details, qr_code, created_at"
)


def row_to_ticket(row: sqlite3.Row) -> TicketRead:
    return TicketRead(
        id=row["id"],
        user_id=row["user_id"],
        event_id=row["event_id"],
        quantity=row["quantity"],
        total_amount=row["total_amount"],
        event_details=loads(row["event_details"], {}),
        ticket_details=loads(row["ticket_details"], {}),
        qr_code=row["qr_code"],
        created_at=row["created_at"],
    )


class TicketService:
    """Ticket store."""

    def __init__(self, db: Database, events: EventService) -> None:
        self.db = db
        self.events = events

    def validate(self, data: TicketCreate) -> None:
        """Raise ``ValidationError`` unless every required value is present and truthy."""
        logger = logging.getLogger(__name__)
        top_level = {
            "userId": data.user_id,
            "eventId": data.event_id,
            "quantity": data.quantity,
            "totalAmount": data.total_amount,
            "eventDetails": data.event_details,
            "ticketDetails": data.ticket_details,
            "qrCode": data.qr_code,
        }
        missing = [name for name, value in top_level.items() if not value]
        if missing:
            logger.warning("Rejected ticket: missing %s", missing)
            raise errors.ValidationError("Missing required fields", details=missing)
        missing = [name for name in REQUIRED_EVENT_DETAILS if not data.event_details.get(name)]
        if missing:
            logger.warning("Rejected ticket: missing eventDetails %s", missing)
            raise errors.ValidationError("Missing required event details", details=missing)
        missing = [name for name in REQUIRED_TICKET_DETAILS if not data.ticket_details.get(name)]
        if missing:
            logger.warning("Rejected ticket: missing ticketDetails %s", missing)
            raise errors.ValidationError("Missing required ticket details", details=missing)

    async def create_ticket(self, data: TicketCreate) -> TicketRead:
        logger = logging.getLogger(__name__)
        self.validate(data)
        with self.db.cursor() as cursor:
            cursor.execute(
                """
                INSERT INTO tickets (user_id, event_id, quantity, total_amount, event_details,
                                     ticket_details, qr_code)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    data.user_id,
                    data.event_id,
                    data.quantity,
                    data.total_amount,
                    dumps(data.event_details),
                    dumps(data.ticket_details),
                    data.qr_code,
                ),
            )
            ticket_id = cursor.lastrowid
            row = cursor.execute(f"SELECT {TICKET_COLUMNS} FROM tickets WHERE id = ?", (ticket_id,)).fetchone()
        await self.events.add_attendee(data.event_id, data.user_id)
        logger.info(
            "User %s bought %s ticket(s) for event %s (ticket %s)",
            data.user_id, data.quantity, data.event_id, ticket_id,
        )
        return row_to_ticket(row)

    async def list_tickets(self) -> List[TicketRead]:
        """Return every ticket."""
        with self.db.cursor() as cursor:
            rows = cursor.execute(f"SELECT {TICKET_COLUMNS} FROM tickets ORDER BY id").fetchall()
        return [row_to_ticket(row) for row in rows]

    async def list_tickets_for_user(self, user_id: int) -> List[TicketWithEvent]:
        """Return a user's tickets with the referenced event expanded."""
        with self.db.cursor() as cursor:
            rows = cursor.execute(
                f"SELECT {TICKET_COLUMNS} FROM tickets WHERE user_id = ? ORDER BY id", (user_id,)
            ).fetchall()
        tickets: List[TicketWithEvent] = []
        for row in rows:
            ticket = row_to_ticket(row)
            event = await self.events.get_event(ticket.event_id)
            tickets.append(TicketWithEvent(**ticket.model_dump(), event=event))
        return tickets

    async def delete_ticket(self, ticket_id: int) -> None:
        """Delete a ticket by id; deleting an unknown id is not an error."""
        with self.db.cursor() as cursor:
            cursor.execute("DELETE FROM tickets WHERE id = ?", (ticket_id,))
            deleted = cursor.rowcount
        logging.getLogger(__name__).info("Deleted ticket %s (%d row(s))", ticket_id, deleted)
