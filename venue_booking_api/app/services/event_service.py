"""
Business logic for events.

Organizers create events at a venue from multipart form data.  Before
the event is written the venue must exist, be available, hold the
expected attendees and be affordable for one day on the event's
budget.  The venue read and the insert share one ``BEGIN IMMEDIATE``
transaction, so a concurrent availability change cannot slip between
the checks and the write.  Uploaded images are stored before that
transaction starts, so they are kept even when the venue rejects the
event.

The owner of an event's venue sets the event's status; the organizer
may delete the event.
"""

import logging
import sqlite3
from typing import List, Optional, Sequence

from fastapi import UploadFile

from ..core import errors
from ..core.db import Database, dumps, loads
from ..core.storage import ImageStorage
from ..schemas.common import UserBrief, VenueBrief
from ..schemas.event import EventForm, EventRead
from ..schemas.user import UserRead
from .review_service import fetch_reviews
from .venue_service import to_number

# Events are booked for a single day.
EVENT_DURATION_DAYS = 1

REQUIRED_FIELDS = (
    "title",
    "description",
    "venue",
    "eventDate",
    "eventTime",
    "expectedAttendees",
    "budget",
    "category",
    "price",
)

EVENT_SELECT = """
    SELECT e.id, e.organizer_id, e.venue_id, e.title, e.description, e.event_date, e.event_time,
           e.expected_attendees, e.budget, e.category, e.price, e.status, e.images, e.created_at,
           o.name AS organizer_name, o.email AS organizer_email,
           v.name AS venue_name, v.address AS venue_address,
           v.capacity AS venue_capacity, v.amenities AS venue_amenities
    FROM events e
    LEFT JOIN users o ON o.id = e.organizer_id
    LEFT JOIN venues v ON v.id = e.venue_id
"""


def _fmt(number: float) -> str:
    return f"{number:g}"


def _parse_id(value: Optional[str]) -> Optional[int]:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def fetch_attendees(cursor: sqlite3.Cursor, event_id: int) -> List[UserBrief]:
    rows = cursor.execute(
        """
        SELECT u.id, u.name, u.email
        FROM event_attendees a JOIN users u ON u.id = a.user_id
        WHERE a.event_id = ?
        ORDER BY a.created_at, u.id
        """,
        (event_id,),
    ).fetchall()
    return [UserBrief(id=row["id"], name=row["name"], email=row["email"]) for row in rows]


def row_to_event(cursor: sqlite3.Cursor, row: sqlite3.Row) -> EventRead:
    organizer = None
    if row["organizer_name"] is not None:
        organizer = UserBrief(id=row["organizer_id"], name=row["organizer_name"], email=row["organizer_email"])
    venue = None
    if row["venue_name"] is not None:
        venue = VenueBrief(
            id=row["venue_id"],
            name=row["venue_name"],
            address=row["venue_address"],
            capacity=row["venue_capacity"],
            amenities=loads(row["venue_amenities"], []),
        )
    return EventRead(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        event_date=row["event_date"],
        event_time=row["event_time"],
        expected_attendees=row["expected_attendees"],
        budget=row["budget"],
        category=row["category"],
        price=row["price"],
        status=row["status"],
        images=loads(row["images"], []),
        organizer=organizer,
        venue=venue,
        attendees=fetch_attendees(cursor, row["id"]),
        reviews=fetch_reviews(cursor, "event", row["id"]),
        created_at=row["created_at"],
    )


class EventService:
    """Event store and the venue constraint checks guarding it."""

    def __init__(self, db: Database, storage: ImageStorage, max_images: int = 5) -> None:
        self.db = db
        self.storage = storage
        self.max_images = max_images

    async def create_event(
        self,
        organizer: UserRead,
        form: EventForm,
        images: Sequence[UploadFile] = (),
    ) -> EventRead:
        """Validate the form against the venue and insert the event.

        Every missing field is reported at once.  Zero or non‑numeric
        attendee counts, budgets and prices count as missing.
        """
        logger = logging.getLogger(__name__)
        if len(images) > self.max_images:
            raise errors.ValidationError(
                "Too many images", details=f"At most {self.max_images} images can be uploaded"
            )
        values = {
            "title": form.title,
            "description": form.description,
            "venue": form.venue,
            "eventDate": form.date or form.event_date,
            "eventTime": form.time or form.event_time,
            "expectedAttendees": to_number(form.expected_attendees),
            "budget": to_number(form.budget),
            "category": form.category,
            "price": to_number(form.price),
        }
        missing = [name for name in REQUIRED_FIELDS if not values[name]]
        if missing:
            logger.warning("Rejected event from user %s: missing %s", organizer.id, missing)
            raise errors.ValidationError(
                "Missing required fields",
                details=f"Please fill in the following fields: {', '.join(missing)}",
            )
        expected_attendees = values["expectedAttendees"]
        budget = values["budget"]
        if expected_attendees < 0 or not expected_attendees.is_integer():
            raise errors.ValidationError(
                "Invalid expected attendees",
                details=f"Expected attendees must be a positive whole number, got {form.expected_attendees}",
            )

        # Uploads are read before the write lock is taken; nothing awaits inside
        # the transaction.
        image_refs = await self.storage.save_all(images)
        with self.db.cursor() as cursor:
            cursor.execute("BEGIN IMMEDIATE")
            venue_id = _parse_id(form.venue)
            venue = None
            if venue_id is not None:
                venue = cursor.execute(
                    "SELECT id, capacity, price_per_day, availability FROM venues WHERE id = ?",
                    (venue_id,),
                ).fetchone()
            if not venue:
                logger.warning("Venue not found: %s", form.venue)
                raise errors.NotFoundError("Venue not found")
            if not venue["availability"]:
                raise errors.ValidationError(
                    "Venue not available", details="This venue is currently unavailable"
                )
            if expected_attendees > venue["capacity"]:
                raise errors.ValidationError(
                    "Capacity exceeded",
                    details=(
                        f"Expected attendees ({_fmt(expected_attendees)}) exceed "
                        f"venue capacity ({venue['capacity']})"
                    ),
                )
            venue_cost = venue["price_per_day"] * EVENT_DURATION_DAYS
            if budget < venue_cost:
                raise errors.ValidationError(
                    "Insufficient budget",
                    details=f"Budget ({_fmt(budget)}) is insufficient for venue cost ({_fmt(venue_cost)})",
                )

            cursor.execute(
                """
                INSERT INTO events (organizer_id, venue_id, title, description, event_date, event_time,
                                    expected_attendees, budget, category, price, images)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    organizer.id,
                    venue_id,
                    values["title"],
                    values["description"],
                    values["eventDate"],
                    values["eventTime"],
                    int(expected_attendees),
                    budget,
                    values["category"],
                    values["price"],
                    dumps(image_refs),
                ),
            )
            event_id = cursor.lastrowid
        logger.info("User %s created event %s '%s' at venue %s", organizer.id, event_id, values["title"], venue_id)
        return await self.get_event(event_id)

    async def list_events(self, organizer_id: Optional[int] = None) -> List[EventRead]:
        """Return all events, or only those organized by ``organizer_id``."""
        query = EVENT_SELECT
        params: tuple = ()
        if organizer_id is not None:
            query += " WHERE e.organizer_id = ?"
            params = (organizer_id,)
        query += " ORDER BY e.id"
        with self.db.cursor() as cursor:
            rows = cursor.execute(query, params).fetchall()
            return [row_to_event(cursor, row) for row in rows]

    async def get_event(self, event_id: int) -> Optional[EventRead]:
        """Retrieve a single event, or ``None`` if it does not exist."""
        with self.db.cursor() as cursor:
            row = cursor.execute(EVENT_SELECT + " WHERE e.id = ?", (event_id,)).fetchone()
            return row_to_event(cursor, row) if row else None

    async def set_status(self, event_id: int, caller: UserRead, status: str) -> EventRead:
        """Set the workflow status; only the owner of the event's venue may do this."""
        logger = logging.getLogger(__name__)
        with self.db.cursor() as cursor:
            row = cursor.execute(
                "SELECT e.id, v.owner_id FROM events e LEFT JOIN venues v ON v.id = e.venue_id WHERE e.id = ?",
                (event_id,),
            ).fetchone()
            if not row:
                raise errors.NotFoundError("Event not found")
            if row["owner_id"] != caller.id:
                logger.warning("User %s tried to set status of event %s", caller.id, event_id)
                raise errors.ForbiddenError("Not authorized")
            cursor.execute(
                "UPDATE events SET status = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (status, event_id),
            )
        logger.info("Event %s status set to %r by user %s", event_id, status, caller.id)
        return await self.get_event(event_id)

    async def delete_event(self, event_id: int, caller: UserRead) -> None:
        """Delete an event with its reviews and attendee links.

        Only the organizer who created the event may delete it.  Tickets
        are left alone; they carry their own snapshot of the event.
        """
        with self.db.cursor() as cursor:
            row = cursor.execute("SELECT id, organizer_id FROM events WHERE id = ?", (event_id,)).fetchone()
            if not row:
                raise errors.NotFoundError("Event not found")
            if row["organizer_id"] != caller.id:
                raise errors.ForbiddenError("Not authorized")
            cursor.execute("DELETE FROM event_reviews WHERE event_id = ?", (event_id,))
            cursor.execute("DELETE FROM event_attendees WHERE event_id = ?", (event_id,))
            cursor.execute("DELETE FROM events WHERE id = ?", (event_id,))
        logging.getLogger(__name__).info("User %s deleted event %s", caller.id, event_id)

    async def add_attendee(self, event_id: int, user_id: int) -> bool:
        """Link ``user_id`` to the event's attendees.

        Returns ``False`` without writing when the event or the user does
        not exist.
        """
        with self.db.cursor() as cursor:
            event = cursor.execute("SELECT id FROM events WHERE id = ?", (event_id,)).fetchone()
            user = cursor.execute("SELECT id FROM users WHERE id = ?", (user_id,)).fetchone()
            if not event or not user:
                return False
            cursor.execute(
                "INSERT OR IGNORE INTO event_attendees (event_id, user_id) VALUES (?, ?)",
                (event_id, user_id),
            )
        return True
