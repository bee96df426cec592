"""
Business logic for venues.

Venue owners create venues from multipart form data (numbers and the
JSON encoded amenity list arrive as strings), toggle their
availability and may delete venues that no event uses.  Listings embed
the owner as ``{id, name, email}`` and each review's author as
``{id, name}``.
"""

import json
import logging
import math
import sqlite3
from typing import List, Optional, Sequence

from fastapi import UploadFile

from ..core import errors
from ..core.db import Database, dumps, loads
from ..core.storage import ImageStorage
from ..schemas.common import UserBrief
from ..schemas.user import UserRead
from ..schemas.venue import VenueForm, VenueRead
from .review_service import fetch_reviews

VENUE_SELECT = """
    SELECT v.id, v.owner_id, v.name, v.address, v.description, v.capacity, v.price_per_day,
           v.amenities, v.availability, v.images, v.rating, v.created_at,
           u.name AS owner_name, u.email AS owner_email
    FROM venues v LEFT JOIN users u ON u.id = v.owner_id
"""


def to_number(value: Optional[str]) -> Optional[float]:
    """Coerce a form value to a number; blanks and garbage become ``None``."""
    if value is None or not str(value).strip():
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_amenities(raw: Optional[str]) -> List[str]:
    """Decode the JSON encoded amenity list sent by the venue form."""
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise errors.ValidationError("Invalid amenities format") from exc
    if not isinstance(parsed, list):
        raise errors.ValidationError("Invalid amenities format")
    return [str(item) for item in parsed]


def row_to_venue(cursor: sqlite3.Cursor, row: sqlite3.Row) -> VenueRead:
    owner = None
    if row["owner_name"] is not None:
        owner = UserBrief(id=row["owner_id"], name=row["owner_name"], email=row["owner_email"])
    return VenueRead(
        id=row["id"],
        owner=owner,
        name=row["name"],
        address=row["address"],
        description=row["description"],
        capacity=row["capacity"],
        price_per_day=row["price_per_day"],
        amenities=loads(row["amenities"], []),
        availability=bool(row["availability"]),
        images=loads(row["images"], []),
        rating=row["rating"],
        reviews=fetch_reviews(cursor, "venue", row["id"]),
        created_at=row["created_at"],
    )


class VenueService:
    """Venue store and the owner‑only operations on it."""

    def __init__(self, db: Database, storage: ImageStorage, max_images: int = 5) -> None:
        self.db = db
        self.storage = storage
        self.max_images = max_images

    async def create_venue(
        self,
        owner: UserRead,
        form: VenueForm,
        images: Sequence[UploadFile] = (),
    ) -> VenueRead:
        """Validate the raw form, store the images and insert the venue.

        ``availability`` is true only for the literal string ``"true"``.
        A capacity or price that is missing, zero or not a number is
        reported as a missing field.
        """
        logger = logging.getLogger(__name__)
        if len(images) > self.max_images:
            raise errors.ValidationError(
                "Too many images", details=f"At most {self.max_images} images can be uploaded"
            )
        amenities = parse_amenities(form.amenities)
        capacity = to_number(form.capacity)
        price_per_day = to_number(form.price_per_day)
        availability = form.availability == "true"

        if not form.name or not form.address or not capacity or not price_per_day:
            logger.warning(
                "Rejected venue from user %s: missing fields (name=%r, address=%r, capacity=%r, pricePerDay=%r)",
                owner.id, form.name, form.address, form.capacity, form.price_per_day,
            )
            raise errors.ValidationError("Missing required fields")
        if capacity < 0 or price_per_day < 0:
            raise errors.ValidationError("Capacity and price per day must be positive")
        if not capacity.is_integer():
            raise errors.ValidationError("Capacity must be a whole number", details=f"Got {form.capacity}")

        image_refs = await self.storage.save_all(images)
        with self.db.cursor() as cursor:
            cursor.execute(
                """
                INSERT INTO venues (owner_id, name, address, description, capacity, price_per_day,
                                    amenities, availability, images)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    owner.id,
                    form.name,
                    form.address,
                    form.description,
                    int(capacity),
                    price_per_day,
                    dumps(amenities),
                    int(availability),
                    dumps(image_refs),
                ),
            )
            venue_id = cursor.lastrowid
        logger.info("User %s created venue %s '%s'", owner.id, venue_id, form.name)
        return await self.get_venue(venue_id)

    async def list_venues(self, owner_id: Optional[int] = None) -> List[VenueRead]:
        """Return all venues, or only those owned by ``owner_id``."""
        query = VENUE_SELECT
        params: tuple = ()
        if owner_id is not None:
            query += " WHERE v.owner_id = ?"
            params = (owner_id,)
        query += " ORDER BY v.id"
        with self.db.cursor() as cursor:
            rows = cursor.execute(query, params).fetchall()
            return [row_to_venue(cursor, row) for row in rows]

    async def get_venue(self, venue_id: int) -> Optional[VenueRead]:
        """Retrieve a single venue, or ``None`` if it does not exist."""
        with self.db.cursor() as cursor:
            row = cursor.execute(VENUE_SELECT + " WHERE v.id = ?", (venue_id,)).fetchone()
            return row_to_venue(cursor, row) if row else None

    def _require_owned(self, cursor: sqlite3.Cursor, venue_id: int, caller: UserRead) -> sqlite3.Row:
        row = cursor.execute("SELECT id, owner_id FROM venues WHERE id = ?", (venue_id,)).fetchone()
        if not row:
            raise errors.NotFoundError("Venue not found")
        if row["owner_id"] != caller.id:
            logging.getLogger(__name__).warning(
                "User %s tried to modify venue %s owned by %s", caller.id, venue_id, row["owner_id"]
            )
            raise errors.ForbiddenError("Not authorized")
        return row

    async def set_availability(self, venue_id: int, caller: UserRead, availability: bool) -> VenueRead:
        """Toggle availability; only the venue's owner may do this."""
        with self.db.cursor() as cursor:
            self._require_owned(cursor, venue_id, caller)
            cursor.execute(
                "UPDATE venues SET availability = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (int(availability), venue_id),
            )
        logging.getLogger(__name__).info("Venue %s availability set to %s", venue_id, availability)
        return await self.get_venue(venue_id)

    async def delete_venue(self, venue_id: int, caller: UserRead) -> None:
        """Delete an owned venue and its reviews.

        Venues that events still reference are kept; the caller gets a
        ``ValidationError`` instead.
        """
        with self.db.cursor() as cursor:
            self._require_owned(cursor, venue_id, caller)
            used = cursor.execute(
                "SELECT COUNT(*) AS count FROM events WHERE venue_id = ?", (venue_id,)
            ).fetchone()
            if used["count"]:
                raise errors.ValidationError(
                    "Venue has events", details=f"{used['count']} event(s) are scheduled at this venue"
                )
            cursor.execute("DELETE FROM venue_reviews WHERE venue_id = ?", (venue_id,))
            cursor.execute("DELETE FROM venues WHERE id = ?", (venue_id,))
        logging.getLogger(__name__).info("User %s deleted venue %s", caller.id, venue_id)
