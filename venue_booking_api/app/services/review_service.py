"""
Business logic for venue and event reviews.

Reviews are appended by any authenticated user.  Adding a venue review
recomputes the venue's ``rating`` as the arithmetic mean of every
stored review in the same transaction, so the persisted mean always
matches the persisted list.  Event reviews are stored without
maintaining an average.
"""

import logging
import sqlite3
from typing import Dict, List, Sequence

from ..core import errors
from ..core.db import Database
from ..schemas.common import UserName
from ..schemas.review import ReviewCreate, ReviewRead

# target -> (review table, parent table, foreign key column)
_TARGETS: Dict[str, tuple] = {
    "venue": ("venue_reviews", "venues", "venue_id"),
    "event": ("event_reviews", "events", "event_id"),
}


def average_rating(ratings: Sequence[float]) -> float:
    """Arithmetic mean of ``ratings``; 0 when there are none."""
    if not ratings:
        return 0
    return sum(ratings) / len(ratings)


def fetch_reviews(cursor: sqlite3.Cursor, target: str, parent_id: int) -> List[ReviewRead]:
    """Load the reviews of one venue or event in insertion order."""
    table, _, column = _TARGETS[target]
    rows = cursor.execute(
        f"""
        SELECT r.id, r.rating, r.comment, r.created_at, u.id AS user_id, u.name AS user_name
        FROM {table} r LEFT JOIN users u ON u.id = r.user_id
        WHERE r.{column} = ?
        ORDER BY r.id
        """,
        (parent_id,),
    ).fetchall()
    return [
        ReviewRead(
            id=row["id"],
            user=UserName(id=row["user_id"], name=row["user_name"]) if row["user_id"] is not None else None,
            rating=row["rating"],
            comment=row["comment"],
            created_at=row["created_at"],
        )
        for row in rows
    ]


class ReviewService:
    """Append reviews to venues and events."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def _insert(self, cursor: sqlite3.Cursor, target: str, parent_id: int, user_id: int, data: ReviewCreate) -> None:
        table, parent_table, column = _TARGETS[target]
        parent = cursor.execute(f"SELECT id FROM {parent_table} WHERE id = ?", (parent_id,)).fetchone()
        if not parent:
            raise errors.NotFoundError(f"{target.capitalize()} not found")
        cursor.execute(
            f"INSERT INTO {table} ({column}, user_id, rating, comment) VALUES (?, ?, ?, ?)",
            (parent_id, user_id, data.rating, data.comment),
        )

    async def add_venue_review(self, venue_id: int, user_id: int, data: ReviewCreate) -> float:
        """Append a review and return the venue's recomputed rating."""
        logger = logging.getLogger(__name__)
        with self.db.cursor() as cursor:
            self._insert(cursor, "venue", venue_id, user_id, data)
            ratings = [
                row["rating"]
                for row in cursor.execute(
                    "SELECT rating FROM venue_reviews WHERE venue_id = ?", (venue_id,)
                ).fetchall()
            ]
            rating = average_rating(ratings)
            cursor.execute(
                "UPDATE venues SET rating = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (rating, venue_id),
            )
        logger.info("User %s reviewed venue %s; rating now %.2f over %d reviews", user_id, venue_id, rating, len(ratings))
        return rating

    async def add_event_review(self, event_id: int, user_id: int, data: ReviewCreate) -> None:
        """Append a review to an event.  No average is kept for events."""
        with self.db.cursor() as cursor:
            self._insert(cursor, "event", event_id, user_id, data)
        logging.getLogger(__name__).info("User %s reviewed event %s", user_id, event_id)
