"""
Business logic for users.

``UserService`` registers users with a salted password hash and the
role‑specific profile, authenticates email/password pairs and loads
users by id for the access control dependencies.
"""

import logging
import sqlite3
from typing import Optional

from ..core import errors
from ..core.db import Database, dumps, loads
from ..core.security import hash_password, verify_password
from ..schemas.user import (
    OrganizerProfile,
    UserCreate,
    UserRead,
    VenueOwnerProfile,
    build_profile,
    parse_profile,
)

USER_COLUMNS = "id, name, email, role, venue_details, organization_details"


def row_to_user(row: sqlite3.Row) -> UserRead:
    profile = parse_profile(
        {
            "role": row["role"],
            "venue_details": loads(row["venue_details"], {}),
            "organization_details": loads(row["organization_details"], {}),
        }
    )
    return UserRead.from_profile(row["id"], row["name"], row["email"], profile)


class UserService:
    """Identity store: registration, authentication and lookup."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def create_user(self, data: UserCreate) -> UserRead:
        """Register a new user.

        Only the profile field matching ``data.role`` is stored; details
        sent for another role are dropped.  Raises ``ValidationError``
        (422) when the email is already registered.
        """
        logger = logging.getLogger(__name__)
        profile = build_profile(data)
        venue_details = organization_details = None
        if isinstance(profile, VenueOwnerProfile):
            venue_details = dumps(profile.venue_details)
        elif isinstance(profile, OrganizerProfile):
            organization_details = dumps(profile.organization_details)

        try:
            with self.db.cursor() as cursor:
                exists = cursor.execute(
                    "SELECT id FROM users WHERE email = ?", (data.email,)
                ).fetchone()
                if exists:
                    raise errors.ValidationError("Email already registered", status_code=422)
                cursor.execute(
                    "INSERT INTO users (name, email, password, role, venue_details, organization_details) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (
                        data.name,
                        data.email,
                        hash_password(data.password),
                        profile.role,
                        venue_details,
                        organization_details,
                    ),
                )
                user_id = cursor.lastrowid
        except sqlite3.IntegrityError as exc:
            # Lost a race against a concurrent registration of the same email.
            raise errors.ValidationError("Email already registered", status_code=422) from exc
        logger.info("Registered %s %s as user %s", profile.role, data.email, user_id)
        return UserRead.from_profile(user_id, data.name, data.email, profile)

    async def authenticate(self, email: str, password: str) -> UserRead:
        """Return the user owning ``email`` if ``password`` matches.

        Raises ``NotFoundError`` for an unknown email and
        ``InvalidCredentialError`` for a wrong password.
        """
        with self.db.cursor() as cursor:
            row = cursor.execute(
                f"SELECT {USER_COLUMNS}, password FROM users WHERE email = ?", (email,)
            ).fetchone()
        if not row:
            raise errors.NotFoundError("User not found")
        if not verify_password(password, row["password"]):
            logging.getLogger(__name__).warning("Failed login for user %s", row["id"])
            raise errors.InvalidCredentialError("Invalid password")
        return row_to_user(row)

    async def get_user_by_id(self, user_id: int) -> Optional[UserRead]:
        """Retrieve a user by ID."""
        with self.db.cursor() as cursor:
            row = cursor.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        return row_to_user(row) if row else None
