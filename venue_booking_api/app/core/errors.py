"""
Error taxonomy shared by services and request handlers.

Services raise these exceptions; ``main.create_app`` registers a
handler that renders any ``BookingError`` as
``{"error": <message>, "details": <optional>}`` with the error's HTTP
status code.
"""

from typing import Any, Optional


class BookingError(Exception):
    """Base class for all errors surfaced to API clients."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Any = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(BookingError):
    """Malformed or missing input (400, or 422 for registration)."""

    status_code = 400
    default_message = "Invalid request"


class NotFoundError(BookingError):
    """A referenced entity does not exist."""

    status_code = 404
    default_message = "Not found"


class UnauthenticatedError(BookingError):
    """Credential missing, invalid, or bound to a user that no longer exists."""

    status_code = 401
    default_message = "Authentication required"


class InvalidCredentialError(UnauthenticatedError):
    """A credential failed verification or a password did not match."""

    default_message = "Invalid token"


class ForbiddenError(BookingError):
    """Role or ownership mismatch."""

    status_code = 403
    default_message = "Access denied"


class InternalError(BookingError):
    """Unexpected store or I/O failure."""

    status_code = 500
