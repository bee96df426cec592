"""
Request‑scoped accessors for the objects built by ``create_app``.

Services live on ``app.state``; these small dependencies hand them to
the route handlers so handlers never import module level singletons.
``internal_errors`` turns unexpected exceptions into an
``InternalError`` carrying the operation's failure message.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import Request

from ..core import errors
from ..core.config import Settings
from ..services.event_service import EventService
from ..services.review_service import ReviewService
from ..services.ticket_service import TicketService
from ..services.user_service import UserService
from ..services.venue_service import VenueService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_venue_service(request: Request) -> VenueService:
    return request.app.state.venue_service


def get_event_service(request: Request) -> EventService:
    return request.app.state.event_service


def get_review_service(request: Request) -> ReviewService:
    return request.app.state.review_service


def get_ticket_service(request: Request) -> TicketService:
    return request.app.state.ticket_service


@contextmanager
def internal_errors(message: str) -> Iterator[None]:
    """Re‑raise ``BookingError`` untouched; wrap anything else as a 500."""
    try:
        yield
    except errors.BookingError:
        raise
    except Exception as exc:
        logging.getLogger(__name__).exception(message)
        raise errors.InternalError(message, details=str(exc)) from exc
