"""
Event endpoints for API v1.

Organizers create events at a venue with a multipart form; the service
rejects unavailable, too small or too expensive venues.  The owner of
the venue moves the event through its workflow via ``/status``.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status

from venue_booking_api.app.api.deps import get_event_service, internal_errors
from venue_booking_api.app.core import errors
from venue_booking_api.app.core.security import get_optional_user, require_roles
from venue_booking_api.app.schemas.event import EventForm, EventRead, EventStatusUpdate
from venue_booking_api.app.schemas.user import UserRead
from venue_booking_api.app.services.event_service import EventService


router = APIRouter()


@router.post("", response_model=EventRead, status_code=status.HTTP_201_CREATED)
async def create_event(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    venue: Optional[str] = Form(None, description="ID of the venue"),
    date: Optional[str] = Form(None),
    time: Optional[str] = Form(None),
    event_date: Optional[str] = Form(None, alias="eventDate"),
    event_time: Optional[str] = Form(None, alias="eventTime"),
    expected_attendees: Optional[str] = Form(None, alias="expectedAttendees"),
    budget: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    current_user: UserRead = Depends(require_roles("organizer")),
    events: EventService = Depends(get_event_service),
) -> EventRead:
    """Create an event (organizers only).

    Fails with 400 when fields are missing, the venue is unavailable,
    ``expectedAttendees`` exceeds the venue's capacity or the budget
    does not cover one day at the venue; 404 when the venue does not
    exist.
    """
    form = EventForm(
        title=title,
        description=description,
        venue=venue,
        date=date,
        time=time,
        event_date=event_date,
        event_time=event_time,
        expected_attendees=expected_attendees,
        budget=budget,
        category=category,
        price=price,
    )
    with internal_errors("Failed to create event"):
        return await events.create_event(current_user, form, images or [])


@router.get("", response_model=List[EventRead])
async def list_events(
    request: Request,
    organizer: Optional[str] = Query(None, description="Pass 'true' to list only your own events"),
    events: EventService = Depends(get_event_service),
) -> List[EventRead]:
    """List events with organizer and venue projections.

    The session cookie is only read for ``?organizer=true``.
    """
    organizer_id = None
    if organizer == "true":
        current_user = await get_optional_user(request)
        if current_user is None:
            raise errors.UnauthenticatedError("Authentication required")
        organizer_id = current_user.id
    with internal_errors("Failed to fetch events"):
        return await events.list_events(organizer_id=organizer_id)


@router.get("/{event_id}", response_model=Optional[EventRead])
async def get_event(
    event_id: int,
    events: EventService = Depends(get_event_service),
) -> Optional[EventRead]:
    """Retrieve an event with venue details and attendees; ``null`` if absent."""
    with internal_errors("Failed to fetch event"):
        return await events.get_event(event_id)


@router.put("/{event_id}/status", response_model=EventRead)
async def update_event_status(
    event_id: int,
    body: EventStatusUpdate,
    current_user: UserRead = Depends(require_roles("venue_owner")),
    events: EventService = Depends(get_event_service),
) -> EventRead:
    """Set an event's status.  Only the owner of the event's venue may do this."""
    with internal_errors("Failed to update event status"):
        return await events.set_status(event_id, current_user, body.status)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: int,
    current_user: UserRead = Depends(require_roles("organizer")),
    events: EventService = Depends(get_event_service),
) -> None:
    """Delete an event the caller organizes.  Issued tickets are kept."""
    with internal_errors("Failed to delete event"):
        await events.delete_event(event_id, current_user)
    return None
