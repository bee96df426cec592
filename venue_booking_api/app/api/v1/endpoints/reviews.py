"""
Review endpoints for API v1.

Any signed in user may review a venue or an event.  Venue reviews
update the venue's mean rating in the same transaction; event reviews
keep no aggregate.  Both routes answer with the refreshed parent.
"""

from fastapi import APIRouter, Depends

from venue_booking_api.app.api.deps import (
    get_event_service,
    get_review_service,
    get_venue_service,
    internal_errors,
)
from venue_booking_api.app.core.security import get_current_user
from venue_booking_api.app.schemas.event import EventRead
from venue_booking_api.app.schemas.review import ReviewCreate
from venue_booking_api.app.schemas.user import UserRead
from venue_booking_api.app.schemas.venue import VenueRead
from venue_booking_api.app.services.event_service import EventService
from venue_booking_api.app.services.review_service import ReviewService
from venue_booking_api.app.services.venue_service import VenueService


router = APIRouter()


@router.post("/venues/{venue_id}/reviews", response_model=VenueRead)
async def review_venue(
    venue_id: int,
    review: ReviewCreate,
    current_user: UserRead = Depends(get_current_user),
    reviews: ReviewService = Depends(get_review_service),
    venues: VenueService = Depends(get_venue_service),
) -> VenueRead:
    """Add a review to a venue and return it with the new mean rating."""
    with internal_errors("Failed to add review"):
        await reviews.add_venue_review(venue_id, current_user.id, review)
        return await venues.get_venue(venue_id)


@router.post("/events/{event_id}/reviews", response_model=EventRead)
async def review_event(
    event_id: int,
    review: ReviewCreate,
    current_user: UserRead = Depends(get_current_user),
    reviews: ReviewService = Depends(get_review_service),
    events: EventService = Depends(get_event_service),
) -> EventRead:
    with internal_errors("Failed to add review"):
        await reviews.add_event_review(event_id, current_user.id, review)
        return await events.get_event(event_id)
