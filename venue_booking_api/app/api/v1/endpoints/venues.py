"""
Venue endpoints for API v1.

Venue owners create venues with a multipart form (fields plus up to
five ``images``), toggle availability and delete venues no event uses.
Listing and detail views are public; ``?owner=true`` narrows the
listing to the caller's own venues.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status

from venue_booking_api.app.api.deps import get_venue_service, internal_errors
from venue_booking_api.app.core import errors
from venue_booking_api.app.core.security import get_optional_user, require_roles
from venue_booking_api.app.schemas.user import UserRead
from venue_booking_api.app.schemas.venue import VenueAvailabilityUpdate, VenueForm, VenueRead
from venue_booking_api.app.services.venue_service import VenueService


router = APIRouter()


@router.post("", response_model=VenueRead, status_code=status.HTTP_201_CREATED)
async def create_venue(
    name: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    capacity: Optional[str] = Form(None),
    price_per_day: Optional[str] = Form(None, alias="pricePerDay"),
    amenities: Optional[str] = Form(None, description='JSON encoded list, e.g. ["wifi"]'),
    availability: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    current_user: UserRead = Depends(require_roles("venue_owner")),
    venues: VenueService = Depends(get_venue_service),
) -> VenueRead:
    """Create a venue owned by the caller (venue owners only)."""
    form = VenueForm(
        name=name,
        address=address,
        description=description,
        capacity=capacity,
        price_per_day=price_per_day,
        amenities=amenities,
        availability=availability,
    )
    with internal_errors("Failed to create venue"):
        return await venues.create_venue(current_user, form, images or [])


@router.get("", response_model=List[VenueRead])
async def list_venues(
    request: Request,
    owner: Optional[str] = Query(None, description="Pass 'true' to list only your own venues"),
    venues: VenueService = Depends(get_venue_service),
) -> List[VenueRead]:
    """List venues with their owner projected to ``{id, name, email}``.

    The session cookie is only read for ``?owner=true``; a stale cookie
    never blocks the public listing.
    """
    owner_id = None
    if owner == "true":
        current_user = await get_optional_user(request)
        if current_user is None:
            raise errors.UnauthenticatedError("Authentication required")
        owner_id = current_user.id
    with internal_errors("Failed to fetch venues"):
        return await venues.list_venues(owner_id=owner_id)


@router.get("/{venue_id}", response_model=Optional[VenueRead])
async def get_venue(
    venue_id: int,
    venues: VenueService = Depends(get_venue_service),
) -> Optional[VenueRead]:
    """Retrieve a venue with owner and reviewer projections; ``null`` if absent."""
    with internal_errors("Failed to fetch venue"):
        return await venues.get_venue(venue_id)


@router.put("/{venue_id}/availability", response_model=VenueRead)
async def update_availability(
    venue_id: int,
    body: VenueAvailabilityUpdate,
    current_user: UserRead = Depends(require_roles("venue_owner")),
    venues: VenueService = Depends(get_venue_service),
) -> VenueRead:
    """Toggle a venue's availability.  Only its owner may do this."""
    with internal_errors("Failed to update availability"):
        return await venues.set_availability(venue_id, current_user, body.availability)


@router.delete("/{venue_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_venue(
    venue_id: int,
    current_user: UserRead = Depends(require_roles("venue_owner")),
    venues: VenueService = Depends(get_venue_service),
) -> None:
    """Delete a venue the caller owns, as long as no event is booked there."""
    with internal_errors("Failed to delete venue"):
        await venues.delete_venue(venue_id, current_user)
    return None
