"""
Pydantic models for venue data.

``VenueForm`` holds the raw multipart form values exactly as the
client sent them; ``VenueService.create_venue`` parses and coerces
them.  ``VenueRead`` is the response shape with the owner projected to
``{id, name, email}``.
"""

from typing import List, Optional

from pydantic import Field

from .common import CamelModel, UserBrief
from .review import ReviewRead


class VenueForm(CamelModel):
    """Raw multipart fields of a venue creation request."""

    name: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    capacity: Optional[str] = None
    price_per_day: Optional[str] = None
    # JSON encoded list, e.g. '["wifi", "parking"]'
    amenities: Optional[str] = None
    availability: Optional[str] = None


class VenueAvailabilityUpdate(CamelModel):
    availability: bool


class VenueRead(CamelModel):
    """Schema for reading a venue from the API."""

    id: int
    owner: Optional[UserBrief] = None
    name: str
    address: str
    description: Optional[str] = None
    capacity: int
    price_per_day: float
    amenities: List[str] = Field(default_factory=list)
    availability: bool
    images: List[str] = Field(default_factory=list)
    rating: float = 0
    reviews: List[ReviewRead] = Field(default_factory=list)
    created_at: Optional[str] = None
