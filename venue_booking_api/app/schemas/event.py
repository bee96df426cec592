"""
Pydantic models for event data.

``EventForm`` carries the raw multipart fields of an event creation
request.  The front end sends ``date``/``time``; ``eventDate``/
``eventTime`` are accepted too and ``date``/``time`` win when both are
present.  ``EventRead`` is the response shape with organizer, venue
and attendee projections.
"""

from typing import List, Optional

from pydantic import Field

from .common import CamelModel, UserBrief, VenueBrief
from .review import ReviewRead


class EventForm(CamelModel):
    """Raw multipart fields of an event creation request."""

    title: Optional[str] = None
    description: Optional[str] = None
    venue: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    event_date: Optional[str] = None
    event_time: Optional[str] = None
    expected_attendees: Optional[str] = None
    budget: Optional[str] = None
    category: Optional[str] = None
    price: Optional[str] = None


class EventStatusUpdate(CamelModel):
    """Any status string is accepted (``pending``, ``approved``, ``rejected``...)."""

    status: str = Field(..., examples=["approved"])


class EventRead(CamelModel):
    """Schema for reading an event from the API."""

    id: int
    title: str
    description: str
    event_date: str
    event_time: str
    expected_attendees: int
    budget: float
    category: str
    price: float
    status: str
    images: List[str] = Field(default_factory=list)
    organizer: Optional[UserBrief] = None
    venue: Optional[VenueBrief] = None
    attendees: List[UserBrief] = Field(default_factory=list)
    reviews: List[ReviewRead] = Field(default_factory=list)
    created_at: Optional[str] = None
