"""
Pydantic models for user data.

A user's role decides which profile fields exist: venue owners carry
``venueDetails``, organizers carry ``organizationDetails`` and
attendees carry neither.  The three shapes form the ``RoleProfile``
tagged union (discriminated by ``role``); ``build_profile`` maps a
registration payload onto exactly one of them.
"""

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import Field, TypeAdapter

from .common import CamelModel

Role = Literal["attendee", "venue_owner", "organizer"]


class AttendeeProfile(CamelModel):
    role: Literal["attendee"] = "attendee"


class VenueOwnerProfile(CamelModel):
    role: Literal["venue_owner"] = "venue_owner"
    venue_details: Dict[str, Any] = Field(default_factory=dict)


class OrganizerProfile(CamelModel):
    role: Literal["organizer"] = "organizer"
    organization_details: Dict[str, Any] = Field(default_factory=dict)


RoleProfile = Annotated[
    Union[AttendeeProfile, VenueOwnerProfile, OrganizerProfile],
    Field(discriminator="role"),
]

_profile_adapter = TypeAdapter(RoleProfile)


class UserCreate(CamelModel):
    """Schema for registering a user."""

    name: str = Field(..., min_length=1, examples=["Alice"])
    email: str = Field(..., min_length=3, examples=["alice@example.com"])
    password: str = Field(..., min_length=1)
    role: Role = "attendee"
    venue_details: Optional[Dict[str, Any]] = None
    organization_details: Optional[Dict[str, Any]] = None


class UserLogin(CamelModel):
    email: str
    password: str


def build_profile(data: UserCreate) -> RoleProfile:
    """Keep only the profile details that belong to ``data.role``."""
    if data.role == "venue_owner":
        return VenueOwnerProfile(venue_details=data.venue_details or {})
    if data.role == "organizer":
        return OrganizerProfile(organization_details=data.organization_details or {})
    return AttendeeProfile()


def parse_profile(values: Dict[str, Any]) -> RoleProfile:
    """Rebuild the tagged profile from stored values (``role`` plus details)."""
    return _profile_adapter.validate_python(values)


class UserRead(CamelModel):
    """Schema for reading a user from the API (never includes the password)."""

    id: int
    name: str
    email: str
    role: Role
    venue_details: Optional[Dict[str, Any]] = None
    organization_details: Optional[Dict[str, Any]] = None

    @classmethod
    def from_profile(cls, id: int, name: str, email: str, profile: RoleProfile) -> "UserRead":
        return cls(id=id, name=name, email=email, **profile.model_dump())


class UserProfile(CamelModel):
    """The public identity returned by ``/profile``."""

    id: int
    name: str
    email: str
    role: Role
