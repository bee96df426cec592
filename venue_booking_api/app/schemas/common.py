"""
Shared schema building blocks.

``CamelModel`` is the base of every payload: fields are declared in
snake_case, serialised in camelCase (``pricePerDay``,
``expectedAttendees``) and accepted in either form on input.  The
projection models describe the partial views of referenced entities
that listings embed instead of the full record.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserName(CamelModel):
    """Projection of a user used in review listings."""

    id: int
    name: str


class UserBrief(CamelModel):
    """Projection of a user used for owners, organizers and attendees."""

    id: int
    name: str
    email: str


class VenueBrief(CamelModel):
    """Projection of a venue embedded in events."""

    id: int
    name: str
    address: str
    capacity: int
    amenities: List[str] = Field(default_factory=list)
