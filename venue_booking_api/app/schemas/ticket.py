"""
Pydantic models for tickets.

A ticket copies the event's display fields (``eventDetails``) and its
own purchase data (``ticketDetails``) at purchase time, so it remains
displayable after the event changes or is removed.  Every field of
``TicketCreate`` is optional at the schema level; the service reports
missing fields with its own messages.
"""

from typing import Any, Dict, Optional

from pydantic import Field

from .common import CamelModel
from .event import EventRead


class TicketCreate(CamelModel):
    user_id: Optional[int] = None
    event_id: Optional[int] = None
    quantity: Optional[int] = None
    total_amount: Optional[float] = None
    event_details: Optional[Dict[str, Any]] = None
    ticket_details: Optional[Dict[str, Any]] = None
    qr_code: Optional[str] = None


class TicketRead(CamelModel):
    id: int
    user_id: int
    event_id: int
    quantity: int
    total_amount: float
    event_details: Dict[str, Any] = Field(default_factory=dict)
    ticket_details: Dict[str, Any] = Field(default_factory=dict)
    qr_code: str
    created_at: Optional[str] = None


class TicketWithEvent(TicketRead):
    """A ticket with its live event expanded (``None`` once the event is gone)."""

    event: Optional[EventRead] = None


class TicketCreated(CamelModel):
    success: bool = True
    ticket: TicketRead
