"""
Ticket endpoints for API v1.

Purchasing requires a session but the purchaser is taken from the
``userId`` in the payload.  Reading and deleting tickets is open: the
``GET /tickets/{id}`` route answers with every ticket regardless of
the id, which existing clients rely on.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from venue_booking_api.app.api.deps import get_ticket_service, internal_errors
from venue_booking_api.app.core.security import get_current_user
from venue_booking_api.app.schemas.ticket import (
    TicketCreate,
    TicketCreated,
    TicketRead,
    TicketWithEvent,
)
from venue_booking_api.app.schemas.user import UserRead
from venue_booking_api.app.services.ticket_service import TicketService


router = APIRouter()


@router.post("", response_model=TicketCreated, status_code=status.HTTP_201_CREATED)
async def create_ticket(
    ticket: TicketCreate,
    current_user: UserRead = Depends(get_current_user),
    tickets: TicketService = Depends(get_ticket_service),
) -> TicketCreated:
    """Record a ticket purchase.

    The payload must carry ``userId``, ``eventId``, ``quantity``,
    ``totalAmount``, ``qrCode`` and both snapshots; ``eventDetails``
    needs title, date, time, venue and price and ``ticketDetails``
    needs price and purchaseDate.  Anything missing yields 400 with the
    missing names in ``details``.
    """
    with internal_errors("Failed to create ticket"):
        created = await tickets.create_ticket(ticket)
    return TicketCreated(success=True, ticket=created)


@router.get("/user/{user_id}", response_model=List[TicketWithEvent])
async def list_user_tickets(
    user_id: int,
    tickets: TicketService = Depends(get_ticket_service),
) -> List[TicketWithEvent]:
    """List one user's tickets with the live event expanded."""
    with internal_errors("Failed to fetch tickets"):
        return await tickets.list_tickets_for_user(user_id)


@router.get("/{ticket_id}", response_model=List[TicketRead])
async def list_tickets(
    ticket_id: str,
    tickets: TicketService = Depends(get_ticket_service),
) -> List[TicketRead]:
    with internal_errors("Failed to fetch tickets"):
        return await tickets.list_tickets()


@router.delete("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ticket(
    ticket_id: int,
    tickets: TicketService = Depends(get_ticket_service),
) -> None:
    with internal_errors("Failed to delete ticket"):
        await tickets.delete_ticket(ticket_id)
    return None
