"""
Top‑level router for the venue booking API.

Account routes (``/register``, ``/login``, ``/profile``, ``/logout``)
and the liveness probe sit at the root; every other domain gets its
own prefix.  The review router spells out full paths because it hangs
off both ``/venues`` and ``/events``.
"""

from fastapi import APIRouter

from .endpoints import events, health, reviews, tickets, users, venues

router = APIRouter()

router.include_router(health.router, tags=["health"])
router.include_router(users.router, tags=["users"])
router.include_router(venues.router, prefix="/venues", tags=["venues"])
router.include_router(events.router, prefix="/events", tags=["events"])
router.include_router(reviews.router, tags=["reviews"])
router.include_router(tickets.router, prefix="/tickets", tags=["tickets"])
