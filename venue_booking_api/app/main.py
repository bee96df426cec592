"""
Main entrypoint for the Venue Booking API.

This module assembles the FastAPI application: it sets up logging,
builds the database, image storage, credential service and domain
services from a ``Settings`` instance, publishes them on ``app.state``
and includes the routers.  The module level ``app`` is built from the
environment so it can be served directly::

    uvicorn venue_booking_api.app.main:app --reload

Tests call ``create_app`` with their own settings instead.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .api.v1.router import router as v1_router
from .core.config import Settings, resolve_project_path
from .core.db import Database
from .core.errors import BookingError
from .core.logging_config import setup_logging
from .core.security import CredentialService
from .core.storage import LocalImageStorage
from .services.event_service import EventService
from .services.review_service import ReviewService
from .services.ticket_service import TicketService
from .services.user_service import UserService
from .services.venue_service import VenueService


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to build the application from.  When omitted the
        settings are read from the environment.

    Returns
    -------
    FastAPI
        A configured application whose services live on ``app.state``.
    """
    settings = settings or Settings()
    setup_logging(settings.log_level, settings.log_file or None)
    logger = logging.getLogger(__name__)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    # The browser client sends the session cookie cross origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    db = Database(settings.database_url)
    upload_dir = resolve_project_path(settings.upload_dir)
    storage = LocalImageStorage(upload_dir)
    events = EventService(db, storage, max_images=settings.max_images)

    app.state.settings = settings
    app.state.db = db
    app.state.storage = storage
    app.state.credentials = CredentialService(
        settings.secret_key, expire_minutes=settings.access_token_expire_minutes
    )
    app.state.user_service = UserService(db)
    app.state.venue_service = VenueService(db, storage, max_images=settings.max_images)
    app.state.event_service = events
    app.state.review_service = ReviewService(db)
    app.state.ticket_service = TicketService(db, events)

    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    app.include_router(v1_router)
    # Stored image references are "<upload_dir>/<name>", served back from /uploads.
    app.mount("/uploads", StaticFiles(directory=upload_dir, check_dir=False), name="uploads")

    @app.on_event("startup")
    async def startup_event() -> None:
        db.init_db()
        storage.ensure_directory()
        logger.info("%s %s ready (database %s)", settings.project_name, settings.api_version, db.path)

    return app


app = create_app()
