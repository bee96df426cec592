"""Venue booking API client.

This module defines a thin client around the venue booking REST API.
The client keeps a ``requests.Session`` so the ``token`` cookie set by
``/login`` is sent automatically with every later request, exactly as
a browser would.

High level methods:

* :meth:`register` / :meth:`login` / :meth:`logout` / :meth:`profile` – accounts.
* :meth:`list_venues` / :meth:`get_venue` / :meth:`create_venue` – venues.
* :meth:`list_events` / :meth:`get_event` / :meth:`create_event` – events.
* :meth:`review_venue` / :meth:`review_event` – reviews.
* :meth:`buy_ticket` / :meth:`list_user_tickets` / :meth:`delete_ticket` – tickets.

Every method returns a tuple ``(data, error)``.  On success ``error``
is ``None``; on failure ``data`` is ``None`` (or an empty list for
listings) and ``error`` is a dictionary with the keys ``status_code``
and ``message``.  The message is taken from the server's ``error``
field, followed by its ``details`` when present.
"""

from __future__ import annotations

import logging
from typing import Any, BinaryIO, Dict, List, Optional, Sequence, Tuple

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]


def _error_message(response: requests.Response) -> str:
    """Build a readable message from an ``{"error", "details"}`` body."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if not isinstance(body, dict):
        return str(body)
    message = body.get("error") or body.get("detail") or str(body)
    details = body.get("details")
    if details:
        if isinstance(details, list):
            details = ", ".join(str(item) for item in details)
        message = f"{message}: {details}"
    return str(message)


class VenueBookingClient:
    """Client for the venue booking API.

    Args:
        base_url: Base URL of the server, e.g. ``http://localhost:4000``.
        session: Optional requests session.  A new one is created when
            omitted; pass your own to share cookies or adapters.
        timeout: Seconds to wait for each response.
    """

    def __init__(
        self,
        *,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None, data: Dict[str, Any] | None = None,
        files: List[Tuple[str, Any]] | None = None,
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request and decode the JSON response.

        Returns:
            A tuple ``(data, error)``.  Empty responses (such as 204)
            yield ``(None, None)``.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                data=data,
                files=files,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = _error_message(exc.response) if exc.response is not None else ""
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    @staticmethod
    def _image_files(images: Sequence[Tuple[str, BinaryIO]] | None) -> List[Tuple[str, Any]]:
        return [("images", (name, handle)) for name, handle in images or []]

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------
    def register(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Create an account.

        Args:
            payload: ``name``, ``email``, ``password``, ``role`` and,
                depending on the role, ``venueDetails`` or
                ``organizationDetails``.
        """
        return self._request("POST", "/register", json_body=payload)

    def login(self, email: str, password: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Sign in; the session keeps the returned cookie."""
        return self._request("POST", "/login", json_body={"email": email, "password": password})

    def logout(self) -> Tuple[bool, Optional[Error]]:
        data, error = self._request("POST", "/logout")
        if error:
            return False, error
        return bool(data), None

    def profile(self) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Return the signed in user, or ``None`` without a session."""
        return self._request("GET", "/profile")

    # ------------------------------------------------------------------
    # Venues
    # ------------------------------------------------------------------
    def list_venues(self, *, mine: bool = False) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        params = {"owner": "true"} if mine else None
        data, error = self._request("GET", "/venues", params=params)
        if error:
            return [], error
        return data or [], None

    def get_venue(self, venue_id: Any) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/venues/{venue_id}")

    def create_venue(
        self, fields: Dict[str, Any], images: Sequence[Tuple[str, BinaryIO]] | None = None
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Create a venue from form ``fields`` and optional ``(filename, file)`` images.

        ``amenities`` must already be JSON encoded, e.g. ``'["wifi"]'``.
        """
        return self._request("POST", "/venues", data=fields, files=self._image_files(images))

    def set_venue_availability(
        self, venue_id: Any, availability: bool
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request(
            "PUT", f"/venues/{venue_id}/availability", json_body={"availability": availability}
        )

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def list_events(self, *, mine: bool = False) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        params = {"organizer": "true"} if mine else None
        data, error = self._request("GET", "/events", params=params)
        if error:
            return [], error
        return data or [], None

    def get_event(self, event_id: Any) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/events/{event_id}")

    def create_event(
        self, fields: Dict[str, Any], images: Sequence[Tuple[str, BinaryIO]] | None = None
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Create an event from form ``fields`` (``venue`` holds the venue id)."""
        return self._request("POST", "/events", data=fields, files=self._image_files(images))

    def set_event_status(self, event_id: Any, status: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("PUT", f"/events/{event_id}/status", json_body={"status": status})

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------
    def review_venue(
        self, venue_id: Any, rating: float, comment: str | None = None
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request(
            "POST", f"/venues/{venue_id}/reviews", json_body={"rating": rating, "comment": comment}
        )

    def review_event(
        self, event_id: Any, rating: float, comment: str | None = None
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request(
            "POST", f"/events/{event_id}/reviews", json_body={"rating": rating, "comment": comment}
        )

    # ------------------------------------------------------------------
    # Tickets
    # ------------------------------------------------------------------
    def buy_ticket(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Record a purchase and return the stored ticket.

        Args:
            payload: ``userId``, ``eventId``, ``quantity``,
                ``totalAmount``, ``eventDetails``, ``ticketDetails`` and
                ``qrCode``.
        """
        data, error = self._request("POST", "/tickets", json_body=payload)
        if error:
            return None, error
        return (data or {}).get("ticket"), None

    def list_user_tickets(self, user_id: Any) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("GET", f"/tickets/user/{user_id}")
        if error:
            return [], error
        return data or [], None

    def delete_ticket(self, ticket_id: Any) -> Tuple[bool, Optional[Error]]:
        _, error = self._request("DELETE", f"/tickets/{ticket_id}")
        if error:
            return False, error
        return True, None
