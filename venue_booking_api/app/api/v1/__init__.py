"""
Version 1 of the API.

This subpackage bundles all endpoints for the first public version of
the Venue Booking API.  The routes are served without a path prefix so
that existing clients keep calling ``/venues``, ``/events`` and so on.
"""
