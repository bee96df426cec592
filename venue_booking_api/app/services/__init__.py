"""
Service layer abstraction.

Each service encapsulates business logic for a domain and receives
its collaborators (database, image storage, other services) through
its constructor.  Services are built once in ``create_app`` and shared
by the request handlers via ``app.state``.
"""
