"""Entry point for the venue booking API server.

Host and port are read from ``HOST`` and ``PORT`` (defaults
``0.0.0.0`` and ``4000``); the remaining configuration is described in
``venue_booking_api.app.core.config``.

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from venue_booking_api.app.core.config import Settings
from venue_booking_api.app.main import create_app


async def main() -> None:
    """Build the application from the environment and serve it."""
    settings = Settings()
    app = create_app(settings)
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
