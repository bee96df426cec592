"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables when it is instantiated.  Defaults are provided
for all fields.  ``create_app`` receives a ``Settings`` instance and
builds every service from it, so tests can construct their own
settings (temporary database, upload directory, secret) without
touching the environment.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

# Directory containing the ``venue_booking_api`` package.
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent


def resolve_project_path(path: str) -> str:
    """Return ``path`` unchanged if absolute, else resolved against ``PROJECT_ROOT``."""
    if os.path.isabs(path):
        return path
    return str((PROJECT_ROOT / path).resolve())


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: os.getenv("PROJECT_NAME", "Venue Booking API"))
    api_version: str = field(default_factory=lambda: os.getenv("API_VERSION", "1.0.0"))
    debug: bool = field(default_factory=lambda: _env_bool("DEBUG"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: str = field(default_factory=lambda: os.getenv("LOG_FILE", ""))

    # Secret used to sign session credentials.  Override in every
    # deployment; tokens signed with one secret are rejected by another.
    secret_key: str = field(default_factory=lambda: os.getenv("SECRET_KEY", "change_me"))

    # Lifetime of issued credentials in minutes.  ``0`` issues tokens
    # without an ``exp`` claim, which is how the marketplace has always
    # behaved; logout only clears the cookie.
    access_token_expire_minutes: int = field(
        default_factory=lambda: int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "0"))
    )
    cookie_name: str = field(default_factory=lambda: os.getenv("COOKIE_NAME", "token"))

    # Path to the SQLite database file.  Relative paths here and in
    # ``upload_dir`` are resolved against the project root.
    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", "venue_booking.db"))

    # Directory where uploaded venue and event images are written.  The
    # stored references are ``<upload_dir>/<original filename>``.
    upload_dir: str = field(default_factory=lambda: os.getenv("UPLOAD_DIR", "uploads"))
    max_images: int = field(default_factory=lambda: int(os.getenv("MAX_IMAGES", "5")))

    # Comma‑separated list of origins allowed to send credentialed
    # requests (the React front end runs on Vite's default port).
    cors_origins: str = field(default_factory=lambda: os.getenv("CORS_ORIGINS", "http://localhost:5173"))

    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "4000")))

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
