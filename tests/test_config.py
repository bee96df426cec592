"""Settings paths and logging setup."""

import logging
from pathlib import Path

import pytest

from venue_booking_api.app.core.config import PROJECT_ROOT, Settings, resolve_project_path
from venue_booking_api.app.core.logging_config import setup_logging
from venue_booking_api.app.main import create_app


@pytest.fixture
def root_logger():
    logger = logging.getLogger()
    level, handlers = logger.level, list(logger.handlers)
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)


def test_latest_level_wins(root_logger):
    setup_logging("INFO")
    setup_logging("DEBUG")

    assert root_logger.level == logging.DEBUG
    console = [
        handler
        for handler in root_logger.handlers
        if getattr(handler, "_venue_booking_handler", False) and not isinstance(handler, logging.FileHandler)
    ]
    assert len(console) == 1


def test_log_file_is_attached_once(root_logger, tmp_path):
    logfile = tmp_path / "logs" / "api.log"

    setup_logging("INFO", str(logfile))
    setup_logging("WARNING", str(logfile))

    files = [handler for handler in root_logger.handlers if isinstance(handler, logging.FileHandler)]
    assert [Path(handler.baseFilename) for handler in files] == [logfile.resolve()]
    assert root_logger.level == logging.WARNING


def test_resolve_project_path():
    assert resolve_project_path("/srv/uploads") == "/srv/uploads"
    assert resolve_project_path("uploads") == str(PROJECT_ROOT / "uploads")


def test_relative_upload_dir_matches_database_base(root_logger):
    settings = Settings(
        database_url="booking.db",
        upload_dir="uploads",
        secret_key="test-secret",
        log_level="WARNING",
        log_file="",
    )

    app = create_app(settings)

    assert app.state.storage.directory == PROJECT_ROOT / "uploads"
    assert Path(app.state.db.path) == PROJECT_ROOT / "booking.db"
    mount = next(route for route in app.routes if getattr(route, "name", None) == "uploads")
    assert mount.app.directory == str(PROJECT_ROOT / "uploads")
