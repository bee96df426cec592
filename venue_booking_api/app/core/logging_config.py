"""
Logging configuration for the booking API.

``setup_logging`` attaches a console handler to the root logger once
and a file handler once per log file, so calling ``create_app``
repeatedly in tests does not duplicate output.  The level is applied on
every call; the last application built decides it.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third‑party loggers that are too verbose below WARNING.
_NOISY_LOGGERS = ("multipart", "python_multipart")

# Set on handlers installed here so repeated calls can recognise them.
_MARKER = "_venue_booking_handler"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path to a file to log messages to.  If omitted or empty, no
        file handler is added.
    """
    logger = logging.getLogger()
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    ours = [handler for handler in logger.handlers if getattr(handler, _MARKER, False)]

    if not any(not isinstance(handler, logging.FileHandler) for handler in ours):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        setattr(console_handler, _MARKER, True)
        logger.addHandler(console_handler)

    log_path = Path(logfile).resolve() if logfile else None
    attached = {
        Path(handler.baseFilename) for handler in ours if isinstance(handler, logging.FileHandler)
    }
    if log_path is not None and log_path not in attached:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        setattr(file_handler, _MARKER, True)
        logger.addHandler(file_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
