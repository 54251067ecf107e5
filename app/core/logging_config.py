"""Process-wide logging setup."""

import logging

from app.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"

# Chatty third-party loggers kept at WARNING unless DEBUG is on.
NOISY_LOGGERS = ("cloudinary", "urllib3", "sqlalchemy.engine", "multipart")


def configure_logging(settings: Settings) -> None:
    """Configure the root logger once; later calls (reloads, tests) leave handlers alone."""
    level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL, logging.INFO)
    root = logging.getLogger()
    if not root.hasHandlers():
        logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    root.setLevel(level)
    if not settings.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
