"""Logging configuration helpers."""

import logging

APP_LOGGER = "sazio"
LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"

# The Supabase client logs every PostgREST and Auth request through these.
_CLIENT_LOGGERS = ("httpx", "httpcore", "hpack")


def configure_logging(level: str = "INFO") -> None:
    """Configure the application logger with a single stream handler.

    Client libraries stay at WARNING unless the app runs at DEBUG.
    """
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    for name in _CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(
            logging.DEBUG if resolved <= logging.DEBUG else logging.WARNING
        )

    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(resolved)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
