"""Logging configuration helpers."""

import logging

LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"
# Loggers of libraries that log each outgoing request at INFO.
QUIET_LOGGERS = ("httpx", "httpcore", "google.auth")


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach one stream handler to the food_diary logger and return it.

    Repeated calls only adjust the level.
    """
    logger = logging.getLogger("food_diary")
    logger.setLevel(level.upper())
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
