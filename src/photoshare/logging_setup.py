from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
ROOT_LOGGER_NAME = "photoshare"

_HANDLER = logging.StreamHandler()
_HANDLER.setFormatter(logging.Formatter(LOG_FORMAT))


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach the package stream handler to the ``photoshare`` logger.

    Calling this again only updates the level.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    if _HANDLER not in logger.handlers:
        logger.addHandler(_HANDLER)
    return logger
