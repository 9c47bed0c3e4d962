"""Logging setup for applications embedding the parser."""

import logging
from typing import Optional

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a stream handler to the 'fhipster' logger tree.

    level defaults to Config.LOG_LEVEL. Calling it again only updates the
    level, it never stacks handlers.

    Raises:
        ValueError: level is not a standard logging level name.
    """
    if level is None:
        from .config import Config
        level = Config.LOG_LEVEL

    level_name = str(level).strip().upper()
    if not isinstance(logging.getLevelName(level_name), int):
        raise ValueError(
            f"Unknown log level '{level}'. "
            f"Expected one of DEBUG, INFO, WARNING, ERROR, CRITICAL")

    logger = logging.getLogger('fhipster')
    logger.setLevel(level_name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
