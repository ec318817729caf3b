import logging
import os
from typing import Optional

TRACE = 5

logging.addLevelName(TRACE, "TRACE")

LOGGER_NAME = "lispread"

# Reader messages carry their own source line and column, so the format only
# adds the emitting module and level.
READER_FORMAT = "%(levelname)s [%(name)s] %(message)s"

_installed_handler: Optional[logging.Handler] = None


def level_from_env() -> str:
    """Return the level named by `LISPREAD_LOGGING_LEVEL`, `WARNING` if unset.

    `TRACE` enables the reader's per-dispatch and comment skipping messages and
    `DEBUG` its error reports."""
    return os.getenv("LISPREAD_LOGGING_LEVEL", "WARNING").upper()


def make_handler(level: str, fmt: str = READER_FORMAT) -> logging.Handler:
    """Return a stderr handler if `LISPREAD_USE_DEV_LOGGER=true`, otherwise a
    handler which discards records (leaving them to propagate to whatever the
    application has configured)."""
    handler: logging.Handler
    if os.getenv("LISPREAD_USE_DEV_LOGGER", "").lower() == "true":
        handler = logging.StreamHandler()
    else:
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(fmt))
    handler.setLevel(level)
    return handler


def configure_logger(
    level: Optional[str] = None, fmt: str = READER_FORMAT
) -> logging.Logger:
    """Configure the `lispread` logger.

    A handler installed by an earlier call is removed first, so reconfiguring
    never duplicates output."""
    global _installed_handler

    level = level or level_from_env()
    logger = logging.getLogger(LOGGER_NAME)
    if _installed_handler is not None:
        logger.removeHandler(_installed_handler)
    _installed_handler = make_handler(level, fmt=fmt)
    logger.setLevel(level)
    logger.addHandler(_installed_handler)
    return logger
