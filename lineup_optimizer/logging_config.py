"""Python logging configuration for the lineup optimizer."""

import logging
import sys
from typing import TextIO


def setup_logging(
    level: int = logging.INFO,
    stream: TextIO | None = None,
    force: bool = False,
) -> None:
    """Configure root logger with a console handler.

    ``force`` replaces an existing configuration; the CLI uses it to move
    log output to stderr so stdout stays pure JSON.
    """
    root = logging.getLogger()
    if root.handlers and not force:
        return  # Already configured
    for existing in list(root.handlers):
        root.removeHandler(existing)

    root.setLevel(level)
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    fmt = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(fmt)
    root.addHandler(handler)

    # numexpr announces its thread count at INFO
    logging.getLogger("numexpr").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger, ensuring logging is configured."""
    setup_logging()
    return logging.getLogger(name)
