"""Logging setup shared by every FlashDeck module."""

import logging
import os
from typing import Optional

DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

ROOT_LOGGER_NAME = "flashdeck"


def setup_logger(level: Optional[str] = None, fmt: Optional[str] = None) -> logging.Logger:
    """Initialize the package logger with a stream handler and formatter."""
    resolved_level = getattr(logging, (level or DEFAULT_LEVEL).upper(), logging.INFO)
    formatter = logging.Formatter(fmt or DEFAULT_FORMAT)

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(resolved_level)

    # Clear existing handlers to avoid duplicate logs on re-init
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root.addHandler(handler)
    return root


def get_logger(name: str) -> logging.Logger:
    """Get a module logger; ensure the package logger is initialized."""
    if not logging.getLogger(ROOT_LOGGER_NAME).handlers:
        setup_logger()
    return logging.getLogger(name)
