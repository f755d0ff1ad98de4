"""Logging for the study deck packages.

Library modules only ask for named loggers. The service entry point decides
how records are formatted and where they go by calling ``setup_logging``.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_HANDLER_NAME = "studydeck"


def setup_logging(level: str = "INFO", fmt: str = LOG_FORMAT) -> logging.Handler:
    """Attach one stream handler to the root logger; calling again replaces it."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
