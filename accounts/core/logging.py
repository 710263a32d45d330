from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str) -> None:
    """Route the ``accounts`` loggers to stderr at ``level``.

    Unknown level names fall back to INFO instead of failing app startup.
    """
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("accounts").setLevel(resolved)
