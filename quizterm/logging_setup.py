from __future__ import annotations

"""Console logging for the quizterm CLI."""

import logging
from typing import Optional, TextIO

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
HANDLER_NAME = "quizterm-console"

# loggers that are noisy at DEBUG
_QUIET_LOGGERS = ("urllib3",)


def level_for_verbosity(verbosity: int) -> int:
    """Map the CLI's -v count to a level: none WARNING, -v INFO, -vv DEBUG."""
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_console_logging(level: int = logging.WARNING, stream: Optional[TextIO] = None) -> logging.Handler:
    """
    Call once at app start. Sends log records to stderr (or `stream`).

    Calling again only updates levels; the quizterm handler is installed once.
    """
    root = logging.getLogger()
    root.setLevel(level)
    for h in root.handlers:
        if h.get_name() == HANDLER_NAME:
            h.setLevel(level)
            break
    else:
        h = logging.StreamHandler(stream)
        h.set_name(HANDLER_NAME)
        h.setLevel(level)
        h.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
        root.addHandler(h)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))
    return h
