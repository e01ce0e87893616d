"""
Logging configuration for the Taskspace application.
"""
import logging
import sys
from typing import Union


def setup_logging(level: Union[int, str] = logging.WARNING) -> None:
    """
    Configure a single stderr handler on the root logger.

    Call this once, early, from the entry point. Pre-existing handlers are
    removed so repeated CLI invocations in one process don't duplicate output.

    Args:
        level: Logging level for taskspace loggers (int or level name).
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(fmt)
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("taskspace").setLevel(level)
