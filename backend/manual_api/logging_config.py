"""
Logging setup for the API.

``setup_logging`` configures the root logger with a console handler
exactly once. Every module then logs through
``logging.getLogger(__name__)``.
"""

import logging
from typing import Optional


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger.

    Args:
        level: Logging level name (e.g. "DEBUG", "INFO"). Case insensitive;
            unknown names fall back to INFO.
        logfile: Optional path of a file to also write log lines to.
    """
    root = logging.getLogger()
    if root.handlers:
        # Already configured (tests and repeated create_app calls hit this)
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(logfile, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
