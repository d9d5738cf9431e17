"""Shared utility functions for MeetingAI."""

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stream handler to the ``meetingai`` logger (idempotent)."""
    logger = logging.getLogger("meetingai")
    logger.setLevel(level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)

    return logger


def format_megabytes(size: int) -> str:
    """Render a byte count as ``"1.23 MB"``."""
    return f"{size / 1024 / 1024:.2f} MB"
