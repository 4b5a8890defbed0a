"""
Logging infrastructure.

Provides logging utilities for the infrastructure layer.
"""
import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Install the root handler once.

    Args:
        level: Root log level name (DEBUG, INFO, ...)
    """
    root = logging.getLogger()
    if not any(getattr(h, "_mesob", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._mesob = True
        root.addHandler(handler)
    root.setLevel(level.upper())
