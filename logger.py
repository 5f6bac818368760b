"""
Logging setup for the marketplace.

Every module logs through ``logging.getLogger(__name__)``; this module only
wires the root handler once so console output shares one format.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Handler installed by configure_logging
_handler: Optional[logging.Handler] = None


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a stdout handler to the root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        The root logger
    """
    global _handler

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if _handler is None:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(_handler)

    return root


def reset_logging():
    """Remove the handler installed by configure_logging (useful for testing)."""
    global _handler

    if _handler is not None:
        logging.getLogger().removeHandler(_handler)
        _handler = None
