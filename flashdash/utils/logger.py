"""
Logging setup.

One stream handler on the `flashdash` root logger, level from settings.
"""

import logging
import sys

from flashdash.config.settings import settings

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_root = logging.getLogger("flashdash")
if not _root.handlers:
    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(logging.Formatter(_FORMAT))
    _root.addHandler(_handler)
_root.setLevel(settings.LOG_LEVEL.upper())
_root.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return a child of the `flashdash` logger."""
    if name == "flashdash" or name.startswith("flashdash."):
        return logging.getLogger(name)
    return _root.getChild(name)


logger = get_logger("flashdash")
