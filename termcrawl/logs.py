"""Diagnostic logging setup.

Every pipeline stage receives a :class:`logging.Logger` instead of reading a
global debug switch; this module hands those loggers out and installs the
single stderr handler the CLI uses.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"
_ROOT = "termcrawl"

# Handler installed by configure_logging, reused on later calls.
_handler: Optional[logging.Handler] = None


def get_logger(stage: str) -> logging.Logger:
    """Return the logger for *stage*, e.g. ``get_logger("fetcher")``."""
    return logging.getLogger(f"{_ROOT}.{stage}")


def configure_logging(debug: bool = False) -> logging.Logger:
    """Attach a stderr handler to the ``termcrawl`` logger tree.

    Safe to call more than once; the handler is installed at most once and
    only the level is updated.
    """
    global _handler

    root = logging.getLogger(_ROOT)
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    if _handler is None or _handler not in root.handlers:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
        root.addHandler(_handler)
    return root
