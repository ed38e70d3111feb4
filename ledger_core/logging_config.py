"""
Logging configuration.

Every module logs through logging.getLogger(__name__). This module
only decides where those records go and at which level, based on
the LOG_LEVEL setting.
"""

import logging
import sys

from ledger_core.config import get_settings

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s %(message)s"


def configure_logging(level: str | None = None) -> None:
    """
    Attach a stdout handler to the ledger_core logger hierarchy.

    Safe to call more than once: the handler is only added the
    first time.
    """
    settings = get_settings()
    root = logging.getLogger("ledger_core")
    root.setLevel((level or settings.LOG_LEVEL).upper())

    if not any(getattr(h, "_ledger_core", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._ledger_core = True
        root.addHandler(handler)
