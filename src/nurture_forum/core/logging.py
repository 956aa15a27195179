"""Logging setup for the forum service.

Modules log through ``logging.getLogger(__name__)``; this module only wires the
root handler once, at application startup.
"""

from __future__ import annotations

import logging
import sys

from nurture_forum.core.settings import Settings, settings

_configured = False


def configure_logging(config: Settings = settings) -> None:
    """Attach a stream handler to the root logger using the configured level."""
    global _configured
    if _configured:
        return

    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(config.log_format))

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(level)

    # SQL echo is controlled separately through SQL_DEBUG.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    _configured = True
