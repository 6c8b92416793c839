"""
Process-wide logging setup.

Modules log through `logging.getLogger(__name__)` using `event key=value`
messages; this only wires the root handler and level once at startup.
"""

from __future__ import annotations

import logging

from . import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str | None = None) -> None:
    resolved = (level or settings.log_level()).upper()
    logging.basicConfig(level=getattr(logging, resolved, logging.INFO), format=LOG_FORMAT)
    # asyncpg is chatty at DEBUG.
    logging.getLogger("asyncpg").setLevel(logging.WARNING)
