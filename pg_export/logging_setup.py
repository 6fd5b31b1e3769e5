from __future__ import annotations

import logging
import os

EXPORT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d | %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Set up root logging for a CLI run; ``level`` falls back to $LOG_LEVEL, then INFO."""
    resolved = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(level=resolved, format=EXPORT_LOG_FORMAT)
    # psycopg's pool logs every connection check at DEBUG
    if resolved != "DEBUG":
        logging.getLogger("psycopg.pool").setLevel(logging.INFO)
