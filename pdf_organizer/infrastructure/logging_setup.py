from __future__ import annotations

import logging

from pdf_organizer.infrastructure.config import AppConfig

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(config: AppConfig) -> None:
    """Attach a stream handler to the ``pdf_organizer`` logger once."""
    logger = logging.getLogger("pdf_organizer")
    level = logging.getLevelName(config.log_level.upper())
    logger.setLevel(level if isinstance(level, int) else logging.INFO)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
