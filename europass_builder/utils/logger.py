"""Logging configuration for the Europass builder."""

import logging
import sys
from typing import Optional

from europass_builder.config import LOG_LEVEL


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Get a configured logger instance (stdout handler, level from LOG_LEVEL)."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
        # Streamlit installs its own root handler; avoid printing twice
        logger.propagate = False
        logger.setLevel(level if level is not None else getattr(logging, LOG_LEVEL, logging.INFO))
    elif level is not None:
        logger.setLevel(level)
    return logger
