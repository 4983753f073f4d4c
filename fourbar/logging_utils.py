from __future__ import annotations

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def configure_logging(level: str = "INFO", stream: TextIO | None = None) -> None:
    """Send records from every logger to ``stream`` (stdout by default)."""
    handler = logging.StreamHandler(stream=sys.stdout if stream is None else stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )


__all__ = ["LOG_FORMAT", "configure_logging"]
