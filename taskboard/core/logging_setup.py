"""
Logging configuration.

Call setup_logging() once at startup, before the first log record is emitted.
"""

import logging
import sys
from typing import Optional

from taskboard.core.config import settings


class _ThirdPartyNoiseFilter(logging.Filter):
    """Keep taskboard logs, drop third-party chatter below WARNING."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("taskboard") or record.name == "__main__":
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger with a single console handler.
    
    Args:
        level: Level name (e.g. "DEBUG"); defaults to settings.LOG_LEVEL
    """
    level_name = (level or settings.LOG_LEVEL).upper()

    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    # Remove any pre-existing handlers to avoid duplicates on reload
    for handler in list(root.handlers):
        root.removeHandler(handler)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(fmt)
    console.addFilter(_ThirdPartyNoiseFilter())
    root.addHandler(console)

    logging.captureWarnings(True)
