"""
Logging setup for CLI runs.

Library modules only call logging.getLogger(__name__); handlers are
installed here, once, on the "collapsegraph" and "collapse_kernel"
loggers.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional, TextIO

LOGGER_NAMES = ("collapsegraph", "collapse_kernel")

# Extra record attributes copied into JSON entries when present
EXTRA_FIELDS = ("digest_name", "chain_hash_short", "profile", "classes", "duration_ms")


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """Install one stream handler (stderr by default); replaces earlier ones."""
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(TEXT_FORMAT))
    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        for old in list(logger.handlers):
            if getattr(old, "_collapsegraph", False):
                logger.removeHandler(old)
        logger.setLevel(getattr(logging, level.upper()))
        logger.addHandler(handler)
        logger.propagate = False
    handler._collapsegraph = True
    return handler


__all__ = ['JSONFormatter', 'configure_logging']
