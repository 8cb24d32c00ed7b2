"""
Logging setup for Civic Triage.

Handlers live on the ``civic_triage`` package logger only and are attached
the first time any module asks for a logger. Module loggers are children
that propagate to it. A file handler is added only when CIVIC_LOG_FILE is
set.
"""

import logging
import json
import sys
from pathlib import Path
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

PACKAGE_LOGGER = "civic_triage"
TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per record; ``extra_fields`` are merged in"""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            log_obj.update(extra_fields)

        return json.dumps(log_obj, default=str)


def build_handlers(config) -> List[logging.Handler]:
    """Stderr handler, plus a file handler when LOG_FILE is set"""
    if config.LOG_FORMAT == "json":
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if config.LOG_FILE:
        log_file = Path(config.LOG_FILE)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging(config=None) -> logging.Logger:
    """Attach handlers to the package logger once; later calls are no-ops"""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if package_logger.handlers:
        return package_logger

    if config is None:
        from .config import config

    package_logger.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))
    for handler in build_handlers(config):
        package_logger.addHandler(handler)
    package_logger.propagate = False

    return package_logger


def get_logger(name: str = PACKAGE_LOGGER,
               extra_fields: Optional[Dict[str, Any]] = None) -> Union[logging.Logger, logging.LoggerAdapter]:
    """
    Get a logger under the package hierarchy

    Args:
        name: Logger name; names outside ``civic_triage`` are nested under it
        extra_fields: Fields added to every record from the returned adapter

    Returns:
        Logger, or a LoggerAdapter carrying ``extra_fields``
    """
    configure_logging()

    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    logger = logging.getLogger(name)

    if extra_fields:
        return logging.LoggerAdapter(logger, {"extra_fields": dict(extra_fields)})
    return logger
