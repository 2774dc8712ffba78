"""Logging configuration."""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from donezo.config import Settings

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Libraries that are chatty at INFO
QUIET_LOGGERS = ("uvicorn.access", "passlib", "opentelemetry")


class JsonFormatter(logging.Formatter):
    """JSON log formatter, one object per line."""

    def __init__(self, service: str, environment: str):
        super().__init__()
        self.service = service
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_record: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "service": self.service,
            "environment": self.environment,
            "name": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record)


def build_formatter(settings: Settings) -> logging.Formatter:
    """Pick JSON output in production and readable text elsewhere."""
    if settings.environment == "production":
        return JsonFormatter(settings.app_name, settings.environment)
    return logging.Formatter(TEXT_FORMAT)


def setup_logging(settings: Settings) -> None:
    """
    Configure the root logger for the running app.

    Args:
        settings: Application settings
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

    # Replace handlers so repeated app construction does not duplicate output
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(build_formatter(settings))
    root_logger.addHandler(console_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.db_echo else logging.WARNING
    )
