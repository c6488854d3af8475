"""
Structured JSON logging configuration.

Every tool invocation logs through module-level loggers; setup_logging()
routes them to stdout as one JSON object per line so Cloud Logging can
parse severity and fields without a custom parser.
"""

import json
import logging
import sys
from datetime import UTC, datetime

# Extra attributes copied into the JSON entry when present on the record
CONTEXT_FIELDS = ("correlation_id", "tool", "project_id", "cluster")


class JSONFormatter(logging.Formatter):
    """
    Custom JSON formatter for structured logging.

    Formats log records as JSON with ISO 8601 timestamps and tool context.

    Example:
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(JSONFormatter())
        >>> logger = logging.getLogger(__name__)
        >>> logger.addHandler(handler)
        >>> logger.info("Listing pods", extra={"tool": "list_pods", "cluster": "prod"})
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Python logging.LogRecord

        Returns:
            JSON string with structured log data
        """
        log_entry = {
            "timestamp": datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%f") + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def setup_logging(level: str = "INFO") -> None:
    """
    Configure structured JSON logging for the gateway.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Example:
        >>> setup_logging(level="INFO")
        >>> logging.info("Gateway started")
    """
    formatter = JSONFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    # httpx logs every request URL at INFO, including signed query strings
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.info("Structured JSON logging configured", extra={"log_level": level})
