"""
Logging configuration - stdlib logging set up through dictConfig.

Two output formats:
- json: one JSON object per line (timestamp, level, target, function, message)
- text: human readable single line for local development
"""

import json
import logging
import logging.config
from datetime import datetime, timezone

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Loggers that are noisy at INFO and only useful when debugging
QUIET_LOGGERS = ["psycopg.pool", "uvicorn.access"]


class JsonFormatter(logging.Formatter):
    """Render a log record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        output = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "target": record.name,
            "function": record.funcName,
            "message": record.getMessage(),
        }
        if record.exc_info:
            output["exception"] = self.formatException(record.exc_info)
        return json.dumps(output)


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """
    Configure root logging for the process.

    Args:
        level: Root log level name (DEBUG, INFO, ...)
        fmt: "json" for structured output, anything else for plain text
    """
    level = level.upper()
    formatter = {"()": JsonFormatter} if fmt == "json" else {"format": TEXT_FORMAT}

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": formatter},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {
            name: {"level": "WARNING" if level != "DEBUG" else "DEBUG"} for name in QUIET_LOGGERS
        },
    }

    logging.config.dictConfig(logging_config)
    logging.getLogger(__name__).debug(f"Logging configured: level={level}, format={fmt}")
