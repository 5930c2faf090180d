"""
Centralized logging configuration for the ad agent.
Structured JSON log lines go to stderr (and optionally a rotating file) so the
chat transcript on stdout stays readable.
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from typing import Optional

PACKAGE_LOGGER = "onchain_ad_agent"


class StructuredFormatter(logging.Formatter):
    """
    Formatter that outputs one JSON object per log record.
    """

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Extra context passed via logger.info(..., extra={"context": {...}})
        if hasattr(record, "context"):
            log_entry["context"] = record.context

        return json.dumps(log_entry, default=str)


def setup_logging(log_level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        log_level: Logging level name. Defaults to LOG_LEVEL or WARNING.
        log_file: Optional rotating log file. Defaults to AD_AGENT_LOG_FILE.

    Returns:
        The configured package logger
    """
    log_level = log_level or os.getenv("LOG_LEVEL", "WARNING")
    log_file = log_file or os.getenv("AD_AGENT_LOG_FILE")

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, log_level.upper(), logging.WARNING))
    logger.propagate = False

    # Clear any existing handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(StructuredFormatter())
    logger.addHandler(console_handler)

    if log_file:
        try:
            log_dir = os.path.dirname(log_file)
            if log_dir and not os.path.exists(log_dir):
                os.makedirs(log_dir)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
            )
            file_handler.setFormatter(StructuredFormatter())
            logger.addHandler(file_handler)
        except OSError as e:
            logger.error(f"Failed to setup file logging: {e}")

    return logger
