"""Logging utilities and configuration."""

import logging
import logging.handlers
import sys
from typing import Any

from tracker_clients.config.settings import LoggingConfig


def setup_logging(config: LoggingConfig) -> None:
    """Set up logging configuration for the entire system."""

    # Create root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level.upper()))

    # Clear any existing handlers
    root_logger.handlers.clear()

    formatter = logging.Formatter(config.format)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler (if specified)
    if config.file_path:
        file_handler = logging.handlers.RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Set specific logger levels for external libraries
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name."""
    return logging.getLogger(name)


class StructuredLogger:
    """Logger emitting ``EVENT=NAME key=value`` lines."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def log_event(self, level: str, event: str, /, **kwargs: Any) -> None:
        """Log a structured event with additional context."""
        message = f"EVENT={event}"
        if kwargs:
            context = " ".join([f"{k}={v}" for k, v in kwargs.items()])
            message = f"{message} {context}"

        log_level = getattr(logging, level.upper())
        self.logger.log(log_level, message)

    def log_field_update(self, reference: str, field_name: str, action: str, value: str) -> None:
        """Log a custom field write to Aha."""
        self.log_event("INFO", "CUSTOM_FIELD_UPDATED",
                       feature=reference, field=repr(field_name), action=action, value=repr(value))

    def log_issue_data_update(self, issue_url: str, label: str, action: str, **kwargs: Any) -> None:
        """Log a change to the data block of a GitHub issue body."""
        self.log_event("INFO", "ISSUE_DATA_UPDATED",
                       issue=issue_url, label=repr(label), action=action, **kwargs)

    def log_webhook_received(self, source: str, event_key: str, **kwargs: Any) -> None:
        """Log an accepted webhook delivery."""
        self.log_event("INFO", "WEBHOOK_RECEIVED", source=source, event_key=event_key, **kwargs)

    def log_error_with_context(self, error: str, **kwargs: Any) -> None:
        """Log error with additional context."""
        self.log_event("ERROR", "SYSTEM_ERROR", error=error, **kwargs)
