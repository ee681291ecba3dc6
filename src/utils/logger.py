"""Logging configuration and utilities."""

import logging
import logging.handlers
import os
from pathlib import Path
from config.settings import settings

_console_suppressed = False

class EndpointContextFilter(logging.Filter):
    """Filter to add backend endpoint context to log records."""

    def __init__(self):
        super().__init__()
        self.endpoint = None

    def set_endpoint_context(self, endpoint: str):
        """Set the endpoint context for this filter."""
        self.endpoint = endpoint

    def filter(self, record):
        """Add endpoint context to the log record."""
        record.endpoint = self.endpoint or 'unknown'
        return True

def get_logger(name: str, endpoint: str = None) -> logging.Logger:
    """Get configured logger instance with optional endpoint context."""
    logger = logging.getLogger(name)

    if not logger.handlers:
        # Configure logger
        level = getattr(logging, settings.get('logging.level', 'INFO').upper())
        logger.setLevel(level)

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - [%(endpoint)s] - %(levelname)s - %(message)s'
        )

        # Console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)

        console_filter = EndpointContextFilter()
        if endpoint:
            console_filter.set_endpoint_context(endpoint)
        console_handler.addFilter(console_filter)
        logger.addHandler(console_handler)

        # File handler
        log_file = settings.get('logging.file', 'logs/bandix_dashboard.log')
        log_dir = os.path.dirname(log_file)
        if log_dir:
            Path(log_dir).mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=settings.get('logging.max_bytes', 10485760),
            backupCount=settings.get('logging.backup_count', 5)
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)

        file_filter = EndpointContextFilter()
        if endpoint:
            file_filter.set_endpoint_context(endpoint)
        file_handler.addFilter(file_filter)
        logger.addHandler(file_handler)

        if _console_suppressed:
            _remove_console_handlers(logger)

    # Update endpoint context for existing handlers if provided
    if endpoint:
        update_logger_endpoint_context(logger, endpoint)

    return logger

def update_logger_endpoint_context(logger: logging.Logger, endpoint: str):
    """Update the endpoint context for an existing logger."""
    for handler in logger.handlers:
        for filter_obj in handler.filters:
            if isinstance(filter_obj, EndpointContextFilter):
                filter_obj.set_endpoint_context(endpoint)
                break

def suppress_console_logging():
    """Detach console handlers while a full-screen UI owns the terminal.

    Applies to existing loggers and to loggers configured afterwards; file
    logging is unaffected.
    """
    global _console_suppressed
    _console_suppressed = True
    for logger_obj in list(logging.Logger.manager.loggerDict.values()):
        if isinstance(logger_obj, logging.Logger):
            _remove_console_handlers(logger_obj)

def _remove_console_handlers(logger: logging.Logger):
    # RotatingFileHandler subclasses StreamHandler, so match the exact type
    for handler in list(logger.handlers):
        if type(handler) is logging.StreamHandler:
            logger.removeHandler(handler)
