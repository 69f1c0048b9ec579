# utils/logging.py
import logging
import os
from datetime import datetime
from typing import Dict, Any

LOGS_DIR = os.getenv("LOGS_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "true").lower() in ("1", "true", "yes")

DEFAULT_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(message)s'
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def configure_logger(name: str, level=LOG_LEVEL,
                     format_str: str = DEFAULT_FORMAT,
                     date_format: str = DEFAULT_DATE_FORMAT) -> logging.Logger:
    """
    Configure a logger with console and (optionally) daily file handlers.

    Args:
        name: Logger name
        level: Logging level (int or name)
        format_str: Log format string
        date_format: Date format string

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))

    if logger.handlers:
        logger.handlers.clear()

    formatter = logging.Formatter(format_str, date_format)

    if LOG_TO_FILE:
        os.makedirs(LOGS_DIR, exist_ok=True)
        file_path = os.path.join(LOGS_DIR, f"{name}_{datetime.now().strftime('%Y-%m-%d')}.log")
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


class ContextLogger:
    """Logger that appends key=value context to each message."""

    def __init__(self, name: str, level=LOG_LEVEL):
        self.logger = configure_logger(name, level)

    @staticmethod
    def _format(message: str, context: Dict[str, Any] = None) -> str:
        if not context:
            return message
        pairs = [f"{k}={v}" for k, v in context.items() if v is not None]
        if not pairs:
            return message
        return message + " | " + " | ".join(pairs)

    def log(self, level: int, message: str, context: Dict[str, Any] = None, **kwargs):
        """Log a message with context."""
        # 'extra' is accepted as an alias so call sites match stdlib loggers
        extra_context = kwargs.get('extra')
        if extra_context and isinstance(extra_context, dict) and context is None:
            context = extra_context

        self.logger.log(level, self._format(message, context))

    def debug(self, message: str, context: Dict[str, Any] = None, **kwargs):
        self.log(logging.DEBUG, message, context, **kwargs)

    def info(self, message: str, context: Dict[str, Any] = None, **kwargs):
        self.log(logging.INFO, message, context, **kwargs)

    def warning(self, message: str, context: Dict[str, Any] = None, **kwargs):
        self.log(logging.WARNING, message, context, **kwargs)

    def error(self, message: str, context: Dict[str, Any] = None, **kwargs):
        self.log(logging.ERROR, message, context, **kwargs)

    def exception(self, message: str, context: Dict[str, Any] = None, **kwargs):
        context = dict(context or {})
        extra_context = kwargs.get('extra')
        if extra_context and isinstance(extra_context, dict):
            context.update(extra_context)

        self.logger.exception(self._format(message, context))


def get_logger(name: str, level=LOG_LEVEL) -> ContextLogger:
    """Get a context logger."""
    return ContextLogger(name, level)
