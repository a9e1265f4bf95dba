#!/usr/bin/env python3
"""Structured logging for recordflow.

This module wraps the standard logging module with:
- Key-value context rendered after the message
- Thread-local context stacks (e.g. the rule currently executing)
- Console and rotating file handlers

Example:
    >>> logger = Logger(level=LogLevel.DEBUG)
    >>> logger.debug("Skipping unknown rule", rule="foo")
    >>> with logger.add_context(rule="sort_by"):
    ...     logger.info("Sorted records", size=12)
"""

import logging
import logging.handlers
import threading
from contextlib import contextmanager
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from recordflow.core.config import ConfigError
from recordflow.core.constants import ErrorCode

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class LogLevel(IntEnum):
    """Log levels matching Python's logging module."""

    DEBUG = logging.DEBUG  # 10
    INFO = logging.INFO  # 20
    WARNING = logging.WARNING  # 30
    ERROR = logging.ERROR  # 40
    CRITICAL = logging.CRITICAL  # 50


def _coerce_level(level: Union[LogLevel, int, str]) -> LogLevel:
    try:
        if isinstance(level, str):
            return LogLevel[level.upper()]
        return LogLevel(level)
    except (KeyError, ValueError):
        raise ConfigError(f"Unknown log level: {level!r}", ErrorCode.INVALID_INPUT)


class Logger:
    """Structured logger with context support.

    Context given as keyword arguments, or pushed with add_context(), is
    appended to the message as ``key=value`` pairs and passed to handlers
    as ``record.context``.
    """

    _context_stack = threading.local()

    def __init__(
        self,
        name: str = "recordflow",
        level: Union[LogLevel, str] = LogLevel.INFO,
        handlers: Optional[List[logging.Handler]] = None,
    ):
        """Initialize logger.

        Args:
            name: Logger name for identification
            level: Minimum log level to output
            handlers: Optional list of logging handlers
        """
        self.name = name
        self.logger = logging.getLogger(name)
        self.set_level(level)

        if handlers is None:
            handlers = [self._create_console_handler()]

        self.logger.handlers.clear()
        for handler in handlers:
            self.logger.addHandler(handler)

        self.logger.propagate = False

    def _create_console_handler(self) -> logging.StreamHandler:
        """Create default stderr handler."""
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DATE_FORMAT))
        return handler

    def create_file_handler(
        self,
        filename: Union[str, Path],
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
    ) -> logging.handlers.RotatingFileHandler:
        """Create rotating file handler.

        Args:
            filename: Path to log file
            max_bytes: Maximum size before rotation
            backup_count: Number of backup files to keep

        Returns:
            Configured rotating file handler
        """
        handler = logging.handlers.RotatingFileHandler(
            filename, maxBytes=max_bytes, backupCount=backup_count
        )
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DATE_FORMAT))
        return handler

    def add_handler(self, handler: logging.Handler) -> None:
        self.logger.addHandler(handler)

    def set_level(self, level: Union[LogLevel, str]) -> None:
        """Set the minimum log level.

        Args:
            level: New log level (LogLevel or name such as "debug")
        """
        self.logger.setLevel(_coerce_level(level))

    def _get_context(self) -> Dict[str, Any]:
        """Merge the thread-local context stack into one dictionary."""
        if not hasattr(self._context_stack, "stack"):
            self._context_stack.stack = [{}]

        context: Dict[str, Any] = {}
        for ctx in self._context_stack.stack:
            context.update(ctx)
        return context

    def _format_message(self, msg: str, context: Dict[str, Any]) -> str:
        if context:
            ctx_str = " ".join(f"{k}={v}" for k, v in context.items())
            return f"{msg} | {ctx_str}"
        return msg

    @contextmanager
    def add_context(self, **kwargs: Any) -> Iterator[None]:
        """Context manager to add temporary context.

        Example:
            >>> with logger.add_context(rule="include"):
            ...     logger.debug("Filtering records")
        """
        if not hasattr(self._context_stack, "stack"):
            self._context_stack.stack = [{}]

        self._context_stack.stack.append(kwargs)
        try:
            yield
        finally:
            self._context_stack.stack.pop()

    def _log(self, level: LogLevel, msg: str, context: Dict[str, Any]) -> None:
        if not self.logger.isEnabledFor(level):
            return
        combined = self._get_context()
        combined.update(context)
        self.logger.log(
            level, self._format_message(msg, combined), extra={"context": combined}
        )

    def debug(self, msg: str, **context: Any) -> None:
        self._log(LogLevel.DEBUG, msg, context)

    def info(self, msg: str, **context: Any) -> None:
        self._log(LogLevel.INFO, msg, context)

    def warning(self, msg: str, **context: Any) -> None:
        self._log(LogLevel.WARNING, msg, context)

    def error(self, msg: str, **context: Any) -> None:
        self._log(LogLevel.ERROR, msg, context)


# Global logger instance
_global_logger: Optional[Logger] = None


def get_logger(name: str = "recordflow") -> Logger:
    """Get or create a logger instance.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    global _global_logger
    if _global_logger is None or _global_logger.name != name:
        _global_logger = Logger(name=name)
    return _global_logger


def set_global_logger(logger: Optional[Logger]) -> None:
    """Set (or reset, with None) the global logger instance."""
    global _global_logger
    _global_logger = logger


def configure_logging(level: Union[LogLevel, str] = LogLevel.INFO, log_file: Optional[str] = None) -> Logger:
    """Build the global logger from configuration values.

    Args:
        level: Minimum log level
        log_file: Optional file to log to instead of stderr

    Returns:
        The configured global logger
    """
    logger = Logger(level=level)
    if log_file:
        logger.logger.handlers.clear()
        logger.add_handler(logger.create_file_handler(log_file))
    set_global_logger(logger)
    return logger
