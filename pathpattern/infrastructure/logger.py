#!/usr/bin/env python3
"""Structured logging for pathpattern.

This module wraps the standard logging module with:
- Log levels mirroring logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)
- Structured key-value context appended to messages
- Thread-local context stacks
- Console and rotating file handlers

Example:
    >>> logger = Logger("pathpattern.cli", level=LogLevel.INFO)
    >>> logger.info("Scanning", root="/srv/data")
    >>> with logger.add_context(pattern="**/*.c"):
    ...     logger.debug("Testing path", path="src/main.c")
"""

import logging
import logging.handlers
import threading
from contextlib import contextmanager
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


class LogLevel(IntEnum):
    """Log levels matching Python's logging module."""

    DEBUG = logging.DEBUG  # 10
    INFO = logging.INFO  # 20
    WARNING = logging.WARNING  # 30
    ERROR = logging.ERROR  # 40
    CRITICAL = logging.CRITICAL  # 50


def _to_level(level: Union[LogLevel, int, str]) -> LogLevel:
    if isinstance(level, str):
        return LogLevel[level.upper()]
    return LogLevel(level)


class Logger:
    """Structured logger with context support.

    Messages are emitted as ``message | key=value ...``; the merged
    context is also attached to each record as ``record.context``.
    """

    # Thread-local storage for context
    _context_stack = threading.local()

    def __init__(
        self,
        name: str = "pathpattern",
        level: Union[LogLevel, int, str] = LogLevel.INFO,
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
            handlers = [self.create_console_handler()]

        self.logger.handlers.clear()
        for handler in handlers:
            self.logger.addHandler(handler)

        # Keep library output away from the root logger
        self.logger.propagate = False

    def create_console_handler(self) -> logging.StreamHandler:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT))
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
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT))
        return handler

    def add_handler(self, handler: logging.Handler) -> None:
        """Add an output handler."""
        self.logger.addHandler(handler)

    def remove_handler(self, handler: logging.Handler) -> None:
        """Remove an output handler."""
        self.logger.removeHandler(handler)

    def set_level(self, level: Union[LogLevel, int, str]) -> None:
        """Set the minimum log level.

        Args:
            level: New log level (LogLevel, int or name)
        """
        self.logger.setLevel(_to_level(level))

    def get_level(self) -> LogLevel:
        """Return current log level."""
        return LogLevel(self.logger.level)

    def is_enabled_for(self, level: Union[LogLevel, int, str]) -> bool:
        """Check if logger would output at level."""
        return self.logger.isEnabledFor(_to_level(level))

    def _get_context(self) -> Dict[str, Any]:
        if not hasattr(self._context_stack, "stack"):
            self._context_stack.stack = [{}]

        context: Dict[str, Any] = {}
        for ctx in self._context_stack.stack:
            context.update(ctx)
        return context

    @staticmethod
    def _format_message(msg: str, context: Dict[str, Any]) -> str:
        if context:
            ctx_str = " ".join(f"{k}={v}" for k, v in context.items())
            return f"{msg} | {ctx_str}"
        return msg

    @contextmanager
    def add_context(self, **kwargs: Any) -> Iterator[None]:
        """Context manager adding temporary context to every message.

        Args:
            **kwargs: Key-value pairs to add to context

        Example:
            >>> with logger.add_context(root="/srv"):
            ...     logger.info("Scanning")
        """
        if not hasattr(self._context_stack, "stack"):
            self._context_stack.stack = [{}]

        self._context_stack.stack.append(kwargs)
        try:
            yield
        finally:
            self._context_stack.stack.pop()

    def _log(self, level: int, msg: str, context: Dict[str, Any], **kwargs: Any) -> None:
        combined = self._get_context()
        combined.update(context)
        self.logger.log(
            level, self._format_message(msg, combined), extra={"context": combined}, **kwargs
        )

    def debug(self, msg: str, **context: Any) -> None:
        """Log debug message with context."""
        if self.logger.isEnabledFor(logging.DEBUG):
            self._log(logging.DEBUG, msg, context)

    def info(self, msg: str, **context: Any) -> None:
        """Log info message with context."""
        if self.logger.isEnabledFor(logging.INFO):
            self._log(logging.INFO, msg, context)

    def warning(self, msg: str, **context: Any) -> None:
        """Log warning message with context."""
        if self.logger.isEnabledFor(logging.WARNING):
            self._log(logging.WARNING, msg, context)

    def error(self, msg: str, **context: Any) -> None:
        """Log error message with context."""
        if self.logger.isEnabledFor(logging.ERROR):
            self._log(logging.ERROR, msg, context)

    def exception(self, msg: str, exc: BaseException, **context: Any) -> None:
        """Log exception with traceback.

        Args:
            msg: Log message
            exc: Exception to log
            **context: Additional context key-value pairs
        """
        context["exception_type"] = type(exc).__name__
        context["exception_message"] = str(exc)
        self._log(logging.ERROR, msg, context, exc_info=exc)


# Logger instances by name
_loggers: Dict[str, Logger] = {}
_loggers_lock = threading.Lock()


def get_logger(name: str = "pathpattern") -> Logger:
    """Get or create the logger for name.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    with _loggers_lock:
        logger = _loggers.get(name)
        if logger is None:
            logger = Logger(name=name, level=LogLevel.WARNING)
            _loggers[name] = logger
        return logger


def set_global_logger(logger: Logger) -> None:
    """Register logger as the instance returned for its name.

    Args:
        logger: Logger to register
    """
    with _loggers_lock:
        _loggers[logger.name] = logger


def configure_loggers(
    level: Union[LogLevel, int, str], handlers: List[logging.Handler]
) -> None:
    """Apply level and handlers to every registered logger.

    Library modules hold their loggers from import time, so they are
    reconfigured in place.

    Args:
        level: Minimum log level to output
        handlers: Handlers replacing each logger's current ones
    """
    with _loggers_lock:
        loggers = list(_loggers.values())

    for logger in loggers:
        logger.set_level(level)
        logger.logger.handlers.clear()
        for handler in handlers:
            logger.add_handler(handler)
