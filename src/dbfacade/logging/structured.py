"""Structured logging implementation for dbfacade.

This module provides structured logging with bound context so that every
message emitted by a facade carries the server and connection it concerns.

Classes:
    StructuredLogger: Main structured logging interface

Example:
    >>> logger = StructuredLogger("dbfacade.database")
    >>> with logger.context(server="db1", role="user"):
    ...     logger.info("Connected", version=80032)
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

import structlog

from ..core.exceptions import DbFacadeException
from ..core.utils import ValidationUtils


class StructuredLogger:
    """Structured logger with context management.

    Attributes:
        name: Logger name

    Example:
        >>> logger = StructuredLogger("dbfacade.database.interface")
        >>> db_logger = logger.bind(server="localhost")
        >>> db_logger.warning("Version query returned no row")
    """

    def __init__(
        self,
        name: str,
        *,
        level: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize structured logger.

        Args:
            name: Logger name (typically module name)
            level: Initial log level, inherited from the root logger when None
            context: Context included in every message
        """
        self.name = name
        self._logger = structlog.get_logger(name)
        self._context: Dict[str, Any] = dict(context or {})
        self._stdlib_logger = logging.getLogger(name)
        if level is not None:
            self.set_level(level)

    @contextmanager
    def context(self, **context_data: Any) -> Generator[None, None, None]:
        """Context manager for adding temporary context data.

        Example:
            >>> with logger.context(query="SELECT 1"):
            ...     logger.debug("Running query")
        """
        old_context = dict(self._context)
        try:
            self._context.update(context_data)
            yield
        finally:
            self._context = old_context

    def bind(self, **context_data: Any) -> "StructuredLogger":
        """Create new logger instance with bound context.

        Returns:
            New logger instance with bound context
        """
        merged = dict(self._context)
        merged.update(context_data)
        return StructuredLogger(self.name, context=merged)

    def set_level(self, level: str) -> None:
        """Set logging level.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        if not ValidationUtils.validate_identifier(level):
            raise DbFacadeException(f"Invalid log level: {level}", code="INVALID_LOG_LEVEL")

        log_level = getattr(logging, level.upper(), None)
        if not isinstance(log_level, int):
            raise DbFacadeException(f"Unknown log level: {level}", code="UNKNOWN_LOG_LEVEL")

        self._stdlib_logger.setLevel(log_level)

    def get_level(self) -> str:
        return logging.getLevelName(self._stdlib_logger.getEffectiveLevel())

    def get_context(self) -> Dict[str, Any]:
        return dict(self._context)

    def _event(self, kwargs: Dict[str, Any]) -> Dict[str, Any]:
        event_dict = dict(self._context)
        event_dict.update(kwargs)
        return event_dict

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(message, **self._event(kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(message, **self._event(kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(message, **self._event(kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(message, **self._event(kwargs))

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log an error with the active exception's traceback."""
        self._logger.error(message, exc_info=True, **self._event(kwargs))

    def __repr__(self) -> str:
        return f"StructuredLogger(name={self.name!r}, context={self._context!r})"
