"""Logger factory and configuration for dbfacade.

This module provides centralized logger creation and configuration of the
standard library and structlog pipelines.

Classes:
    LoggerFactory: Logger factory and configuration manager

Functions:
    get_logger: Convenience function for getting loggers
    configure_logging: Configure logging system globally

Example:
    >>> from dbfacade.logging import get_logger, configure_logging
    >>> configure_logging(level="DEBUG", format="text")
    >>> logger = get_logger(__name__)
    >>> logger.info("Connected", server="localhost")
"""

import logging
import logging.handlers
import sys
from typing import Any, Dict, Optional

import structlog

from ..config.models import LoggingConfig
from ..core.exceptions import ValidationError
from .structured import StructuredLogger


class LoggerFactory:
    """Factory for creating and configuring dbfacade loggers.

    Attributes:
        config: Logging configuration
        initialized: Whether the logging pipelines have been configured

    Example:
        >>> factory = LoggerFactory()
        >>> factory.configure_from_config(LoggingConfig(level="DEBUG"))
        >>> logger = factory.get_logger("dbfacade.database")
    """

    def __init__(self, config: Optional[LoggingConfig] = None) -> None:
        self.config = config or LoggingConfig()
        self.initialized = False
        self._loggers: Dict[str, StructuredLogger] = {}
        self._handlers: list = []

    def configure_from_config(self, config: LoggingConfig) -> None:
        """Configure the logging system from a ``LoggingConfig``."""
        self.config = config
        self._configure_logging_system()

    def configure_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """Configure the logging system from a plain mapping.

        Raises:
            ValidationError: If the mapping is not a valid logging configuration
        """
        try:
            config = LoggingConfig(**config_dict)
        except ValueError as e:
            raise ValidationError(f"Invalid logging configuration: {e}", cause=e) from e
        self.configure_from_config(config)

    def _configure_logging_system(self) -> None:
        self._configure_stdlib_logging()
        self._configure_structlog()
        self.initialized = True

    def _renderer(self) -> Any:
        if self.config.format == "json":
            return structlog.processors.JSONRenderer()
        return structlog.dev.ConsoleRenderer(colors=False)

    def _configure_stdlib_logging(self) -> None:
        """Attach console and rotating file handlers to the root logger."""
        root_logger = logging.getLogger()
        level = getattr(logging, self.config.level, logging.INFO)
        root_logger.setLevel(level)

        for handler in self._handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self._handlers = []

        formatter = structlog.stdlib.ProcessorFormatter(
            processor=self._renderer(),
            foreign_pre_chain=[
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
            ],
        )

        if self.config.console_output:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(level)
            console_handler.setFormatter(formatter)
            self._handlers.append(console_handler)

        if self.config.file_path is not None:
            self.config.file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                filename=str(self.config.file_path),
                maxBytes=self.config.max_file_size,
                backupCount=self.config.backup_count,
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            self._handlers.append(file_handler)

        for handler in self._handlers:
            root_logger.addHandler(handler)

    def _configure_structlog(self) -> None:
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.UnicodeDecoder(),
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            context_class=dict,
            cache_logger_on_first_use=True,
        )

    def get_logger(self, name: str, *, level: Optional[str] = None) -> StructuredLogger:
        """Get or create a structured logger.

        The pipelines are configured on first use unless structlog was
        already configured by the host application.

        Args:
            name: Logger name (typically module name)
            level: Override the level of this logger

        Returns:
            StructuredLogger instance
        """
        if not self.initialized and not structlog.is_configured():
            self._configure_logging_system()

        cache_key = f"{name}_{level}"
        if cache_key not in self._loggers:
            self._loggers[cache_key] = StructuredLogger(name, level=level)
        return self._loggers[cache_key]

    def shutdown(self) -> None:
        """Detach handlers and forget cached loggers."""
        root_logger = logging.getLogger()
        for handler in self._handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self._handlers = []
        self._loggers.clear()
        self.initialized = False

    def __repr__(self) -> str:
        return (
            f"LoggerFactory("
            f"level={self.config.level!r}, "
            f"format={self.config.format!r}, "
            f"initialized={self.initialized})"
        )


# Global logger factory instance
_global_factory = LoggerFactory()


def configure_logging(
    *,
    level: str = "INFO",
    format: str = "json",
    console_output: bool = True,
    file_path: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """Configure dbfacade logging globally.

    Example:
        >>> configure_logging(level="DEBUG", format="text")
    """
    _global_factory.configure_from_dict(
        {
            "level": level,
            "format": format,
            "console_output": console_output,
            "file_path": file_path,
            **kwargs,
        }
    )


def get_logger(name: str, *, level: Optional[str] = None) -> StructuredLogger:
    """Get or create a structured logger using the global factory.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Facade created")
    """
    return _global_factory.get_logger(name, level=level)


def get_factory() -> LoggerFactory:
    return _global_factory


def shutdown_logging() -> None:
    _global_factory.shutdown()
