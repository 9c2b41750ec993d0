"""dbfacade structured logging.

Classes:
    StructuredLogger: Main structured logging interface
    LoggerFactory: Logger creation and configuration
    QueryDebugLog: SQL debug log

Example:
    >>> from dbfacade.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Connected", server="localhost")
"""

from .factory import LoggerFactory, configure_logging, get_factory, get_logger, shutdown_logging
from .query_log import QueryDebugLog, QueryLogEntry
from .structured import StructuredLogger

__all__ = [
    "LoggerFactory",
    "configure_logging",
    "get_factory",
    "get_logger",
    "shutdown_logging",
    "QueryDebugLog",
    "QueryLogEntry",
    "StructuredLogger",
]
