"""dbfacade exception hierarchy.

This module defines the exception hierarchy raised by the database layer,
providing structured error handling with context and error codes for
callers that decide how to present a failure.

Classes:
    DbFacadeException: Base exception for all dbfacade operations
    ConfigurationError: Configuration related errors
    ValidationError: Data validation errors
    ConnectionError: Database connection errors
    DatabaseConnectionError: Connection establishment errors
    QueryError: Statement execution errors

Example:
    >>> try:
    ...     dbi.query("SELECT 1")
    ... except QueryError as e:
    ...     logger.error("Query failed", error_code=e.code, context=e.context)
"""

from typing import Any, Dict, Optional


class DbFacadeException(Exception):
    """Base exception for all dbfacade operations.

    Attributes:
        code: Unique error code for categorization
        context: Additional context information about the error
        cause: Original exception that caused this error (if any)

    Example:
        >>> raise DbFacadeException(
        ...     "Operation failed",
        ...     code="OPERATION_FAILED",
        ...     context={"database": "sakila"}
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Human-readable error description
            code: Unique error code for categorization (defaults to class name)
            context: Additional context information
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message: str = message
        self.code: str = code or self.__class__.__name__
        self.context: Dict[str, Any] = context or {}
        self.cause: Optional[Exception] = cause

    def __str__(self) -> str:
        """Return formatted error message with code."""
        return f"{self.code}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"context={self.context!r}, "
            f"cause={self.cause!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
        }


class ConfigurationError(DbFacadeException):
    """Configuration related errors.

    Raised when settings are invalid, missing, or cannot be loaded.
    """
    pass


class ValidationError(ConfigurationError):
    """Data validation errors.

    Raised when input fails validation rules, such as an unknown sort
    column or an out of range port.
    """
    pass


class ConnectionError(DbFacadeException):
    """Database connection related errors."""
    pass


class DatabaseConnectionError(ConnectionError):
    """Raised when unable to establish or use a connection to the server."""
    pass


class QueryError(DbFacadeException):
    """SQL statement execution errors.

    The context carries ``errno``, ``error`` and ``query`` when the
    driver reported them.
    """
    pass


class ErrorCodes:
    """Common error codes for dbfacade exceptions."""

    # Configuration errors
    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_VALIDATION_FAILED = "CONFIG_VALIDATION_FAILED"

    # Connection errors
    CONNECTION_REFUSED = "CONNECTION_REFUSED"
    CONNECTION_MISSING = "CONNECTION_MISSING"
    AUTH_FAILED = "AUTH_FAILED"

    # Query errors
    QUERY_EXECUTION_FAILED = "QUERY_EXECUTION_FAILED"
    INVALID_SORT_COLUMN = "INVALID_SORT_COLUMN"
