"""dbfacade core infrastructure.

Exception hierarchy and shared helpers used by the configuration, logging
and database packages.
"""

from .exceptions import (
    ConfigurationError,
    ConnectionError,
    DatabaseConnectionError,
    DbFacadeException,
    ErrorCodes,
    QueryError,
    ValidationError,
)
from .utils import StringUtils, ValidationUtils, natural_sort_key, to_number

__all__ = [
    "ConfigurationError",
    "ConnectionError",
    "DatabaseConnectionError",
    "DbFacadeException",
    "ErrorCodes",
    "QueryError",
    "ValidationError",
    "StringUtils",
    "ValidationUtils",
    "natural_sort_key",
    "to_number",
]
