"""
dbfacade database layer

This module provides the database facade and the pieces it is built from.

Key Features:
- One driver connection per connection role (user, control user, auxiliary)
- Server version parsing and vendor detection
- Session-scoped caching of server facts
- Table and database metadata from information_schema or SHOW commands

Supported Platforms:
- MySQL/MariaDB/Percona (PyMySQL)
"""

from .base import DbiExtension, Statement
from .connectors import PyMySQLExtension, PyMySQLStatement
from .interface import (
    DatabaseInterface,
    get_instance,
    reset_instance,
    resolve_collation,
    set_instance,
)
from .models import (
    BufferedResult,
    ColumnInfo,
    ConnectionType,
    DatabaseStats,
    FieldMetadata,
    TableStatus,
)
from .session_cache import SessionCache
from .system_database import SystemDatabase
from .utilities import format_error, is_system_schema
from .version import ServerVersion, detect_vendor, parse_version, version_to_int

__all__ = [
    # Facade
    "DatabaseInterface",
    "get_instance",
    "set_instance",
    "reset_instance",
    "resolve_collation",
    "SystemDatabase",
    # Driver adapters
    "DbiExtension",
    "Statement",
    "PyMySQLExtension",
    "PyMySQLStatement",
    # Models
    "BufferedResult",
    "ColumnInfo",
    "ConnectionType",
    "DatabaseStats",
    "FieldMetadata",
    "TableStatus",
    "ServerVersion",
    # Helpers
    "SessionCache",
    "format_error",
    "is_system_schema",
    "detect_vendor",
    "parse_version",
    "version_to_int",
]
