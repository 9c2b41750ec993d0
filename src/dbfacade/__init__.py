"""dbfacade - database abstraction facade for MySQL-compatible servers.

dbfacade gives an administration front end one entry point for talking to
the server: per-role connections, server version and vendor detection,
session caching of server facts and uniform table/database metadata.

Modules:
    core: Exceptions and shared helpers
    config: Settings models
    logging: Structured logging and the SQL debug log
    database: The facade, driver adapters and metadata records

Example:
    >>> from dbfacade.config import Settings
    >>> from dbfacade.database import DatabaseInterface, PyMySQLExtension
    >>>
    >>> settings = Settings.from_file("dbfacade.yaml")
    >>> dbi = DatabaseInterface(PyMySQLExtension(), settings)
    >>> dbi.connect()
    >>> dbi.get_tables_full("shop", sort_by="Data_length", sort_order="DESC")
"""

from . import config, core, database, logging

__version__ = "0.1.0"
__title__ = "dbfacade"
__description__ = "Database abstraction facade for MySQL-compatible servers"
__author__ = "dbfacade Team"
__license__ = "MIT"

__all__ = [
    "core",
    "config",
    "database",
    "logging",
    "__version__",
    "__title__",
    "__description__",
    "__author__",
    "__license__",
]
