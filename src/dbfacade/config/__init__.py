"""dbfacade configuration management.

This package provides type-safe configuration models for the database
facade, its connections and its logging.

Classes:
    BaseConfig: Base configuration class
    ConnectionParams: Parameters for one driver connection
    ServerConfig: Selected server configuration
    DebugConfig: Debug switches
    LoggingConfig: Logging configuration
    Settings: Top level settings

Example:
    >>> from dbfacade.config import Settings
    >>> settings = Settings.from_file("dbfacade.yaml")
    >>> settings.server.disable_is
    False
"""

from .models import (
    BaseConfig,
    ConnectionParams,
    DebugConfig,
    LoggingConfig,
    ServerConfig,
    Settings,
)

__all__ = [
    "BaseConfig",
    "ConnectionParams",
    "DebugConfig",
    "LoggingConfig",
    "ServerConfig",
    "Settings",
]
