"""Configuration models for dbfacade.

This module defines Pydantic models for the settings consumed by the
database layer. These models provide validation, type safety, and
serialization capabilities.

Classes:
    BaseConfig: Base configuration class
    ConnectionParams: Resolved parameters for one driver connection
    ServerConfig: Selected server configuration
    DebugConfig: Debug switches
    LoggingConfig: Logging configuration
    Settings: Top level settings

Example:
    >>> settings = Settings(
    ...     server=ServerConfig(
    ...         host="localhost",
    ...         user="pma",
    ...         password="secret",
    ...         disable_is=True,
    ...     ),
    ...     natural_order=False,
    ... )
    >>> settings.server.connection_params(ConnectionType.USER).user
    'pma'
"""

import os
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator, model_validator

from ..core.exceptions import ConfigurationError, ErrorCodes, ValidationError
from ..core.utils import ValidationUtils

if TYPE_CHECKING:
    from ..database.models import ConnectionType


_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


class BaseConfig(BaseModel):
    """Base configuration class with common functionality.

    Provides validation on assignment, environment variable resolution and
    serialization with secret masking.

    Example:
        >>> class MyConfig(BaseConfig):
        ...     name: str
        ...     value: int = 42
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        populate_by_name=True,
        validate_default=True,
    )

    @model_validator(mode="before")
    @classmethod
    def resolve_environment_variables(cls, values: Any) -> Any:
        """Resolve environment variables in configuration values.

        Supports ${VAR_NAME} and ${VAR_NAME:default_value} syntax.

        Args:
            values: Configuration values

        Returns:
            Values with environment variables resolved
        """
        if not isinstance(values, dict):
            return values

        def replace_env_var(match: "re.Match[str]") -> str:
            var_spec = match.group(1)
            if ":" in var_spec:
                var_name, default = var_spec.split(":", 1)
            else:
                var_name, default = var_spec, ""
            return os.getenv(var_name, default)

        def resolve_value(value: Any) -> Any:
            if isinstance(value, str):
                return _ENV_PATTERN.sub(replace_env_var, value)
            elif isinstance(value, dict):
                return {k: resolve_value(v) for k, v in value.items()}
            elif isinstance(value, list):
                return [resolve_value(item) for item in value]
            return value

        return {key: resolve_value(value) for key, value in values.items()}

    def to_dict(self, *, mask_secrets: bool = True) -> Dict[str, Any]:
        """Convert configuration to dictionary.

        Args:
            mask_secrets: Whether to mask secret values

        Returns:
            Dictionary representation of configuration
        """
        data = self.model_dump()

        def convert(value: Any) -> Any:
            if isinstance(value, dict):
                return {k: convert(v) for k, v in value.items()}
            elif isinstance(value, list):
                return [convert(item) for item in value]
            elif isinstance(value, SecretStr):
                return "***MASKED***" if mask_secrets else value.get_secret_value()
            return value

        return convert(data)


class ConnectionParams(BaseConfig):
    """Resolved parameters for one driver connection."""

    host: str = "localhost"
    port: int = 3306
    socket: Optional[str] = None
    user: str = ""
    password: SecretStr = SecretStr("")
    connect_timeout: int = 10
    charset: str = "utf8mb4"


class ServerConfig(BaseConfig):
    """Configuration of the selected database server.

    Attributes:
        host: Server host name
        port: Server port
        socket: Unix socket path, used instead of host/port when set
        user: Login user
        password: Login password
        control_user: Configuration storage user
        control_pass: Configuration storage password
        control_host: Optional host override for the control connection
        control_port: Optional port override for the control connection
        disable_is: Read metadata with SHOW commands instead of information_schema
        session_time_zone: Time zone applied after connecting ("" leaves it unset)
        only_db: LIKE patterns restricting the visible databases
        hide_db: Regular expression of databases to hide
        pmadb: Configuration storage database
        column_info: Column information table inside ``pmadb``
        connect_timeout: Connection timeout in seconds
    """

    host: str = Field("localhost", description="Server host")
    port: int = Field(3306, description="Server port")
    socket: Optional[str] = Field(None, description="Unix socket path")
    user: str = Field("root", description="Login user")
    password: SecretStr = Field(SecretStr(""), description="Login password")
    control_user: str = Field("", description="Configuration storage user")
    control_pass: SecretStr = Field(SecretStr(""), description="Configuration storage password")
    control_host: str = Field("", description="Control connection host override")
    control_port: Optional[int] = Field(None, description="Control connection port override")
    disable_is: bool = Field(False, description="Disable information_schema usage")
    session_time_zone: str = Field("", description="Session time zone")
    only_db: List[str] = Field(default_factory=list, description="Visible database patterns")
    hide_db: str = Field("", description="Hidden database regex")
    pmadb: str = Field("", description="Configuration storage database")
    column_info: str = Field("pma__column_info", description="Column info table")
    connect_timeout: int = Field(10, description="Connection timeout in seconds")

    @field_validator("port", "control_port")
    @classmethod
    def validate_port(cls, v: Optional[int]) -> Optional[int]:
        """Ensure ports are within the TCP range.

        Raises:
            ValidationError: If the port is out of range
        """
        if v is not None and not ValidationUtils.validate_port(v):
            raise ValidationError(
                f"Invalid port: {v}", code=ErrorCodes.CONFIG_VALIDATION_FAILED
            )
        return v

    @field_validator("only_db", mode="before")
    @classmethod
    def split_only_db(cls, v: Any) -> Any:
        """Accept a single pattern as well as a list of patterns."""
        if isinstance(v, str):
            return [v] if v else []
        return v

    @field_validator("hide_db")
    @classmethod
    def validate_hide_db(cls, v: str) -> str:
        """Ensure ``hide_db`` compiles as a regular expression."""
        if v:
            try:
                re.compile(v)
            except re.error as e:
                raise ValidationError(
                    f"Invalid hide_db expression: {e}",
                    code=ErrorCodes.CONFIG_VALIDATION_FAILED,
                ) from e
        return v

    def connection_params(self, role: "ConnectionType") -> ConnectionParams:
        """Return the connection parameters for a connection role.

        The control user role authenticates with the control credentials
        and honours the control host/port overrides; every other role uses
        the login credentials.
        """
        from ..database.models import ConnectionType

        params = ConnectionParams(
            host=self.host,
            port=self.port,
            socket=self.socket,
            user=self.user,
            password=self.password,
            connect_timeout=self.connect_timeout,
        )
        if role is ConnectionType.CONTROL_USER:
            params.user = self.control_user
            params.password = self.control_pass
            if self.control_host:
                params.host = self.control_host
                params.socket = None
            if self.control_port is not None:
                params.port = self.control_port
        return params

    @property
    def has_control_user(self) -> bool:
        return bool(self.control_user)


class DebugConfig(BaseConfig):
    """Debug switches.

    Attributes:
        sql: Record every statement with its timing in the SQL debug log
    """

    sql: bool = Field(False, description="Enable SQL debug log")


class LoggingConfig(BaseConfig):
    """Logging configuration.

    Attributes:
        level: Log level
        format: Log format (json, text)
        file_path: Log file path
        max_file_size: Maximum log file size in bytes
        backup_count: Number of backup files to keep
        console_output: Enable console output
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Logging level"
    )
    format: Literal["json", "text"] = Field("json", description="Log format")
    file_path: Optional[Path] = Field(None, description="Log file path")
    max_file_size: int = Field(10485760, gt=0, description="Max file size in bytes (10MB)")
    backup_count: int = Field(5, ge=0, description="Number of backup files")
    console_output: bool = Field(True, description="Enable console output")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class Settings(BaseConfig):
    """Top level settings consumed by the database facade.

    Attributes:
        server: Selected server configuration
        natural_order: Sort names naturally (``t9`` before ``t10``)
        max_db_list: Page size used when database listing asks for the default limit
        max_table_list: Page size used when table listing asks for the default limit
        mysql_locale: Value for ``lc_messages`` after connecting
        debug: Debug switches
        logging: Logging configuration
    """

    server: ServerConfig = Field(default_factory=ServerConfig, description="Server config")
    natural_order: bool = Field(True, description="Natural sort order")
    max_db_list: int = Field(100, gt=0, description="Databases per page")
    max_table_list: int = Field(250, gt=0, description="Tables per page")
    mysql_locale: Optional[str] = Field(None, description="lc_messages value")
    debug: DebugConfig = Field(default_factory=DebugConfig, description="Debug config")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging config")

    @field_validator("mysql_locale")
    @classmethod
    def validate_locale(cls, v: Optional[str]) -> Optional[str]:
        """Locales are interpolated into SQL, so only identifiers are accepted."""
        if v is not None and v != "" and not ValidationUtils.validate_identifier(v):
            raise ValidationError(
                f"Invalid MySQL locale: {v}", code=ErrorCodes.CONFIG_VALIDATION_FAILED
            )
        return v or None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        return cls(**data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Settings":
        """Load settings from a YAML file.

        Args:
            path: Path to the YAML file

        Returns:
            Parsed settings

        Raises:
            ConfigurationError: If the file is missing or is not a mapping
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise ConfigurationError(
                f"Configuration file not found: {file_path}",
                code=ErrorCodes.CONFIG_NOT_FOUND,
                context={"path": str(file_path)},
            )

        with file_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping: {file_path}",
                code=ErrorCodes.CONFIG_INVALID,
                context={"path": str(file_path)},
            )

        return cls.from_dict(data)
