# src/dbfacade/database/interface.py
"""Database interface facade.

``DatabaseInterface`` is the single entry point for talking to the server.
It owns one driver connection per connection role, remembers facts about
the server (version, vendor, case folding, current user) and reads table
and database metadata from either information_schema or the legacy SHOW
commands, normalizing both into the same records.
"""

import re
from functools import cmp_to_key
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from dbfacade.config.models import ServerConfig, Settings
from dbfacade.core.exceptions import (
    DatabaseConnectionError,
    ErrorCodes,
    QueryError,
    ValidationError,
)
from dbfacade.core.utils import StringUtils, natural_sort_key, require_sort_order, to_number
from dbfacade.logging import get_logger
from dbfacade.logging.query_log import QueryDebugLog

from .base import DbiExtension, Statement
from .models import (
    DATABASE_SORT_COLUMNS,
    TABLE_SORT_COLUMNS,
    BufferedResult,
    ColumnInfo,
    ConnectionType,
    DatabaseStats,
    FieldMetadata,
    TableStatus,
)
from .session_cache import SessionCache
from .system_database import SystemDatabase
from .utilities import backquote, database_comparison, format_error, usort_comparison
from .version import MINIMUM_VERSION, ServerVersion

# Assumed until the server reports its version
DEFAULT_VERSION = ServerVersion(version_int=55000, version_string="5.50.0")

# Last version without utf8mb4 support
UTF8MB4_UNSUPPORTED_UNTIL = 50503

# (highest version affected, collation prefix, replacement prefix)
COLLATION_SUBSTITUTIONS: Tuple[Tuple[int, str, str], ...] = (
    (UTF8MB4_UNSUPPORTED_UNTIL, "utf8mb4_", "utf8_"),
)

RDS_BASEDIR_MARKER = "/rdsdbbin/"

_VIEW_TYPES = ("VIEW", "SYSTEM VIEW")

TableFilter = Union[str, Sequence[str]]


def resolve_collation(collation: str, version_int: int) -> str:
    """Return the collation name the server at ``version_int`` understands.

    Example:
        >>> resolve_collation("utf8mb4_bin", 50503)
        'utf8_bin'
        >>> resolve_collation("utf8mb4_bin", 50504)
        'utf8mb4_bin'
    """
    for highest_version, prefix, replacement in COLLATION_SUBSTITUTIONS:
        if version_int <= highest_version and collation.startswith(prefix):
            return replacement + collation[len(prefix):]
    return collation


def default_charset(version_int: int) -> Tuple[str, str]:
    """Return the ``(charset, collation)`` pair used for ``SET NAMES``."""
    if version_int > UTF8MB4_UNSUPPORTED_UNTIL:
        return "utf8mb4", "utf8mb4_general_ci"
    return "utf8", "utf8_general_ci"


class DatabaseInterface:
    """Facade over a driver adapter with per-role connections.

    Args:
        extension: Driver adapter executing the statements
        settings: Application settings; defaults are used when omitted
        session_cache: Cache of the login session; a private one is created
            when omitted

    Example:
        >>> dbi = DatabaseInterface(PyMySQLExtension(), Settings())
        >>> dbi.connect(ConnectionType.USER)
        >>> dbi.get_version()
        100122
    """

    def __init__(
        self,
        extension: DbiExtension,
        settings: Optional[Settings] = None,
        session_cache: Optional[SessionCache] = None,
    ) -> None:
        self.extension = extension
        self.settings = settings or Settings()
        server = self.settings.server
        self.session_cache = session_cache or SessionCache(
            server=f"{server.host}:{server.port}", user=server.user
        )
        self.logger = get_logger("dbfacade.database")
        self.query_log = QueryDebugLog(enabled=self.settings.debug.sql, logger=self.logger)

        # Database the current request works on; restored after temporary switches
        self.current_database = ""
        self.charset_connection = ""
        self.collation_connection = ""

        self._links: Dict[ConnectionType, Any] = {}
        self._version = DEFAULT_VERSION
        self._current_user_and_host: Optional[Tuple[str, str]] = None
        self._lower_case_table_names: Optional[int] = None
        self._database_list: Optional[List[str]] = None
        self._table_cache: Dict[str, Dict[str, TableStatus]] = {}
        self._cached_affected_rows = 0
        self._system_database: Optional[SystemDatabase] = None

    # Connections

    def connect(
        self,
        role: ConnectionType = ConnectionType.USER,
        server: Optional[ServerConfig] = None,
    ) -> Optional[Any]:
        """Open the driver connection of ``role``.

        Returns:
            The driver link, or None when a control user or auxiliary
            connection could not be established

        Raises:
            DatabaseConnectionError: If the user connection fails
        """
        server = server or self.settings.server
        if role is ConnectionType.CONTROL_USER and not server.has_control_user:
            self.logger.debug("No control user configured")
            return None

        params = server.connection_params(role)
        link = self.extension.connect(params)

        if link is None:
            errno = self.extension.get_error_number(None)
            message = self.extension.get_error(None)
            context = {
                "errno": errno,
                "error": message,
                "host": params.host,
                "port": params.port,
                "role": role.name,
            }
            if role is ConnectionType.USER:
                raise DatabaseConnectionError(
                    format_error(errno, message),
                    code=ErrorCodes.AUTH_FAILED if errno in (1045, 1698) else ErrorCodes.CONNECTION_REFUSED,
                    context=context,
                )
            self.logger.warning("Connection failed", **context)
            return None

        self._links[role] = link
        self.logger.info("Connected", role=role.name, host=params.host, port=params.port)

        if role is ConnectionType.USER:
            self.post_connect(server)
        return link

    def set_link(self, role: ConnectionType, link: Any) -> None:
        """Use an already established driver link for ``role``."""
        self._links[role] = link

    def get_link(self, role: ConnectionType = ConnectionType.USER) -> Optional[Any]:
        return self._links.get(role)

    def is_connected(self, role: ConnectionType = ConnectionType.USER) -> bool:
        return role in self._links

    def close(self, role: ConnectionType = ConnectionType.USER) -> None:
        link = self._links.pop(role, None)
        if link is not None:
            self.extension.close(link)
            self.logger.debug("Connection closed", role=role.name)

    def close_all(self) -> None:
        for role in list(self._links):
            self.close(role)

    def post_connect(self, server: Optional[ServerConfig] = None) -> None:
        """Initialize a fresh user connection.

        Reads the server version, sets the connection character set, the
        message locale and the session time zone. A server refusing the
        version query leaves the version unknown.
        """
        server = server or self.settings.server

        version_row = self.fetch_single_row("SELECT @@version, @@version_comment")
        if version_row is not None:
            self.set_version(version_row)
        else:
            self.logger.warning("Server version is unavailable")

        charset, collation = default_charset(self.get_version())
        result = self.try_query(
            f"SET NAMES '{charset}' COLLATE '{collation}';", cache_affected_rows=False
        )
        if result is False:
            self.logger.warning("Failed to set connection character set", charset=charset)
        else:
            self.charset_connection = charset
            self.collation_connection = collation

        locale = self.settings.mysql_locale
        if locale and self.get_version() >= MINIMUM_VERSION:
            self.try_query(f"SET lc_messages = '{locale}';", cache_affected_rows=False)

        if server.session_time_zone:
            result = self.try_query(
                "SET `time_zone` = " + self.quote_string(server.session_time_zone) + ";",
                cache_affected_rows=False,
            )
            if result is False:
                self.logger.warning(
                    "Unable to use timezone for server",
                    time_zone=server.session_time_zone,
                    error=self.get_error(),
                )

        self.reset_database_list()

    # Version

    def set_version(self, version_row: Dict[str, Any]) -> None:
        """Replace the known server version from a version row.

        Malformed rows are ignored and the previous version stays.
        """
        version = ServerVersion.from_row(version_row)
        if version is None:
            self.logger.warning("Ignoring malformed version row", row=repr(version_row))
            return
        self._version = version
        if version.is_upgrade_required:
            self.logger.warning("Server version is below the supported minimum", version=version.version_string)

    def get_server_version(self) -> ServerVersion:
        return self._version

    def get_version(self) -> int:
        return self._version.version_int

    def get_version_string(self) -> str:
        return self._version.version_string

    def get_version_comment(self) -> str:
        return self._version.version_comment

    def is_mariadb(self) -> bool:
        return self._version.is_mariadb

    def is_percona(self) -> bool:
        return self._version.is_percona

    # Queries

    def _role_label(self, role: ConnectionType) -> str:
        return role.name.lower()

    def try_query(
        self,
        query: str,
        role: ConnectionType = ConnectionType.USER,
        unbuffered: bool = False,
        cache_affected_rows: bool = True,
    ) -> Union[BufferedResult, bool]:
        """Run a statement, returning False on failure.

        Statements without a result set yield an empty result carrying the
        affected row count.
        """
        link = self._links.get(role)
        if link is None:
            self.logger.debug("No connection for role", role=role.name, query=query)
            return False

        with self.query_log.measure(query, role=self._role_label(role)) as timer:
            result = self.extension.real_query(query, link, unbuffered)
            if result is False:
                timer.fail()

        if result is False:
            return False

        if result is True:
            result = BufferedResult([], [], affected_rows=self.extension.affected_rows(link))
        if cache_affected_rows:
            self._cached_affected_rows = self.extension.affected_rows(link)
        return result

    def query(
        self,
        query: str,
        role: ConnectionType = ConnectionType.USER,
        unbuffered: bool = False,
        cache_affected_rows: bool = True,
    ) -> BufferedResult:
        """Run a statement.

        Raises:
            QueryError: If the statement fails
        """
        result = self.try_query(query, role, unbuffered, cache_affected_rows)
        if result is False:
            link = self._links.get(role)
            if link is None:
                raise QueryError(
                    f"Not connected as {role.name}",
                    code=ErrorCodes.CONNECTION_MISSING,
                    context={"query": query, "role": role.name},
                )
            errno = self.extension.get_error_number(link)
            message = self.extension.get_error(link)
            raise QueryError(
                format_error(errno, message),
                code=ErrorCodes.QUERY_EXECUTION_FAILED,
                context={"errno": errno, "error": message, "query": query, "role": role.name},
            )
        return result

    def query_as_control_user(self, query: str, unbuffered: bool = False) -> BufferedResult:
        """Run a statement on the control user connection, raising on failure."""
        return self.query(query, ConnectionType.CONTROL_USER, unbuffered, cache_affected_rows=False)

    def try_query_as_control_user(self, query: str, unbuffered: bool = False) -> Union[BufferedResult, bool]:
        """Run a statement on the control user connection, False on failure."""
        return self.try_query(query, ConnectionType.CONTROL_USER, unbuffered, cache_affected_rows=False)

    def prepare(self, query: str, role: ConnectionType = ConnectionType.USER) -> Optional[Statement]:
        return self.extension.prepare(self._links.get(role), query)

    def fetch_value(
        self,
        query: str,
        field: Union[int, str] = 0,
        role: ConnectionType = ConnectionType.USER,
    ) -> Any:
        """Return one value of the first row, or None without a row."""
        result = self.try_query(query, role, cache_affected_rows=False)
        if result is False:
            return None
        return result.fetch_value(field)

    def fetch_single_row(
        self,
        query: str,
        row_type: str = "ASSOC",
        role: ConnectionType = ConnectionType.USER,
    ) -> Optional[Union[Dict[str, Any], Tuple[Any, ...]]]:
        """Return the first row as a mapping (``ASSOC``) or tuple (``NUM``)."""
        result = self.try_query(query, role, cache_affected_rows=False)
        if result is False:
            return None
        if row_type == "NUM":
            return result.fetch_row()
        return result.fetch_assoc()

    def fetch_result(
        self,
        query: str,
        key: Optional[Union[int, str]] = None,
        value: Optional[Union[int, str]] = None,
        role: ConnectionType = ConnectionType.USER,
    ) -> Union[List[Any], Dict[Any, Any]]:
        """Fetch a whole result.

        Without ``key`` a list of rows is returned, otherwise a mapping keyed
        by that column. With ``value`` each entry is that column instead of
        the whole row mapping.

        Example:
            >>> dbi.fetch_result("SHOW VARIABLES", key="Variable_name", value="Value")
            {'autocommit': 'ON', ...}
        """
        result = self.try_query(query, role, cache_affected_rows=False)
        if result is False:
            return {} if key is not None else []

        def pick(row: Tuple[Any, ...], column: Union[int, str]) -> Any:
            if isinstance(column, str):
                return row[result.columns.index(column)]
            return row[column]

        def entry(row: Tuple[Any, ...]) -> Any:
            if value is None:
                return dict(zip(result.columns, row))
            return pick(row, value)

        rows = result.rows
        if key is None:
            return [entry(row) for row in rows]
        return {pick(row, key): entry(row) for row in rows}

    def select_db(self, database: str, role: ConnectionType = ConnectionType.USER) -> bool:
        link = self._links.get(role)
        if link is None:
            return False
        return self.extension.select_db(database, link)

    def get_error(self, role: ConnectionType = ConnectionType.USER) -> str:
        """Return the formatted last error of ``role``, or '' without one."""
        link = self._links.get(role)
        errno = self.extension.get_error_number(link)
        if not errno:
            return ""
        return format_error(errno, self.extension.get_error(link))

    def affected_rows(self, role: ConnectionType = ConnectionType.USER, get_from_cache: bool = True) -> int:
        if get_from_cache:
            return self._cached_affected_rows
        link = self._links.get(role)
        if link is None:
            return 0
        return self.extension.affected_rows(link)

    def escape_string(self, value: str, role: ConnectionType = ConnectionType.USER) -> str:
        return self.extension.escape_string(self._links.get(role), value)

    def quote_string(self, value: str, role: ConnectionType = ConnectionType.USER) -> str:
        return "'" + self.escape_string(value, role) + "'"

    def get_fields_meta(self, result: BufferedResult) -> List[FieldMetadata]:
        return result.get_fields_meta()

    # Session facts

    def get_current_user(self) -> str:
        """Return ``user@host`` of the login, or ``@`` when unknown.

        A known value is kept in the session cache.
        """
        if self.session_cache.has("mysql_cur_user"):
            return self.session_cache.get("mysql_cur_user")

        user = self.fetch_value("SELECT CURRENT_USER();")
        if isinstance(user, (bytes, bytearray)):
            user = user.decode("utf-8")
        if isinstance(user, str):
            self.session_cache.set("mysql_cur_user", user)
            return user

        self.logger.debug("Current user is unavailable")
        return "@"

    def get_current_user_and_host(self) -> Tuple[str, str]:
        """Split the current user on the first ``@``.

        Returns ``("", "")`` when the identity is unknown; that answer is
        remembered too.
        """
        if self._current_user_and_host is None:
            user = self.get_current_user()
            if user != "@" and "@" in user:
                name, _, host = user.partition("@")
                self._current_user_and_host = (name, host)
            else:
                self._current_user_and_host = ("", "")
        return self._current_user_and_host

    def is_amazon_rds(self) -> bool:
        """Return whether the server runs on Amazon RDS (base directory check)."""

        def check_basedir() -> bool:
            basedir = self.fetch_value("SELECT @@basedir")
            return isinstance(basedir, str) and RDS_BASEDIR_MARKER in basedir

        return self.session_cache.get_or_compute("is_amazon_rds", check_basedir)

    def get_lower_case_names(self) -> int:
        """Return ``lower_case_table_names`` as 0, 1 or 2.

        Anything else the server answers counts as 0.
        """
        if self._lower_case_table_names is None:
            value = self.fetch_value("SELECT @@lower_case_table_names")
            number = to_number(value)
            if isinstance(number, int) and not isinstance(value, bool) and number in (0, 1, 2):
                self._lower_case_table_names = number
            else:
                self.logger.warning("Unexpected lower_case_table_names, assuming 0", value=repr(value))
                self._lower_case_table_names = 0
        return self._lower_case_table_names

    # Collations

    def get_db_collation(self, database: str) -> str:
        """Return the default collation of ``database``."""
        if not self.settings.server.disable_is:
            value = self.fetch_value(
                "SELECT DEFAULT_COLLATION_NAME FROM information_schema.SCHEMATA"
                " WHERE SCHEMA_NAME = " + self.quote_string(database) + " LIMIT 1"
            )
            return "" if value is None else str(value)

        previous = self.current_database
        self.select_db(database)
        value = self.fetch_value("SELECT @@collation_database")
        if previous and previous != database:
            self.select_db(previous)
        return "" if value is None else str(value)

    def get_server_collation(self) -> str:
        value = self.fetch_value("SELECT @@collation_server")
        return "" if value is None else str(value)

    def set_collation(self, collation: str) -> None:
        """Set the connection collation, adapted to what the server supports."""
        collation = resolve_collation(collation, self.get_version())
        result = self.try_query(
            "SET collation_connection = " + self.quote_string(collation) + ";",
            cache_affected_rows=False,
        )
        if result is False:
            self.logger.warning("Failed to set collation_connection", collation=collation, error=self.get_error())
            return
        self.collation_connection = collation

    # Tables

    def _table_condition(self, column: str, table: TableFilter, table_is_group: bool) -> str:
        if isinstance(table, str):
            if table_is_group:
                pattern = StringUtils.escape_mysql_wildcards(table) + "%"
                return f"{backquote(column)} LIKE " + self.quote_string(pattern)
            names = [table]
        else:
            names = list(table)
        quoted = ", ".join(self.quote_string(name) for name in names)
        return f"{backquote(column)} IN ({quoted})"

    def _fetch_tables_information_schema(
        self, database: str, table: TableFilter, table_is_group: bool, role: ConnectionType
    ) -> List[TableStatus]:
        sql = (
            "SELECT * FROM `information_schema`.`TABLES`"
            " WHERE `TABLE_SCHEMA` = " + self.quote_string(database)
        )
        if table:
            sql += " AND " + self._table_condition("TABLE_NAME", table, table_is_group)
        sql += " ORDER BY `TABLE_NAME` ASC"

        result = self.try_query(sql, role, cache_affected_rows=False)
        if result is False:
            return []
        return [TableStatus.from_information_schema(row) for row in result]

    def _fetch_tables_show_status(
        self, database: str, table: TableFilter, table_is_group: bool, role: ConnectionType
    ) -> List[TableStatus]:
        sql = "SHOW TABLE STATUS FROM " + backquote(database)
        if table:
            sql += " WHERE " + self._table_condition("Name", table, table_is_group)

        result = self.try_query(sql, role, cache_affected_rows=False)
        if result is False:
            return []
        return [TableStatus.from_show_table_status(row, database) for row in result]

    def get_tables_full(
        self,
        database: str,
        table: TableFilter = "",
        table_is_group: bool = False,
        offset: int = 0,
        limit: Optional[int] = 0,
        sort_by: str = "Name",
        sort_order: str = "ASC",
        table_type: Optional[str] = None,
        role: ConnectionType = ConnectionType.USER,
    ) -> Dict[str, TableStatus]:
        """Return full metadata of the tables in ``database``.

        Args:
            database: Database to inspect
            table: Table name, list of names, or name prefix (see ``table_is_group``)
            table_is_group: Treat ``table`` as a name prefix
            offset: Number of tables to skip
            limit: Maximum number of tables, 0 for all, None for the
                configured ``max_table_list``
            sort_by: SHOW TABLE STATUS column to sort by
            sort_order: ``ASC`` or ``DESC``
            table_type: ``"view"`` or ``"table"`` to keep one kind only
            role: Connection to run the queries on

        Returns:
            Table records keyed by table name exactly as the server returned it

        Raises:
            ValidationError: If the sort column or direction is unknown
        """
        if sort_by not in TABLE_SORT_COLUMNS:
            raise ValidationError(
                f"Unknown table sort column: {sort_by}",
                code=ErrorCodes.INVALID_SORT_COLUMN,
                context={"sort_by": sort_by},
            )
        sort_order = require_sort_order(sort_order)

        tables: List[TableStatus] = []
        if not self.settings.server.disable_is:
            tables = self._fetch_tables_information_schema(database, table, table_is_group, role)
        if not tables:
            tables = self._fetch_tables_show_status(database, table, table_is_group, role)

        if table_type == "view":
            tables = [status for status in tables if status.table_type in _VIEW_TYPES]
        elif table_type == "table":
            tables = [status for status in tables if status.table_type not in _VIEW_TYPES]

        natural_order = self.settings.natural_order
        tables.sort(
            key=cmp_to_key(
                lambda a, b: usort_comparison(a, b, sort_by, sort_order, natural_order)
            )
        )

        if limit is None:
            limit = self.settings.max_table_list
        if limit > 0:
            tables = tables[offset:offset + limit]
        elif offset > 0:
            tables = tables[offset:]

        result = {status.name: status for status in tables}
        self._table_cache.setdefault(database, {}).update(result)
        return result

    def get_cached_table_status(self, database: str, table: str) -> Optional[TableStatus]:
        return self._table_cache.get(database, {}).get(table)

    def clear_table_cache(self) -> None:
        self._table_cache.clear()

    def get_tables(self, database: str, role: ConnectionType = ConnectionType.USER) -> List[str]:
        """Return the table names of ``database``."""
        result = self.try_query("SHOW TABLES FROM " + backquote(database) + ";", role, cache_affected_rows=False)
        if result is False:
            return []
        tables = [str(name) for name in result.fetch_all_column(0)]
        if self.settings.natural_order:
            tables.sort(key=natural_sort_key)
        return tables

    def get_columns(
        self,
        database: str,
        table: str,
        full: bool = False,
        role: ConnectionType = ConnectionType.USER,
    ) -> Dict[str, ColumnInfo]:
        """Return the columns of a table keyed by column name."""
        sql = "SHOW {}COLUMNS FROM {}.{};".format(
            "FULL " if full else "", backquote(database), backquote(table)
        )
        result = self.try_query(sql, role, cache_affected_rows=False)
        if result is False:
            return {}
        columns = [ColumnInfo.from_row(row) for row in result]
        return {column.name: column for column in columns}

    # Databases

    def get_database_list(self) -> List[str]:
        """Return the databases visible to the user.

        ``only_db`` patterns and the ``hide_db`` expression of the server
        configuration are applied. The list is kept until the next
        ``post_connect`` or ``reset_database_list``.
        """
        if self._database_list is None:
            result = self.try_query("SHOW DATABASES", cache_affected_rows=False)
            names = [] if result is False else [str(name) for name in result.fetch_all_column(0)]

            server = self.settings.server
            if server.only_db:
                patterns = [StringUtils.like_to_regex(pattern) for pattern in server.only_db]
                names = [name for name in names if any(p.match(name) for p in patterns)]
            if server.hide_db:
                hidden = re.compile(server.hide_db)
                names = [name for name in names if not hidden.search(name)]

            self._database_list = names
        return list(self._database_list)

    def reset_database_list(self) -> None:
        self._database_list = None

    def _databases_information_schema(
        self, like: Optional[str], force_stats: bool, role: ConnectionType
    ) -> List[DatabaseStats]:
        if force_stats:
            sql = (
                "SELECT s.SCHEMA_NAME, s.DEFAULT_COLLATION_NAME,"
                " COUNT(t.TABLE_SCHEMA) AS SCHEMA_TABLES,"
                " SUM(t.TABLE_ROWS) AS SCHEMA_TABLE_ROWS,"
                " SUM(t.DATA_LENGTH) AS SCHEMA_DATA_LENGTH,"
                " SUM(t.MAX_DATA_LENGTH) AS SCHEMA_MAX_DATA_LENGTH,"
                " SUM(t.INDEX_LENGTH) AS SCHEMA_INDEX_LENGTH,"
                " SUM(t.DATA_LENGTH + t.INDEX_LENGTH) AS SCHEMA_LENGTH,"
                " SUM(IF(t.ENGINE <> 'InnoDB', t.DATA_FREE, 0)) AS SCHEMA_DATA_FREE"
                " FROM `information_schema`.SCHEMATA s"
                " LEFT JOIN `information_schema`.TABLES t"
                " ON BINARY t.TABLE_SCHEMA = BINARY s.SCHEMA_NAME"
            )
        else:
            sql = "SELECT s.SCHEMA_NAME, s.DEFAULT_COLLATION_NAME FROM `information_schema`.SCHEMATA s"

        if like is not None:
            sql += " WHERE s.SCHEMA_NAME LIKE " + self.quote_string(like)
        else:
            names = self.get_database_list()
            if not names:
                return []
            sql += " WHERE s.SCHEMA_NAME IN (" + ", ".join(self.quote_string(name) for name in names) + ")"

        if force_stats:
            sql += " GROUP BY BINARY s.SCHEMA_NAME, s.DEFAULT_COLLATION_NAME"

        result = self.try_query(sql, role, cache_affected_rows=False)
        if result is False:
            return []
        return [DatabaseStats.from_information_schema(row) for row in result]

    def _databases_show_status(
        self, like: Optional[str], force_stats: bool, role: ConnectionType
    ) -> List[DatabaseStats]:
        if like is None:
            names = self.get_database_list()
        else:
            result = self.try_query("SHOW DATABASES LIKE " + self.quote_string(like), role, cache_affected_rows=False)
            names = [] if result is False else [str(name) for name in result.fetch_all_column(0)]

        databases: List[DatabaseStats] = []
        for name in names:
            stats = DatabaseStats(schema_name=name, default_collation_name=self.get_db_collation(name))
            if force_stats:
                stats.start_statistics()
                result = self.try_query("SHOW TABLE STATUS FROM " + backquote(name) + ";", role, cache_affected_rows=False)
                if result is not False:
                    for row in result:
                        stats.add_table(TableStatus.from_show_table_status(row, name))
            databases.append(stats)
        return databases

    def get_databases_full(
        self,
        like: Optional[str] = None,
        force_stats: bool = False,
        role: ConnectionType = ConnectionType.USER,
        sort_by: str = "SCHEMA_NAME",
        sort_order: str = "ASC",
        offset: int = 0,
        limit: Optional[int] = 0,
    ) -> List[DatabaseStats]:
        """Return databases with their collation and, on request, size statistics.

        Args:
            like: LIKE pattern selecting databases; the visible database
                list is used when omitted
            force_stats: Aggregate table statistics per database
            role: Connection to run the queries on
            sort_by: ``SCHEMA_*`` column to sort by
            sort_order: ``ASC`` or ``DESC``
            offset: Number of databases to skip
            limit: Maximum number of databases, 0 for all, None for the
                configured ``max_db_list``

        Raises:
            ValidationError: If the sort column or direction is unknown
        """
        if sort_by not in DATABASE_SORT_COLUMNS:
            raise ValidationError(
                f"Unknown database sort column: {sort_by}",
                code=ErrorCodes.INVALID_SORT_COLUMN,
                context={"sort_by": sort_by},
            )
        sort_order = require_sort_order(sort_order)

        if self.settings.server.disable_is:
            databases = self._databases_show_status(like, force_stats, role)
        else:
            databases = self._databases_information_schema(like, force_stats, role)

        natural_order = self.settings.natural_order
        databases.sort(
            key=cmp_to_key(
                lambda a, b: database_comparison(a, b, sort_by, sort_order, natural_order)
            )
        )

        if limit is None:
            limit = self.settings.max_db_list
        if limit > 0:
            return databases[offset:offset + limit]
        return databases[offset:]

    # Configuration storage

    def get_system_database(self) -> SystemDatabase:
        if self._system_database is None:
            self._system_database = SystemDatabase(self)
        return self._system_database

    def __repr__(self) -> str:
        roles = ", ".join(role.name for role in self._links)
        return f"DatabaseInterface(version={self.get_version()}, connected=[{roles}])"


_instance: Optional[DatabaseInterface] = None


def get_instance(settings: Optional[Settings] = None) -> DatabaseInterface:
    """Return the process-wide facade, creating it on first use.

    Only for callers that serve a single session per process; everything
    else should construct and pass its own ``DatabaseInterface``.
    """
    global _instance
    if _instance is None:
        from .connectors.mysql import PyMySQLExtension

        _instance = DatabaseInterface(PyMySQLExtension(), settings)
    return _instance


def set_instance(dbi: Optional[DatabaseInterface]) -> None:
    global _instance
    _instance = dbi


def reset_instance() -> None:
    set_instance(None)
