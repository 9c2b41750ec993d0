# src/dbfacade/database/connectors/mysql.py
"""MySQL/MariaDB driver adapter built on PyMySQL."""

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import pymysql
import pymysql.cursors

from dbfacade.config.models import ConnectionParams
from dbfacade.database.base import DbiExtension, Statement
from dbfacade.database.models import BufferedResult, FieldMetadata
from dbfacade.logging import get_logger

# MySQL NOT_NULL_FLAG
_NOT_NULL_FLAG = 1


def _error_parts(error: Exception) -> Tuple[int, str]:
    args = getattr(error, "args", ())
    if len(args) >= 2 and isinstance(args[0], int):
        return args[0], str(args[1])
    return 0, str(error)


def convert_placeholders(query: str) -> str:
    """Rewrite ``?`` placeholders outside quotes to PyMySQL's ``%s`` style."""
    converted: List[str] = []
    quote: Optional[str] = None
    index = 0
    while index < len(query):
        char = query[index]
        if quote is not None:
            converted.append("%%" if char == "%" else char)
            if char == "\\" and index + 1 < len(query):
                converted.append(query[index + 1])
                index += 1
            elif char == quote:
                quote = None
        elif char in ("'", '"', "`"):
            quote = char
            converted.append(char)
        elif char == "?":
            converted.append("%s")
        elif char == "%":
            converted.append("%%")
        else:
            converted.append(char)
        index += 1
    return "".join(converted)


class PyMySQLStatement(Statement):
    """Client-side prepared statement.

    PyMySQL has no server-side prepared statements, so parameters are
    escaped by the driver at execution time.
    """

    def __init__(self, extension: "PyMySQLExtension", link: Any, query: str) -> None:
        self._extension = extension
        self._link = link
        self.query = query
        self._driver_query = convert_placeholders(query)
        self._result: Union[BufferedResult, bool] = False

    def execute(self, params: Optional[Sequence[Any]] = None) -> bool:
        self._result = self._extension._execute(self._link, self._driver_query, tuple(params or ()))
        return self._result is not False

    def get_result(self) -> Union[BufferedResult, bool]:
        return self._result


class PyMySQLExtension(DbiExtension):
    """Driver adapter for MySQL/MariaDB servers.

    Driver exceptions never escape: they are recorded per link and the
    call returns None/False, which the facade interprets.
    """

    platform = "mysql"

    def __init__(self) -> None:
        self.logger = get_logger("dbfacade.connector.mysql")
        self._errors: Dict[int, Tuple[int, str]] = {}
        self._affected: Dict[int, int] = {}
        self._connect_error: Tuple[int, str] = (0, "")

    def _key(self, link: Any) -> int:
        return id(link)

    def _set_error(self, link: Any, error: Exception) -> None:
        errno, message = _error_parts(error)
        self._errors[self._key(link)] = (errno, message)
        self.logger.debug("MySQL call failed", errno=errno, error=message)

    def _clear_error(self, link: Any) -> None:
        self._errors.pop(self._key(link), None)

    def connect(self, params: ConnectionParams) -> Optional[Any]:
        kwargs: Dict[str, Any] = {
            "user": params.user,
            "password": params.password.get_secret_value(),
            "charset": params.charset,
            "connect_timeout": params.connect_timeout,
            "autocommit": True,
        }
        if params.socket:
            kwargs["unix_socket"] = params.socket
        else:
            kwargs["host"] = params.host
            kwargs["port"] = params.port

        try:
            link = pymysql.connect(**kwargs)
        except pymysql.MySQLError as e:
            self._connect_error = _error_parts(e)
            self.logger.warning(
                "MySQL connection failed",
                host=params.host,
                port=params.port,
                errno=self._connect_error[0],
            )
            return None

        self._connect_error = (0, "")
        return link

    def select_db(self, database: str, link: Any) -> bool:
        try:
            link.select_db(database)
        except pymysql.MySQLError as e:
            self._set_error(link, e)
            return False
        self._clear_error(link)
        return True

    def _fields_meta(self, cursor: Any) -> List[FieldMetadata]:
        # PyMySQL only exposes table names through the raw result fields
        raw_result = getattr(cursor, "_result", None)
        raw_fields = getattr(raw_result, "fields", None)
        if raw_fields:
            return [
                FieldMetadata(
                    name=raw.name,
                    table=getattr(raw, "table_name", "") or "",
                    org_table=getattr(raw, "org_table", "") or "",
                    type_code=raw.type_code,
                    length=getattr(raw, "length", None),
                    is_nullable=not (getattr(raw, "flags", 0) & _NOT_NULL_FLAG),
                )
                for raw in raw_fields
            ]
        return [
            FieldMetadata(
                name=desc[0],
                type_code=desc[1],
                length=desc[3],
                is_nullable=bool(desc[6]) if len(desc) > 6 else True,
            )
            for desc in cursor.description
        ]

    def _execute(
        self,
        link: Any,
        query: str,
        params: Optional[Tuple[Any, ...]] = None,
        unbuffered: bool = False,
    ) -> Union[BufferedResult, bool]:
        cursor_class = pymysql.cursors.SSCursor if unbuffered else pymysql.cursors.Cursor
        try:
            with link.cursor(cursor_class) as cursor:
                cursor.execute(query, params)
                if cursor.description is None:
                    self._affected[self._key(link)] = cursor.rowcount
                    self._clear_error(link)
                    return True
                fields_meta = self._fields_meta(cursor)
                rows = cursor.fetchall()
        except pymysql.MySQLError as e:
            self._set_error(link, e)
            return False

        # SSCursor reports an unsigned -1 as rowcount for result sets
        self._affected[self._key(link)] = len(rows)
        self._clear_error(link)
        return BufferedResult(
            [meta.name for meta in fields_meta],
            rows,
            fields_meta=fields_meta,
            affected_rows=len(rows),
        )

    def real_query(self, query: str, link: Any, unbuffered: bool = False) -> Union[BufferedResult, bool]:
        # No parameters: PyMySQL must not interpret % in the statement
        return self._execute(link, query, None, unbuffered)

    def prepare(self, link: Any, query: str) -> Optional[Statement]:
        if link is None or not link.open:
            return None
        return PyMySQLStatement(self, link, query)

    def get_error(self, link: Any) -> str:
        if link is None:
            return self._connect_error[1]
        return self._errors.get(self._key(link), (0, ""))[1]

    def get_error_number(self, link: Any) -> int:
        if link is None:
            return self._connect_error[0]
        return self._errors.get(self._key(link), (0, ""))[0]

    def affected_rows(self, link: Any) -> int:
        return self._affected.get(self._key(link), 0)

    def escape_string(self, link: Any, value: str) -> str:
        if link is None:
            return pymysql.converters.escape_string(value)
        return link.escape_string(value)

    def close(self, link: Any) -> None:
        key = self._key(link)
        self._errors.pop(key, None)
        self._affected.pop(key, None)
        try:
            link.close()
        except pymysql.MySQLError as e:
            self.logger.debug("Closing MySQL connection failed", error=str(e))
