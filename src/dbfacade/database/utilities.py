"""Helpers shared by the database facade.

Functions:
    format_error: Turn a server error into user-facing guidance
    is_system_schema: Recognize the server's own schemas
    backquote: Quote an identifier
    usort_comparison: Comparator for table metadata ordering
    database_comparison: Comparator for database aggregate ordering
"""

from typing import Any, Optional

from dbfacade.core.utils import StringUtils, natural_sort_key, to_number

from .models import DatabaseStats, TableStatus

SYSTEM_SCHEMAS = ("information_schema", "performance_schema", "mysql", "sys")

LOGOUT_URL = "index.php?route=/logout"
ENGINE_STATUS_URL = "index.php?route=/server/engines/InnoDB/Status"

_SEPARATOR = " - "


def format_error(error_number: int, error_message: str) -> str:
    """Format a server error as ``#<code> - <message>`` plus guidance.

    Example:
        >>> format_error(2003, "Can't connect")
        "#2003 - Can't connect - The server is not responding."
    """
    error = f"#{error_number}{_SEPARATOR}{error_message}"

    if error_number == 2002:
        return (
            error
            + _SEPARATOR
            + "The server is not responding (or the local server's socket is not correctly configured)."
        )
    if error_number == 2003:
        return error + _SEPARATOR + "The server is not responding."
    if error_number == 1698:
        return error + _SEPARATOR + f"Logout and try as another user: {LOGOUT_URL}"
    if error_number == 1005:
        if "errno: 13" in error_message:
            return error + _SEPARATOR + "Please check privileges of directory containing database."
        return error + f" (Details: {ENGINE_STATUS_URL})"

    return error


def is_system_schema(schema_name: Optional[str], *, include_mysql: bool = False) -> bool:
    """Return whether ``schema_name`` is one of the server's own schemas.

    The ``mysql`` schema holds ordinary tables and only counts when
    ``include_mysql`` is set.
    """
    if not schema_name:
        return False
    name = schema_name.lower()
    if name == "mysql":
        return include_mysql
    return name in SYSTEM_SCHEMAS


def backquote(identifier: str) -> str:
    return StringUtils.backquote(identifier)


def _compare(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def _text_key(value: Any, natural_order: bool) -> Any:
    if natural_order:
        return natural_sort_key("" if value is None else value)
    return str("" if value is None else value).lower()


def compare_text(a: Any, b: Any, natural_order: bool) -> int:
    """Compare naturally, or case-insensitively when natural order is off."""
    return _compare(_text_key(a, natural_order), _text_key(b, natural_order))


def compare_values(a: Any, b: Any, natural_order: bool) -> int:
    """Compare two metadata values, numerically when both are numbers.

    A missing value sorts before any number.
    """
    number_a, number_b = to_number(a), to_number(b)
    if number_a is not None and number_b is not None:
        return _compare(number_a, number_b)
    if a is None and b is None:
        return 0
    if a is None and number_b is not None:
        return -1
    if number_a is not None and b is None:
        return 1
    return compare_text(a, b, natural_order)


def usort_comparison(
    a: TableStatus,
    b: TableStatus,
    sort_by: str,
    sort_order: str,
    natural_order: bool,
) -> int:
    """Compare two tables by a SHOW TABLE STATUS column.

    ``Data_length`` compares the data plus index size. Equal values are
    ordered by ascending table name whatever the direction.
    """
    if sort_by == "Data_length":
        result = _compare(a.total_length, b.total_length)
    elif sort_by == "Name":
        result = compare_text(a.name, b.name, natural_order)
    else:
        result = compare_values(a.value(sort_by), b.value(sort_by), natural_order)

    if sort_order == "DESC":
        result = -result
    if result == 0:
        result = compare_text(a.name, b.name, natural_order)
    return result


def database_comparison(
    a: DatabaseStats,
    b: DatabaseStats,
    sort_by: str,
    sort_order: str,
    natural_order: bool,
) -> int:
    """Compare two databases by a ``SCHEMA_*`` column, names breaking ties."""
    if sort_by in ("SCHEMA_NAME", "DEFAULT_COLLATION_NAME"):
        result = compare_text(a.value(sort_by), b.value(sort_by), natural_order)
    else:
        result = compare_values(a.value(sort_by), b.value(sort_by), natural_order)

    if sort_order == "DESC":
        result = -result
    if result == 0:
        result = compare_text(a.schema_name, b.schema_name, natural_order)
    return result
