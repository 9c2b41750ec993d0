"""Utility functions for dbfacade operations.

This module provides small helpers used throughout the database layer:
identifier validation, SQL identifier quoting, natural ordering and
tolerant numeric conversion of values returned by the server.

Functions:
    to_number: Tolerant numeric conversion of server values
    natural_sort_key: Case-insensitive natural ordering key

Example:
    >>> StringUtils.backquote("my`table")
    '`my``table`'
    >>> sorted(["t10", "t9"], key=natural_sort_key)
    ['t9', 't10']
"""

import re
from decimal import Decimal
from typing import Any, List, Optional, Tuple, Union

from .exceptions import ValidationError


class ValidationUtils:
    """Utility class for validation operations."""

    IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

    @classmethod
    def validate_identifier(cls, identifier: str, *, allow_empty: bool = False) -> bool:
        """Validate identifier string.

        Args:
            identifier: String to validate as identifier
            allow_empty: Whether to allow empty strings

        Returns:
            True if identifier is valid

        Example:
            >>> ValidationUtils.validate_identifier("SCHEMA_NAME")
            True
            >>> ValidationUtils.validate_identifier("1; DROP")
            False
        """
        if not identifier:
            return allow_empty

        return bool(cls.IDENTIFIER_PATTERN.match(identifier))

    @classmethod
    def validate_port(cls, port: Union[int, str]) -> bool:
        """Validate network port number.

        Args:
            port: Port number to validate

        Returns:
            True if port is valid
        """
        try:
            port_int = int(port)
            return 1 <= port_int <= 65535
        except (ValueError, TypeError):
            return False


class StringUtils:
    """Utility class for SQL string operations."""

    @staticmethod
    def backquote(identifier: str) -> str:
        """Quote an identifier with backticks, doubling embedded backticks.

        Example:
            >>> StringUtils.backquote("test_db")
            '`test_db`'
        """
        return "`" + str(identifier).replace("`", "``") + "`"

    @staticmethod
    def escape_mysql_wildcards(value: str) -> str:
        """Escape ``_`` and ``%`` so a LIKE pattern matches them literally."""
        return value.replace("_", "\\_").replace("%", "\\%")

    @staticmethod
    def like_to_regex(pattern: str) -> "re.Pattern[str]":
        """Translate a LIKE pattern (``%``, ``_``, backslash escapes) to a regex."""
        parts: List[str] = []
        escaped = False
        for char in pattern:
            if escaped:
                parts.append(re.escape(char))
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == "%":
                parts.append(".*")
            elif char == "_":
                parts.append(".")
            else:
                parts.append(re.escape(char))
        return re.compile("^" + "".join(parts) + "$", re.DOTALL)


_NATURAL_CHUNK = re.compile(r"(\d+)")


def natural_sort_key(value: Any) -> Tuple[Tuple[int, Any], ...]:
    """Return a key ordering strings the way a human reads them.

    Digit runs compare numerically, everything else case-insensitively.

    Example:
        >>> sorted(["b2", "B10", "a"], key=natural_sort_key)
        ['a', 'b2', 'B10']
    """
    chunks = _NATURAL_CHUNK.split(str(value).lower())
    return tuple(
        (0, int(chunk)) if chunk.isdigit() else (1, chunk)
        for chunk in chunks
        if chunk != ""
    )


def to_number(value: Any) -> Optional[Union[int, float]]:
    """Interpret a server value as a number, or None when it is not one.

    Example:
        >>> to_number("16384")
        16384
        >>> to_number("utf8_bin") is None
        True
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        text = value.strip()
        if re.fullmatch(r"[-+]?\d+", text):
            return int(text)
        if re.fullmatch(r"[-+]?(\d+\.\d*|\.\d+)([eE][-+]?\d+)?", text):
            return float(text)
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return None


def require_sort_order(order: str) -> str:
    """Normalize a sort direction to ``ASC`` or ``DESC``.

    Raises:
        ValidationError: If the direction is neither
    """
    normalized = (order or "ASC").strip().upper()
    if normalized not in ("ASC", "DESC"):
        raise ValidationError(f"Invalid sort order: {order}", code="INVALID_SORT_ORDER")
    return normalized
