# src/dbfacade/database/models.py
"""Database models for dbfacade."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from dbfacade.core.utils import to_number


class ConnectionType(Enum):
    """Which driver connection a statement runs on."""
    USER = 0
    CONTROL_USER = 1
    AUXILIARY = 2


@dataclass
class FieldMetadata:
    """Description of one result column."""
    name: str
    table: str = ""
    org_table: str = ""
    type_code: Optional[int] = None
    length: Optional[int] = None
    is_nullable: bool = True


class BufferedResult:
    """Fully fetched result set with a read cursor.

    Rows are kept as tuples in column order; the ``fetch_*`` family advances
    the cursor, the ``fetch_all_*`` family consumes the remaining rows.
    """

    def __init__(
        self,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        fields_meta: Optional[List[FieldMetadata]] = None,
        affected_rows: int = 0,
    ) -> None:
        self.columns: List[str] = list(columns)
        self.rows: List[Tuple[Any, ...]] = [tuple(row) for row in rows]
        self.affected_rows = affected_rows
        self._fields_meta = fields_meta
        self._position = 0

    def _next(self) -> Optional[Tuple[Any, ...]]:
        if self._position >= len(self.rows):
            return None
        row = self.rows[self._position]
        self._position += 1
        return row

    def _as_dict(self, row: Tuple[Any, ...]) -> Dict[str, Any]:
        return dict(zip(self.columns, row))

    def fetch_row(self) -> Optional[Tuple[Any, ...]]:
        return self._next()

    def fetch_assoc(self) -> Optional[Dict[str, Any]]:
        row = self._next()
        return None if row is None else self._as_dict(row)

    def fetch_value(self, field: Union[int, str] = 0) -> Any:
        """Return one value of the next row, or None when there is none."""
        row = self._next()
        if row is None:
            return None
        if isinstance(field, str):
            if field not in self.columns:
                return None
            return row[self.columns.index(field)]
        return row[field] if 0 <= field < len(row) else None

    def fetch_all_assoc(self) -> List[Dict[str, Any]]:
        rows = [self._as_dict(row) for row in self.rows[self._position:]]
        self._position = len(self.rows)
        return rows

    def fetch_all_column(self, column: Union[int, str] = 0) -> List[Any]:
        index = self.columns.index(column) if isinstance(column, str) else column
        values = [row[index] for row in self.rows[self._position:]]
        self._position = len(self.rows)
        return values

    def fetch_all_keyed(self) -> Dict[Any, Any]:
        """Map the first column to the second (or to None for one column)."""
        result: Dict[Any, Any] = {}
        for row in self.rows[self._position:]:
            result[row[0]] = row[1] if len(row) > 1 else None
        self._position = len(self.rows)
        return result

    def num_rows(self) -> int:
        return len(self.rows)

    def seek(self, offset: int) -> bool:
        if 0 <= offset <= len(self.rows):
            self._position = offset
            return True
        return False

    def get_field_names(self) -> List[str]:
        return list(self.columns)

    def get_fields_meta(self) -> List[FieldMetadata]:
        if self._fields_meta is None:
            return [FieldMetadata(name=name) for name in self.columns]
        return list(self._fields_meta)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        while True:
            row = self.fetch_assoc()
            if row is None:
                return
            yield row

    def __repr__(self) -> str:
        return f"BufferedResult(columns={self.columns!r}, rows={len(self.rows)})"


# (attribute, legacy SHOW TABLE STATUS key, information_schema key, numeric)
TABLE_STATUS_FIELDS: Tuple[Tuple[str, str, str, bool], ...] = (
    ("name", "Name", "TABLE_NAME", False),
    ("engine", "Engine", "ENGINE", False),
    ("version", "Version", "VERSION", True),
    ("row_format", "Row_format", "ROW_FORMAT", False),
    ("rows", "Rows", "TABLE_ROWS", True),
    ("avg_row_length", "Avg_row_length", "AVG_ROW_LENGTH", True),
    ("data_length", "Data_length", "DATA_LENGTH", True),
    ("max_data_length", "Max_data_length", "MAX_DATA_LENGTH", True),
    ("index_length", "Index_length", "INDEX_LENGTH", True),
    ("data_free", "Data_free", "DATA_FREE", True),
    ("auto_increment", "Auto_increment", "AUTO_INCREMENT", True),
    ("create_time", "Create_time", "CREATE_TIME", False),
    ("update_time", "Update_time", "UPDATE_TIME", False),
    ("check_time", "Check_time", "CHECK_TIME", False),
    ("collation", "Collation", "TABLE_COLLATION", False),
    ("checksum", "Checksum", "CHECKSUM", True),
    ("create_options", "Create_options", "CREATE_OPTIONS", False),
    ("comment", "Comment", "TABLE_COMMENT", False),
)

_LEGACY_KEYS = {legacy for _, legacy, _, _ in TABLE_STATUS_FIELDS} | {"Type", "Db"}
_CANONICAL_KEYS = {canonical for _, _, canonical, _ in TABLE_STATUS_FIELDS} | {
    "TABLE_SCHEMA",
    "TABLE_TYPE",
}

# Sort keys accepted by get_tables_full, by legacy name
TABLE_SORT_COLUMNS = {legacy: attr for attr, legacy, _, _ in TABLE_STATUS_FIELDS}


def _coerce(value: Any, numeric: bool) -> Any:
    if not numeric or value is None:
        return value
    number = to_number(value)
    return value if number is None else number


@dataclass
class TableStatus:
    """Metadata of one table, whichever catalog it was read from.

    ``as_row`` renders the dual-keyed mapping older callers expect: the
    information_schema keys and the SHOW TABLE STATUS keys side by side
    with identical values.
    """
    schema: str
    name: str
    table_type: str = "BASE TABLE"
    engine: Optional[str] = None
    version: Optional[int] = None
    row_format: Optional[str] = None
    rows: Optional[int] = None
    avg_row_length: Optional[int] = None
    data_length: Optional[int] = None
    max_data_length: Optional[int] = None
    index_length: Optional[int] = None
    data_free: Optional[int] = None
    auto_increment: Optional[int] = None
    create_time: Any = None
    update_time: Any = None
    check_time: Any = None
    collation: Optional[str] = None
    checksum: Optional[int] = None
    create_options: Optional[str] = None
    comment: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_show_table_status(cls, row: Dict[str, Any], schema: str) -> "TableStatus":
        """Build from a ``SHOW TABLE STATUS`` row."""
        values = {
            attr: _coerce(row.get(legacy), numeric)
            for attr, legacy, _, numeric in TABLE_STATUS_FIELDS
        }
        values["name"] = str(row.get("Name", ""))
        engine = values["engine"]
        comment = values["comment"]

        if str(comment or "").upper() == "VIEW" and engine is None:
            table_type = "VIEW"
        elif schema.lower() == "information_schema":
            table_type = "SYSTEM VIEW"
        else:
            table_type = "BASE TABLE"

        extra = {key: value for key, value in row.items() if key not in _LEGACY_KEYS}
        return cls(schema=schema, table_type=table_type, extra=extra, **values)

    @classmethod
    def from_information_schema(cls, row: Dict[str, Any]) -> "TableStatus":
        """Build from an ``information_schema.TABLES`` row."""
        values = {
            attr: _coerce(row.get(canonical), numeric)
            for attr, _, canonical, numeric in TABLE_STATUS_FIELDS
        }
        values["name"] = str(row.get("TABLE_NAME", ""))
        extra = {key: value for key, value in row.items() if key not in _CANONICAL_KEYS}
        return cls(
            schema=str(row.get("TABLE_SCHEMA", "")),
            table_type=row.get("TABLE_TYPE") or "BASE TABLE",
            extra=extra,
            **values,
        )

    @property
    def total_length(self) -> int:
        """Data plus index size."""
        return (self.data_length or 0) + (self.index_length or 0)

    @property
    def is_view(self) -> bool:
        return self.table_type in ("VIEW", "SYSTEM VIEW")

    def value(self, legacy_key: str) -> Any:
        """Return a field by its SHOW TABLE STATUS name."""
        attr = TABLE_SORT_COLUMNS.get(legacy_key)
        if attr is None:
            return self.extra.get(legacy_key)
        return getattr(self, attr)

    def as_row(self) -> Dict[str, Any]:
        """Render the dual-keyed row (canonical and legacy keys)."""
        row: Dict[str, Any] = dict(self.extra)
        row["TABLE_SCHEMA"] = self.schema
        row["TABLE_TYPE"] = self.table_type
        row["Db"] = self.schema
        for attr, legacy, canonical, _ in TABLE_STATUS_FIELDS:
            value = getattr(self, attr)
            row[canonical] = value
            row[legacy] = value
        row["Type"] = self.engine
        return row


# (attribute, information_schema key)
DATABASE_STATS_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("tables", "SCHEMA_TABLES"),
    ("table_rows", "SCHEMA_TABLE_ROWS"),
    ("data_length", "SCHEMA_DATA_LENGTH"),
    ("max_data_length", "SCHEMA_MAX_DATA_LENGTH"),
    ("index_length", "SCHEMA_INDEX_LENGTH"),
    ("length", "SCHEMA_LENGTH"),
    ("data_free", "SCHEMA_DATA_FREE"),
)

DATABASE_SORT_COLUMNS = ("SCHEMA_NAME", "DEFAULT_COLLATION_NAME") + tuple(
    key for _, key in DATABASE_STATS_FIELDS
)


@dataclass
class DatabaseStats:
    """Per-database aggregate metadata.

    The aggregates stay None when statistics were not requested.
    """
    schema_name: str
    default_collation_name: Optional[str] = None
    tables: Optional[int] = None
    table_rows: Optional[int] = None
    data_length: Optional[int] = None
    max_data_length: Optional[int] = None
    index_length: Optional[int] = None
    length: Optional[int] = None
    data_free: Optional[int] = None

    @classmethod
    def from_information_schema(cls, row: Dict[str, Any]) -> "DatabaseStats":
        values = {
            attr: (to_number(row[key]) or 0) if key in row else None
            for attr, key in DATABASE_STATS_FIELDS
        }
        name = row.get("SCHEMA_NAME")
        if isinstance(name, (bytes, bytearray)):
            name = name.decode("utf-8")
        return cls(
            schema_name=str(name),
            default_collation_name=row.get("DEFAULT_COLLATION_NAME"),
            **values,
        )

    def start_statistics(self) -> None:
        for attr, _ in DATABASE_STATS_FIELDS:
            setattr(self, attr, 0)

    def add_table(self, table: TableStatus) -> None:
        """Fold one table into the aggregates.

        InnoDB reports the free space of the whole tablespace in
        ``Data_free``, so it does not count as overhead.
        """
        self.tables = (self.tables or 0) + 1
        self.table_rows = (self.table_rows or 0) + (table.rows or 0)
        self.data_length = (self.data_length or 0) + (table.data_length or 0)
        self.max_data_length = (self.max_data_length or 0) + (table.max_data_length or 0)
        self.index_length = (self.index_length or 0) + (table.index_length or 0)
        if table.engine != "InnoDB":
            self.data_free = (self.data_free or 0) + (table.data_free or 0)
        else:
            self.data_free = self.data_free or 0
        self.length = (self.length or 0) + table.total_length

    def value(self, column: str) -> Any:
        if column == "SCHEMA_NAME":
            return self.schema_name
        if column == "DEFAULT_COLLATION_NAME":
            return self.default_collation_name
        for attr, key in DATABASE_STATS_FIELDS:
            if key == column:
                return getattr(self, attr)
        return None

    def as_row(self) -> Dict[str, Any]:
        row: Dict[str, Any] = {
            "SCHEMA_NAME": self.schema_name,
            "DEFAULT_COLLATION_NAME": self.default_collation_name,
        }
        for attr, key in DATABASE_STATS_FIELDS:
            value = getattr(self, attr)
            if value is not None:
                row[key] = value
        return row


@dataclass
class ColumnInfo:
    """One row of ``SHOW [FULL] COLUMNS``."""
    name: str
    data_type: str
    is_nullable: bool
    default_value: Optional[Any]
    key: str = ""
    extra: str = ""
    collation: Optional[str] = None
    privileges: Optional[str] = None
    comment: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ColumnInfo":
        return cls(
            name=str(row.get("Field", "")),
            data_type=str(row.get("Type", "")),
            is_nullable=str(row.get("Null", "")).upper() == "YES",
            default_value=row.get("Default"),
            key=row.get("Key") or "",
            extra=row.get("Extra") or "",
            collation=row.get("Collation"),
            privileges=row.get("Privileges"),
            comment=row.get("Comment"),
        )

    @property
    def is_primary_key(self) -> bool:
        return self.key == "PRI"
