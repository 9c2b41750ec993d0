# src/dbfacade/database/system_database.py
"""Access to the configuration storage database.

The configuration storage (``pmadb``) keeps per-column metadata such as
comments and browser transformations. When a view is created from a
query, the transformations of the underlying columns are copied to the
view's columns.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Union

from .models import BufferedResult, ConnectionType
from .utilities import backquote

if TYPE_CHECKING:
    from .interface import DatabaseInterface

ColumnMap = List[Dict[str, Any]]


class SystemDatabase:
    """Configuration storage helper bound to one facade."""

    def __init__(self, dbi: "DatabaseInterface") -> None:
        self.dbi = dbi

    def _column_info_table(self) -> Optional[str]:
        """Return the quoted column info table, or None when storage is off."""
        server = self.dbi.settings.server
        if not server.pmadb or not server.column_info:
            return None
        return backquote(server.pmadb) + "." + backquote(server.column_info)

    def get_existing_transformation_data(self, db: str) -> Union[BufferedResult, bool]:
        """Return the stored column information of ``db``.

        Returns:
            The rows of the column info table for ``db``, or False when the
            configuration storage is not configured or the query fails
        """
        table = self._column_info_table()
        if table is None:
            return False

        sql = "SELECT * FROM {} WHERE `db_name` = {}".format(
            table, self.dbi.quote_string(db, ConnectionType.CONTROL_USER)
        )
        return self.dbi.try_query_as_control_user(sql)

    def get_new_transformation_data_sql(
        self,
        transformation_data: BufferedResult,
        column_map: ColumnMap,
        view_name: str,
        db: str,
    ) -> str:
        """Build the INSERT copying transformations onto the columns of a view.

        Args:
            transformation_data: Result of ``get_existing_transformation_data``
            column_map: Output of ``get_column_map_from_sql``
            view_name: Name of the new view
            db: Database of the view

        Returns:
            The statement, or '' when no column has stored information
        """
        table = self._column_info_table()
        if table is None:
            return ""

        def quote(value: Any) -> str:
            return self.dbi.quote_string("" if value is None else str(value), ConnectionType.CONTROL_USER)

        values: List[str] = []
        for data_row in transformation_data:
            for column in column_map:
                if (
                    data_row.get("table_name") != column["table_name"]
                    or data_row.get("column_name") != column["refering_column"]
                ):
                    continue
                values.append(
                    "({})".format(
                        ", ".join(
                            quote(value)
                            for value in (
                                db,
                                view_name,
                                column.get("real_column") or column["refering_column"],
                                data_row.get("comment"),
                                data_row.get("mimetype"),
                                data_row.get("transformation"),
                                data_row.get("transformation_options"),
                            )
                        )
                    )
                )
                break
            if len(values) == len(column_map):
                break

        if not values:
            return ""

        return (
            f"INSERT IGNORE INTO {table} (`db_name`, `table_name`, `column_name`,"
            " `comment`, `mimetype`, `transformation`, `transformation_options`)"
            " VALUES " + ", ".join(values)
        )

    def get_column_map_from_sql(self, sql_query: str, view_columns: Sequence[str]) -> ColumnMap:
        """Map the result columns of ``sql_query`` to their source tables.

        Each entry holds ``table_name`` and ``refering_column``, plus
        ``real_column`` (the view's column name) when ``view_columns`` is
        given. Nothing is mapped when the view names a different number of
        columns than the query returns.
        """
        result = self.dbi.try_query(sql_query)
        if result is False:
            return []

        fields = self.dbi.get_fields_meta(result)
        if view_columns and len(view_columns) != len(fields):
            return []

        column_map: ColumnMap = []
        for index, field in enumerate(fields):
            entry: Dict[str, Any] = {"table_name": field.table, "refering_column": field.name}
            if view_columns:
                entry["real_column"] = view_columns[index]
            column_map.append(entry)
        return column_map
