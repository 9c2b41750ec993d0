"""Unit tests for database records and result sets."""

from decimal import Decimal

import pytest

from dbfacade.database.models import (
    DATABASE_SORT_COLUMNS,
    TABLE_SORT_COLUMNS,
    BufferedResult,
    ColumnInfo,
    DatabaseStats,
    FieldMetadata,
    TableStatus,
)


class TestBufferedResult:
    """Test cases for BufferedResult."""

    @pytest.fixture
    def result(self):
        return BufferedResult(
            ["Variable_name", "Value"],
            [["autocommit", "ON"], ["sql_mode", ""], ["wait_timeout", "28800"]],
        )

    def test_fetch_family_advances(self, result):
        """Test the cursor moves across fetch calls."""
        assert result.fetch_row() == ("autocommit", "ON")
        assert result.fetch_assoc() == {"Variable_name": "sql_mode", "Value": ""}
        assert result.fetch_value("Value") == "28800"
        assert result.fetch_row() is None

    def test_fetch_all_consumes_remaining(self, result):
        """Test bulk fetches start at the cursor."""
        result.fetch_row()

        assert result.fetch_all_keyed() == {"sql_mode": "", "wait_timeout": "28800"}
        assert result.fetch_all_assoc() == []

    def test_seek(self, result):
        """Test repositioning the cursor."""
        result.fetch_all_column(0)

        assert result.seek(1) is True
        assert result.fetch_all_column("Value") == ["", "28800"]
        assert result.seek(10) is False

    def test_fetch_value_out_of_range(self, result):
        """Test unknown columns yield None."""
        assert result.fetch_value(5) is None
        assert result.fetch_value("missing") is None

    def test_iteration(self, result):
        """Test iterating yields mappings."""
        assert [row["Variable_name"] for row in result] == ["autocommit", "sql_mode", "wait_timeout"]
        assert result.num_rows() == 3

    def test_fields_meta_default(self, result):
        """Test metadata derived from column names."""
        assert result.get_fields_meta() == [FieldMetadata(name="Variable_name"), FieldMetadata(name="Value")]
        assert result.get_field_names() == ["Variable_name", "Value"]


class TestTableStatus:
    """Test cases for TableStatus."""

    def test_from_show_table_status(self):
        """Test numeric coercion and extras."""
        status = TableStatus.from_show_table_status(
            {
                "Name": "orders",
                "Engine": "InnoDB",
                "Rows": "12",
                "Data_length": Decimal("16384"),
                "Index_length": "4096",
                "Comment": "",
                "Temporary": "N",
            },
            "shop",
        )

        assert status.rows == 12
        assert status.data_length == 16384
        assert status.total_length == 20480
        assert status.table_type == "BASE TABLE"
        assert status.is_view is False
        assert status.extra == {"Temporary": "N"}

    def test_view_detection(self):
        """Test views are recognized by a NULL engine and a VIEW comment."""
        status = TableStatus.from_show_table_status({"Name": "recent", "Engine": None, "Comment": "VIEW"}, "shop")

        assert status.table_type == "VIEW"
        assert status.is_view is True

    def test_from_information_schema(self):
        """Test canonical keys and extras."""
        status = TableStatus.from_information_schema(
            {
                "TABLE_CATALOG": "def",
                "TABLE_SCHEMA": "shop",
                "TABLE_NAME": "orders",
                "TABLE_TYPE": "BASE TABLE",
                "ENGINE": "MyISAM",
                "DATA_FREE": "128",
            }
        )

        assert status.schema == "shop"
        assert status.data_free == 128
        assert status.extra == {"TABLE_CATALOG": "def"}

    def test_value_by_legacy_key(self):
        """Test lookups by SHOW TABLE STATUS column."""
        status = TableStatus(schema="shop", name="orders", engine="InnoDB", extra={"Temporary": "N"})

        assert status.value("Engine") == "InnoDB"
        assert status.value("Temporary") == "N"
        assert status.value("Unknown") is None

    def test_as_row_has_both_key_sets(self):
        """Test every field appears under both names."""
        row = TableStatus(schema="shop", name="orders", engine="Aria", rows=5).as_row()

        assert row["Name"] == row["TABLE_NAME"] == "orders"
        assert row["Rows"] == row["TABLE_ROWS"] == 5
        assert row["Type"] == "Aria"
        assert row["Db"] == row["TABLE_SCHEMA"] == "shop"

    def test_non_numeric_value_kept(self):
        """Test values that are not numbers are kept as-is."""
        status = TableStatus.from_show_table_status({"Name": "t", "Rows": "n/a"}, "db")

        assert status.rows == "n/a"

    def test_sort_columns(self):
        """Test the legacy names accepted for sorting."""
        assert TABLE_SORT_COLUMNS["Data_length"] == "data_length"
        assert "Name" in TABLE_SORT_COLUMNS


class TestDatabaseStats:
    """Test cases for DatabaseStats."""

    def test_without_statistics(self):
        """Test aggregates stay absent."""
        stats = DatabaseStats.from_information_schema({"SCHEMA_NAME": b"shop", "DEFAULT_COLLATION_NAME": "utf8mb4_bin"})

        assert stats.schema_name == "shop"
        assert stats.tables is None
        assert stats.as_row() == {"SCHEMA_NAME": "shop", "DEFAULT_COLLATION_NAME": "utf8mb4_bin"}

    def test_add_table_skips_innodb_free_space(self):
        """Test InnoDB free space does not count as overhead."""
        stats = DatabaseStats(schema_name="shop")
        stats.start_statistics()

        stats.add_table(TableStatus(schema="shop", name="a", engine="InnoDB", rows=2, data_length=100, data_free=4096))
        stats.add_table(TableStatus(schema="shop", name="b", engine="MyISAM", index_length=50, data_free=20))

        assert stats.tables == 2
        assert stats.table_rows == 2
        assert stats.length == 150
        assert stats.data_free == 20

    def test_value(self):
        """Test lookups by column name."""
        stats = DatabaseStats(schema_name="shop", default_collation_name="utf8mb4_bin", length=10)

        assert stats.value("SCHEMA_NAME") == "shop"
        assert stats.value("DEFAULT_COLLATION_NAME") == "utf8mb4_bin"
        assert stats.value("SCHEMA_LENGTH") == 10
        assert stats.value("UNKNOWN") is None
        assert "SCHEMA_LENGTH" in DATABASE_SORT_COLUMNS


class TestColumnInfo:
    """Test cases for ColumnInfo."""

    def test_from_row(self):
        """Test a SHOW COLUMNS row."""
        column = ColumnInfo.from_row(
            {"Field": "email", "Type": "varchar(255)", "Null": "YES", "Key": "UNI", "Default": None, "Extra": ""}
        )

        assert column.name == "email"
        assert column.is_nullable is True
        assert column.is_primary_key is False
        assert column.comment is None
