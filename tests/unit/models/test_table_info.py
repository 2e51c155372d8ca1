# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""Unit tests for the catalog table data models."""

import unittest

from IBMCloud.SqlQuery.core.errors import DecodeError
from IBMCloud.SqlQuery.models.table_info import (
    ColumnInformation,
    TableInformation,
    TableList,
    TableMetadata,
    TableType,
)

from tests.fixtures.test_data import (
    SAMPLE_TABLE_INFORMATION,
    SAMPLE_TABLE_LIST,
    SAMPLE_TABLE_LIST_MIXED,
)


class TestColumnInformation(unittest.TestCase):
    """Test cases for ColumnInformation."""

    def test_from_dict(self):
        column = ColumnInformation.from_dict({"name": "Name", "type": "string", "nullable": True})
        self.assertEqual(column.name, "Name")
        self.assertEqual(column.type, "string")
        self.assertTrue(column.nullable)

    def test_nullable_optional(self):
        column = ColumnInformation.from_dict({"name": "Country", "type": "string"})
        self.assertIsNone(column.nullable)
        self.assertEqual(column.to_dict(), {"name": "Country", "type": "string"})

    def test_missing_type_raises(self):
        with self.assertRaises(DecodeError):
            ColumnInformation.from_dict({"name": "Name"})


class TestTableList(unittest.TestCase):
    """Test cases for TableList."""

    def test_from_dict(self):
        tables = TableList.from_dict(SAMPLE_TABLE_LIST)
        self.assertEqual(tables.tables, ["customer_address"])
        self.assertEqual(len(tables), 1)
        self.assertEqual(tables[0].name, "customer_address")
        self.assertIs(tables[0].type, TableType.TABLE)

    def test_iteration_yields_metadata(self):
        tables = TableList.from_dict(SAMPLE_TABLE_LIST_MIXED)
        names = [meta.name for meta in tables]
        self.assertEqual(names, ["customer_address", "orders_view", "archive"])
        self.assertIsInstance(tables[0], TableMetadata)

    def test_unknown_type_kept_as_string(self):
        tables = TableList.from_dict(SAMPLE_TABLE_LIST_MIXED)
        self.assertIs(tables[1].type, TableType.VIEW)
        self.assertEqual(tables[2].type, "external")

    def test_get_by_name(self):
        tables = TableList.from_dict(SAMPLE_TABLE_LIST_MIXED)
        self.assertEqual(tables.get("orders_view").type, "view")
        self.assertIsNone(tables.get("missing"))

    def test_missing_tables_metadata_raises(self):
        with self.assertRaises(DecodeError):
            TableList.from_dict({"tables": ["a"]})

    def test_missing_tables_raises(self):
        with self.assertRaises(DecodeError):
            TableList.from_dict({"tables_metadata": []})

    def test_to_dict(self):
        self.assertEqual(TableList.from_dict(SAMPLE_TABLE_LIST).to_dict(), SAMPLE_TABLE_LIST)


class TestTableInformation(unittest.TestCase):
    """Test cases for TableInformation."""

    def setUp(self):
        self.info = TableInformation.from_dict(SAMPLE_TABLE_INFORMATION)

    def test_from_dict(self):
        self.assertEqual(self.info.name, "customer_address")
        self.assertIs(self.info.type, TableType.TABLE)
        self.assertEqual([c.name for c in self.info.columns], ["Name", "ZipCode", "Country"])
        self.assertFalse(self.info.columns[1].nullable)

    def test_column_lookup(self):
        self.assertEqual(self.info.column("ZipCode").type, "integer")
        self.assertIsNone(self.info.column("Nope"))

    def test_missing_columns_raises(self):
        with self.assertRaises(DecodeError):
            TableInformation.from_dict({"name": "t", "type": "table"})

    def test_columns_must_be_list(self):
        with self.assertRaises(DecodeError):
            TableInformation.from_dict({"name": "t", "type": "table", "columns": {"name": "x"}})

    def test_to_dict(self):
        self.assertEqual(self.info.to_dict(), SAMPLE_TABLE_INFORMATION)


if __name__ == "__main__":
    unittest.main()
