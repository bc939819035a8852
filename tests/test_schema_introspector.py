#!/usr/bin/env python3
"""
表结构探查测试
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from fake_driver import FakeDriverModule, FakeTable, FakeVendor, default_tables
from sqlbridge.core.errors import CatalogQueryError, DBConnectionError, ExecutionError
from sqlbridge.core.options import ImportOptions
from sqlbridge.core.schema_introspector import SchemaIntrospector
from sqlbridge.core.session_manager import SessionManager
from sqlbridge.core.type_mapper import SqlType


class TestSchemaIntrospector(unittest.TestCase):

    def setUp(self):
        tables = default_tables()
        tables['report'] = FakeTable(
            'report',
            [('region', SqlType.VARCHAR, 'region'),
             ('', SqlType.BIGINT, 'total')],
            rows=[('north', 10)]
        )
        tables['audit'] = FakeTable(
            'audit',
            [('tenant', SqlType.INTEGER, 'tenant'),
             ('seq', SqlType.BIGINT, 'seq')],
            primary_key=['tenant', 'seq']
        )
        self.module = FakeDriverModule(tables, databases=['shop', 'hr'])
        self.vendor = FakeVendor(self.module)
        self.session = SessionManager(self.vendor, ImportOptions(connect_string='fake://db'))
        self.introspector = SchemaIntrospector(self.session)

    def tearDown(self):
        self.session.close()

    @property
    def connection(self):
        return self.session.get_connection()

    def assertNoOpenCursors(self):
        self.assertEqual(self.connection.open_cursors, 0)
        self.assertIsNone(self.session.open_cursor)
        self.assertLessEqual(self.connection.max_open_cursors, 1)

    def test_employees_scenario(self):
        types = self.introspector.get_column_types('employees')
        primary_key = self.introspector.get_primary_key('employees')

        self.assertTrue(types.success)
        self.assertEqual(types.value, {
            'id': SqlType.INTEGER,
            'name': SqlType.VARCHAR,
            'hired': SqlType.DATE,
        })
        self.assertEqual(primary_key.value, 'id')
        self.assertNoOpenCursors()

    def test_column_names_follow_catalog_order(self):
        names = self.introspector.get_column_names('employees')
        self.assertEqual(names.value, ['id', 'name', 'hired'])

    def test_names_and_types_are_consistent(self):
        for table in ('employees', 'events', 'report'):
            with self.subTest(table=table):
                names = self.introspector.get_column_names(table).value
                types = self.introspector.get_column_types(table).value
                self.assertEqual(len(names), len(types))
                self.assertEqual(names, list(types.keys()))

    def test_empty_column_name_falls_back_to_label(self):
        names = self.introspector.get_column_names('report')
        self.assertEqual(names.value, ['region', 'total'])
        self.assertTrue(all(names.value))

    def test_zero_row_query_fetches_no_rows(self):
        types = self.introspector.get_column_types('employees')
        self.assertEqual(len(types.value), 3)

        statement, _ = self.connection.statements[-1]
        self.assertIn('WHERE 1=0', statement)
        self.assertEqual(sum(c.fetched_rows for c in self.connection.cursors), 0)

    def test_zero_row_query_on_empty_table_returns_metadata(self):
        types = self.introspector.get_column_types('events')
        self.assertEqual(types.value, {'ts': SqlType.TIMESTAMP, 'payload': SqlType.CLOB})

    def test_introspection_commits_after_each_read(self):
        self.introspector.get_column_names('employees')
        self.introspector.get_column_types('employees')
        self.assertEqual(self.connection.commits, 2)

    def test_missing_table_is_unknown_not_error(self):
        commits = self.connection.commits
        with self.assertLogs('sqlbridge.core.schema_introspector', level='ERROR'):
            names = self.introspector.get_column_names('missing')
            types = self.introspector.get_column_types('missing')

        self.assertFalse(names.success)
        self.assertIsNone(names.value)
        self.assertIsInstance(names.error, CatalogQueryError)
        self.assertFalse(types.success)
        self.assertIn('missing', types.error_message)
        self.assertEqual(self.connection.commits, commits + 2)
        self.assertNoOpenCursors()

    def test_failed_read_does_not_break_later_primary_key_lookup(self):
        """失败的元数据查询之后事务被结束，后续主键查询仍然可用"""
        self.connection.abort_on_error = True

        self.assertFalse(self.introspector.get_column_names('missing').success)
        self.assertFalse(self.connection.aborted)

        primary_key = self.introspector.get_primary_key('employees')
        self.assertTrue(primary_key.success)
        self.assertEqual(primary_key.value, 'id')
        self.assertNoOpenCursors()

    def test_failure_while_reading_metadata_still_cleans_up(self):
        connection = self.connection

        def broken(cursor):
            raise ValueError("bad metadata")

        self.vendor.describe_columns = broken
        result = self.introspector.get_column_types('employees')

        self.assertFalse(result.success)
        self.assertEqual(connection.open_cursors, 0)
        self.assertEqual(connection.commits, 1)

    def test_connection_failure_is_not_swallowed(self):
        self.module.fail_connect = True
        with self.assertRaises(DBConnectionError):
            self.introspector.get_column_names('employees')

    def test_list_tables(self):
        tables = self.introspector.list_tables()
        self.assertEqual(tables.value, ['employees', 'events', 'report', 'audit'])
        self.assertNoOpenCursors()

    def test_list_tables_failure(self):
        self.connection.fail_on = 'information_schema.tables'
        tables = self.introspector.list_tables()
        self.assertFalse(tables.success)
        self.assertNoOpenCursors()

    def test_list_databases(self):
        self.assertFalse(self.introspector.list_databases().success)

        self.vendor.with_databases = True
        self.assertEqual(self.introspector.list_databases().value, ['shop', 'hr'])

    def test_primary_key_absent(self):
        result = self.introspector.get_primary_key('events')
        self.assertTrue(result.success)
        self.assertIsNone(result.value)

    def test_composite_key_returns_first_column(self):
        self.assertEqual(self.introspector.get_primary_key('audit').value, 'tenant')
        self.assertNoOpenCursors()

    def test_primary_key_lookup_failure_reports_no_key(self):
        result = self.introspector.get_primary_key('missing')
        self.assertFalse(result.success)
        self.assertIsNone(result.value)
        self.assertNoOpenCursors()

    def test_table_schema(self):
        schema = self.introspector.get_table_schema('employees').value
        self.assertEqual(schema.column_names, ['id', 'name', 'hired'])
        self.assertEqual(schema.primary_key, 'id')
        self.assertEqual(schema.column_types()['hired'], SqlType.DATE)

    def test_read_table_resolves_columns_and_aliases_table(self):
        cursor = self.introspector.read_table('employees')

        statement, _ = self.connection.statements[-1]
        self.assertEqual(statement, 'SELECT id, name, hired FROM employees AS employees')
        self.assertEqual(len(cursor.fetchall()), 2)
        self.assertIs(self.session.open_cursor, cursor)

    def test_read_table_with_explicit_columns(self):
        cursor = self.introspector.read_table('employees', ['name'])
        self.assertEqual(cursor.fetchall(), [('Ada',), ('Linus',)])

    def test_read_table_unknown_columns_raises(self):
        with self.assertRaises(ExecutionError):
            self.introspector.read_table('missing')


if __name__ == '__main__':
    unittest.main()
