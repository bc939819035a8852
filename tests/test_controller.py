#!/usr/bin/env python3
"""
主控制器测试

覆盖配置文件加载、请求选项构建以及通过控制器的端到端流程
"""

import io
import os
import shutil
import sys
import tempfile
import unittest
from unittest.mock import MagicMock

import yaml

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from fake_driver import FakeDriverModule, FakeVendor, default_tables
from sqlbridge.controller import BridgeController
from sqlbridge.core.errors import ConfigurationError
from sqlbridge.core.job_delegate import JobDelegate
from sqlbridge.core.mysql_vendor import MySQLVendor
from sqlbridge.core.options import ImportOptions
from sqlbridge.core.postgresql_vendor import PostgreSQLVendor
from sqlbridge.core.sql_manager import SqlManager


class TestBridgeController(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.temp_dir, 'config.yaml')
        self.test_config = {
            'database': {
                'connect': 'postgresql://pg.local:5432/hr',
                'username': 'etl',
            },
            'import': {
                'table': 'employees',
                'columns': 'id, name',
                'num_mappers': 4,
                'jar_file': 'employees.jar',
            },
            'conf': {'queue': 'etl'},
            'logging': {'level': 'DEBUG', 'file': None},
        }
        with open(self.config_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(self.test_config, f)

        self.delegate = MagicMock(spec=JobDelegate)
        self.module = FakeDriverModule(default_tables())

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _controller(self) -> BridgeController:
        controller = BridgeController(self.config_path, job_delegate=self.delegate)
        controller.manager = SqlManager(FakeVendor(self.module), controller.options, self.delegate)
        return controller

    def test_config_file_builds_options(self):
        controller = BridgeController(self.config_path)
        options = controller.options

        self.assertIsInstance(controller.manager.vendor, PostgreSQLVendor)
        self.assertEqual(options.connect_string, 'postgresql://pg.local:5432/hr')
        self.assertEqual(options.username, 'etl')
        self.assertIsNone(options.password)
        self.assertEqual(options.table_name, 'employees')
        self.assertEqual(options.columns, ['id', 'name'])
        self.assertEqual(options.num_mappers, 4)
        self.assertEqual(options.conf, {'queue': 'etl'})
        # 连接延迟到首次使用时才建立
        self.assertFalse(controller.manager.session.connected)

    def test_missing_config_file_uses_defaults(self):
        controller = BridgeController(os.path.join(self.temp_dir, 'absent.yaml'))
        self.assertIsInstance(controller.manager.vendor, MySQLVendor)
        self.assertEqual(controller.options.num_mappers, 4)

    def test_config_dict_takes_precedence(self):
        config = dict(self.test_config)
        config['database'] = {'connect': 'mysql://db/shop'}
        controller = BridgeController(self.config_path, config=config)
        self.assertIsInstance(controller.manager.vendor, MySQLVendor)

    def test_describe_table(self):
        controller = self._controller()
        summary = controller.describe_table()

        self.assertTrue(summary['success'])
        self.assertEqual(summary['primary_key'], 'id')
        self.assertEqual([c['name'] for c in summary['columns']], ['id', 'name', 'hired'])
        self.assertEqual(summary['columns'][0], {
            'name': 'id',
            'sql_type': 'INTEGER',
            'python_type': 'int',
            'hive_type': 'INT',
        })
        controller.close()

    def test_describe_missing_table(self):
        controller = self._controller()
        summary = controller.describe_table('missing')
        self.assertFalse(summary['success'])
        self.assertTrue(summary['error_message'])
        controller.close()

    def test_list_tables(self):
        controller = self._controller()
        self.assertEqual(controller.list_tables(), ['employees', 'events'])

        controller.manager.get_connection().fail_on = 'information_schema'
        self.assertEqual(controller.list_tables(), [])
        controller.close()

    def test_import_and_plan(self):
        controller = self._controller()

        self.assertEqual(controller.plan_import().column, 'id')
        controller.import_table(input_format='DataDrivenInputFormat')

        args = self.delegate.run_import.call_args[0]
        self.assertEqual(args[:4], ('employees', 'employees.jar', 'id', {'queue': 'etl'}))
        self.assertEqual(args[4].input_format, 'DataDrivenInputFormat')
        controller.close()

    def test_parallel_import_of_unkeyed_table_fails(self):
        controller = self._controller()
        with self.assertRaises(ConfigurationError) as ctx:
            controller.import_table('events')
        self.assertIn('events', str(ctx.exception))
        controller.close()

    def test_export(self):
        controller = self._controller()
        controller.export_table(export_dir='/warehouse/employees')

        context = self.delegate.run_export.call_args[0][0]
        self.assertEqual(context.table_name, 'employees')
        self.assertEqual(context.export_dir, '/warehouse/employees')
        controller.close()

    def test_run_query(self):
        controller = self._controller()
        sink = io.StringIO()
        controller.run_query('SELECT * FROM employees AS employees', sink)
        self.assertIn('Got 3 columns back', sink.getvalue())
        controller.close()


class TestImportOptions(unittest.TestCase):

    def test_credentials_pairing(self):
        self.assertEqual(ImportOptions(username='etl').credentials(), {'user': 'etl', 'password': ''})
        self.assertEqual(ImportOptions(username='etl', password='pw').credentials(),
                         {'user': 'etl', 'password': 'pw'})
        self.assertEqual(ImportOptions(password='pw').credentials(), {})

    def test_from_config_defaults(self):
        options = ImportOptions.from_config({})
        self.assertEqual(options.connect_string, '')
        self.assertEqual(options.num_mappers, 1)
        self.assertIsNone(options.columns)
        self.assertEqual(options.conf, {})

    def test_columns_list(self):
        options = ImportOptions.from_config({'import': {'columns': ['a', 'b'], 'where': 'a > 1'}})
        self.assertEqual(options.columns, ['a', 'b'])
        self.assertEqual(options.where_clause, 'a > 1')


if __name__ == '__main__':
    unittest.main()
