"""
连接管理器

把厂商实现、会话管理、表结构探查和拆分列推断组合在一起，
并负责把解析好的导入/导出请求交给作业委托
"""

import logging
import sys
from typing import Dict, List, Optional, TextIO

from .errors import ExecutionError
from .hive_types import HiveTypePolicy
from .job_delegate import ExportJobContext, ImportJobContext, JobDelegate
from .options import ImportOptions
from .partition_planner import PartitionPlanner, PartitionSpec
from .result_printer import print_header, print_result_set
from .schema_introspector import MetadataResult, SchemaIntrospector, TableSchema
from .session_manager import SessionManager
from .type_mapper import TypeMapping, resolve_type
from .vendor import VendorManager


class SqlManager:
    """通用SQL数据库连接管理器"""

    def __init__(self, vendor: VendorManager, options: ImportOptions,
                 job_delegate: Optional[JobDelegate] = None,
                 hive_policy: Optional[HiveTypePolicy] = None):
        """
        初始化连接管理器

        Args:
            vendor: 厂商管理器
            options: 请求选项
            job_delegate: 分布式作业委托，只在导入/导出时需要
            hive_policy: Hive类型映射策略
        """
        self.vendor = vendor
        self.options = options
        self.job_delegate = job_delegate
        self.hive_policy = hive_policy or HiveTypePolicy()

        self.session = SessionManager(vendor, options)
        self.introspector = SchemaIntrospector(self.session)
        self.planner = PartitionPlanner(self.introspector)
        self.logger = logging.getLogger(__name__)

    # 会话

    def get_connection(self):
        return self.session.get_connection()

    def execute(self, statement: str, *args):
        return self.session.execute(statement, *args)

    def release(self):
        self.session.release()

    def close(self):
        self.session.close()

    # 表结构

    def list_tables(self) -> MetadataResult[List[str]]:
        return self.introspector.list_tables()

    def list_databases(self) -> MetadataResult[List[str]]:
        return self.introspector.list_databases()

    def get_column_names(self, table_name: str) -> MetadataResult[List[str]]:
        return self.introspector.get_column_names(table_name)

    def get_column_types(self, table_name: str) -> MetadataResult[Dict]:
        return self.introspector.get_column_types(table_name)

    def get_primary_key(self, table_name: str) -> MetadataResult[Optional[str]]:
        return self.introspector.get_primary_key(table_name)

    def get_table_schema(self, table_name: str) -> MetadataResult[TableSchema]:
        return self.introspector.get_table_schema(table_name)

    def read_table(self, table_name: str, columns: Optional[List[str]] = None):
        return self.introspector.read_table(table_name, columns)

    # 类型映射

    def to_python_type(self, sql_type: int) -> Optional[str]:
        """固定表优先，没有时交给厂商覆盖"""
        return self.resolve_type(sql_type).python_type

    def to_hive_type(self, sql_type: int) -> Optional[str]:
        return self.hive_policy.to_hive_type(sql_type)

    def resolve_type(self, sql_type: int) -> TypeMapping:
        return resolve_type(sql_type, self.vendor.python_type_override, self.hive_policy)

    def get_type_mappings(self, table_name: str) -> MetadataResult[Dict[str, TypeMapping]]:
        """
        获取表中每一列的类型映射

        Args:
            table_name: 表名

        Returns:
            列名到类型映射的字典，不支持的列其python_type为None
        """
        types = self.get_column_types(table_name)
        if not types.success:
            return MetadataResult(success=False, error=types.error)

        mappings = {}
        for column, sql_type in types.value.items():
            mapping = self.resolve_type(sql_type) if sql_type is not None else TypeMapping(sql_type)
            if not mapping.supported:
                self.logger.warning(f"表 {table_name} 的列 {column} 类型不受支持: {sql_type}")
            mappings[column] = mapping
        return MetadataResult.of(mappings)

    # 拆分与作业

    def get_split_column(self, table_name: str,
                         options: Optional[ImportOptions] = None) -> PartitionSpec:
        opts = options or self.options
        return self.planner.choose_split_column(table_name, opts.split_by, opts.num_mappers)

    def import_table(self, context: ImportJobContext):
        """
        启动表导入

        解析拆分列后把(表名, 拆分列, jar文件, 运行配置)交给作业委托

        Raises:
            ConfigurationError: 多路导入但找不到拆分列
            JobError: 作业委托执行失败
        """
        delegate = self._require_delegate()
        opts = context.options
        split = self.get_split_column(context.table_name, opts)

        self.logger.info(f"开始导入表 {context.table_name}, 拆分列: {split.column}, 并行数: {opts.num_mappers}")
        return delegate.run_import(context.table_name, context.jar_file, split.column, opts.conf, context)

    def export_table(self, context: ExportJobContext):
        """把导出请求交给作业委托，本身不搬运数据"""
        delegate = self._require_delegate()
        self.logger.info(f"开始导出到表 {context.table_name}")
        return delegate.run_export(context)

    def _require_delegate(self) -> JobDelegate:
        if self.job_delegate is None:
            raise ExecutionError("未配置作业委托，无法启动分布式作业")
        return self.job_delegate

    # 调试

    def format_and_print(self, cursor, sink: TextIO):
        """
        打印游标元数据和全部数据行，结束后关闭游标并提交事务

        Args:
            cursor: 已执行的游标
            sink: 文本输出
        """
        try:
            try:
                columns = cursor.description or ()
                schema, table = self.vendor.result_origin(cursor)
                print_header(sink, len(columns), schema, table)
            except Exception as e:
                self.logger.error(f"读取结果集元数据失败: {str(e)}")

            try:
                print_result_set(sink, cursor)
            except Exception as e:
                self.logger.error(f"输出结果失败: {str(e)}")
        finally:
            self.session.finish(cursor)

    def exec_and_print(self, statement: str, sink: Optional[TextIO] = None):
        """
        执行任意SQL并打印结果，用于调试

        执行失败只记录日志，不输出任何内容
        """
        try:
            cursor = self.execute(statement)
        except ExecutionError as e:
            self.logger.error(f"执行语句失败: {str(e)}")
            return

        self.format_and_print(cursor, sink or sys.stdout)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
