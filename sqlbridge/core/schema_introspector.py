"""
表结构探查模块

查询有哪些表、表有哪些列及其类型、主键是哪一列。
元数据查询失败不会抛出异常，而是返回带错误信息的MetadataResult
"""

import logging
from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

from .errors import CatalogQueryError, DBConnectionError, ExecutionError
from .session_manager import SessionManager
from .vendor import ColumnDescriptor

T = TypeVar('T')


@dataclass
class MetadataResult(Generic[T]):
    """元数据查询结果"""
    success: bool
    value: Optional[T] = None
    error: Optional[CatalogQueryError] = None

    @property
    def error_message(self) -> str:
        return str(self.error) if self.error else ""

    @classmethod
    def of(cls, value: T) -> 'MetadataResult[T]':
        return cls(success=True, value=value)

    @classmethod
    def unknown(cls, message: str) -> 'MetadataResult[T]':
        return cls(success=False, error=CatalogQueryError(message))


@dataclass
class TableSchema:
    """表结构：按目录顺序排列的列，以及可选的主键列"""
    table_name: str
    columns: List[ColumnDescriptor] = field(default_factory=list)
    primary_key: Optional[str] = None

    @property
    def column_names(self) -> List[str]:
        return [column.display_name for column in self.columns]

    def column_types(self) -> dict:
        return {column.display_name: column.sql_type for column in self.columns}


class SchemaIntrospector:
    """
    表结构探查器

    连接失败(DBConnectionError)对管理器是致命的，照常抛出，不降级为unknown结果
    """

    def __init__(self, session: SessionManager):
        """
        初始化探查器

        Args:
            session: 会话管理器
        """
        self.session = session
        self.vendor = session.vendor
        self.logger = logging.getLogger(__name__)

    def list_tables(self) -> MetadataResult[List[str]]:
        """
        列出目录中的所有表

        Returns:
            按目录遍历顺序排列的表名
        """
        statement, args = self.vendor.list_tables_query()
        result = self._fetch_first_column(statement, args, "读取表列表失败")
        if result.success:
            self.logger.debug(f"共发现 {len(result.value)} 张表")
        return result

    def list_databases(self) -> MetadataResult[List[str]]:
        """
        列出数据库

        Returns:
            数据库名称列表，厂商不支持时返回unknown结果
        """
        statement = self.vendor.list_databases_query()
        if statement is None:
            message = f"{self.vendor.name} 未实现列出数据库"
            self.logger.error(message)
            return MetadataResult.unknown(message)
        return self._fetch_first_column(statement, (), "读取数据库列表失败")

    def get_column_names(self, table_name: str) -> MetadataResult[List[str]]:
        """
        获取表的列名

        Args:
            table_name: 表名

        Returns:
            按目录顺序排列的列名
        """
        result = self._describe(self.vendor.column_names_query(table_name))
        if not result.success:
            return MetadataResult(success=False, error=result.error)
        return MetadataResult.of([column.display_name for column in result.value])

    def get_column_types(self, table_name: str) -> MetadataResult[dict]:
        """
        获取表的列类型

        Args:
            table_name: 表名

        Returns:
            列名到SqlType代码的映射，顺序与目录一致
        """
        result = self._describe(self.vendor.column_types_query(table_name))
        if not result.success:
            return MetadataResult(success=False, error=result.error)
        return MetadataResult.of({column.display_name: column.sql_type for column in result.value})

    def get_primary_key(self, table_name: str) -> MetadataResult[Optional[str]]:
        """
        获取表的主键列

        只支持单列主键：返回目录给出的第一个主键列。没有主键是正常情况，
        查询失败同样按没有主键处理，但结果中会带上错误

        Args:
            table_name: 表名

        Returns:
            主键列名，没有主键时为None
        """
        statement, args = self.vendor.primary_key_query(table_name)
        try:
            with self.session.query(statement, *args) as cursor:
                row = cursor.fetchone()
        except DBConnectionError:
            raise
        except Exception as e:
            message = f"读取表 {table_name} 的主键失败: {str(e)}"
            self.logger.error(message)
            return MetadataResult(success=False, error=CatalogQueryError(message))

        primary_key = row[0] if row else None
        if primary_key is None:
            self.logger.debug(f"表 {table_name} 没有主键")
        return MetadataResult.of(primary_key)

    def get_table_schema(self, table_name: str) -> MetadataResult[TableSchema]:
        """
        获取完整表结构

        Args:
            table_name: 表名

        Returns:
            表结构，列信息读取失败时返回unknown结果
        """
        columns = self._describe(self.vendor.column_types_query(table_name))
        if not columns.success:
            return MetadataResult(success=False, error=columns.error)

        primary_key = self.get_primary_key(table_name)
        return MetadataResult.of(TableSchema(
            table_name=table_name,
            columns=columns.value,
            primary_key=primary_key.value
        ))

    def read_table(self, table_name: str, columns: Optional[List[str]] = None):
        """
        读取整张表

        生成的查询为表设置别名，兼容要求每个关系都带别名的数据库

        Args:
            table_name: 表名
            columns: 要读取的列，为空时通过get_column_names获取

        Returns:
            已执行的游标，由调用方消费，下一次执行或release时释放

        Raises:
            ExecutionError: 无法确定列名或查询执行失败
        """
        if columns is None:
            names = self.get_column_names(table_name)
            if not names.success:
                raise ExecutionError(f"无法获取表 {table_name} 的列名: {names.error_message}")
            columns = names.value

        escaped_table = self.vendor.escape_table_name(table_name)
        if columns:
            projection = ', '.join(self.vendor.escape_column_name(c) for c in columns)
        else:
            projection = '*'

        statement = f"SELECT {projection} FROM {escaped_table} AS {self.vendor.table_alias(table_name)}"
        self.logger.debug(f"读取表使用的语句: {statement}")
        return self.session.execute(statement)

    def _describe(self, statement: str) -> MetadataResult[List[ColumnDescriptor]]:
        """执行零行查询，只读取游标元数据，不获取任何数据行"""
        try:
            with self.session.query(statement) as cursor:
                columns = self.vendor.describe_columns(cursor)
        except DBConnectionError:
            raise
        except Exception as e:
            message = f"读取列元数据失败: {str(e)}"
            self.logger.error(message)
            return MetadataResult.unknown(message)
        return MetadataResult.of(columns)

    def _fetch_first_column(self, statement: str, args: tuple, error_prefix: str) -> MetadataResult[List[str]]:
        try:
            with self.session.query(statement, *args) as cursor:
                values = [row[0] for row in cursor.fetchall()]
        except DBConnectionError:
            raise
        except Exception as e:
            message = f"{error_prefix}: {str(e)}"
            self.logger.error(message)
            return MetadataResult.unknown(message)
        return MetadataResult.of(values)
