"""
核心模块
包含会话管理、表结构探查、类型映射、拆分列推断以及各厂商实现
"""

from .errors import (
    CatalogQueryError,
    ConfigurationError,
    DBConnectionError,
    ExecutionError,
    JobError,
    SqlBridgeError,
)
from .options import ImportOptions
from .type_mapper import SqlType, TypeMapping
from .vendor import ColumnDescriptor, VendorManager
from .session_manager import SessionManager
from .schema_introspector import MetadataResult, SchemaIntrospector, TableSchema
from .partition_planner import PartitionPlanner, PartitionSpec
from .job_delegate import ExportJobContext, ImportJobContext, JobDelegate
from .sql_manager import SqlManager
from .vendor_factory import VendorFactory

__all__ = [
    'CatalogQueryError',
    'ConfigurationError',
    'DBConnectionError',
    'ExecutionError',
    'JobError',
    'SqlBridgeError',
    'ImportOptions',
    'SqlType',
    'TypeMapping',
    'ColumnDescriptor',
    'VendorManager',
    'SessionManager',
    'MetadataResult',
    'SchemaIntrospector',
    'TableSchema',
    'PartitionPlanner',
    'PartitionSpec',
    'ExportJobContext',
    'ImportJobContext',
    'JobDelegate',
    'SqlManager',
    'VendorFactory',
]
