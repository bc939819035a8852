"""
异常定义模块

连接层统一使用的异常类型
"""


class SqlBridgeError(Exception):
    """连接层异常基类"""


class DBConnectionError(SqlBridgeError):
    """驱动无法加载或数据库无法连接，对当前管理器实例是致命错误"""


class CatalogQueryError(SqlBridgeError):
    """元数据查询失败，不会被抛出，而是携带在MetadataResult中返回"""


class ExecutionError(SqlBridgeError):
    """调用方显式发起的查询执行失败"""

    def __init__(self, message: str, statement: str = ""):
        super().__init__(message)
        self.statement = statement


class ConfigurationError(SqlBridgeError):
    """配置错误，例如并行度大于1但找不到可用的拆分列"""

    def __init__(self, message: str, table_name: str = ""):
        super().__init__(message)
        self.table_name = table_name


class JobError(SqlBridgeError):
    """作业委托执行导入或导出失败"""
