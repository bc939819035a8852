"""
关系数据库到分布式批处理平台的连接层

主要功能:
1. 探查表、列、列类型和主键
2. 推断并行读取使用的拆分列
3. 将SQL类型映射为Python类型和Hive类型
4. 安全地管理元数据查询所用的连接和游标
5. 把解析好的导入/导出请求交给分布式作业委托

Version: 1.0.0
"""

__version__ = "1.0.0"

from .core.options import ImportOptions
from .core.sql_manager import SqlManager
from .core.vendor_factory import VendorFactory
from .controller import BridgeController

__all__ = [
    'ImportOptions',
    'SqlManager',
    'VendorFactory',
    'BridgeController'
]
