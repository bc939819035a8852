"""
类型映射模块

SQL类型代码到宿主(Python)类型与仓库类型的映射。纯函数，无状态
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, Optional

from .lob import BlobRef, ClobRef


class SqlType(IntEnum):
    """标准SQL类型代码（与JDBC java.sql.Types取值一致）"""
    BIT = -7
    TINYINT = -6
    SMALLINT = 5
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    NUMERIC = 2
    DECIMAL = 3
    CHAR = 1
    VARCHAR = 12
    LONGVARCHAR = -1
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    BINARY = -2
    VARBINARY = -3
    LONGVARBINARY = -4
    NULL = 0
    OTHER = 1111
    JAVA_OBJECT = 2000
    DISTINCT = 2001
    STRUCT = 2002
    ARRAY = 2003
    BLOB = 2004
    CLOB = 2005
    REF = 2006
    BOOLEAN = 16
    ROWID = -8
    NCHAR = -15
    NVARCHAR = -9
    LONGNVARCHAR = -16
    NCLOB = 2011
    SQLXML = 2009


def qualified_name(cls) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


PYTHON_TYPES: Dict[int, str] = {
    SqlType.INTEGER: 'int',
    SqlType.TINYINT: 'int',
    SqlType.SMALLINT: 'int',
    SqlType.BIGINT: 'int',
    SqlType.VARCHAR: 'str',
    SqlType.CHAR: 'str',
    SqlType.LONGVARCHAR: 'str',
    SqlType.NUMERIC: 'decimal.Decimal',
    SqlType.DECIMAL: 'decimal.Decimal',
    SqlType.BIT: 'bool',
    SqlType.BOOLEAN: 'bool',
    SqlType.REAL: 'float',
    SqlType.FLOAT: 'float',
    SqlType.DOUBLE: 'float',
    SqlType.DATE: 'datetime.date',
    SqlType.TIME: 'datetime.time',
    SqlType.TIMESTAMP: 'datetime.datetime',
    SqlType.BINARY: 'bytes',
    SqlType.VARBINARY: 'bytes',
    SqlType.CLOB: qualified_name(ClobRef),
    SqlType.BLOB: qualified_name(BlobRef),
    SqlType.LONGVARBINARY: qualified_name(BlobRef),
}


@dataclass
class TypeMapping:
    """单个SQL类型的映射结果"""
    sql_type: int
    python_type: Optional[str] = None
    hive_type: Optional[str] = None

    @property
    def supported(self) -> bool:
        return self.python_type is not None


def type_name(sql_type: int) -> str:
    """返回类型代码的可读名称"""
    try:
        return SqlType(sql_type).name
    except ValueError:
        return f"UNKNOWN({sql_type})"


def to_python_type(sql_type: int) -> Optional[str]:
    """
    将SQL类型代码映射为Python类型名

    Args:
        sql_type: SQL类型代码

    Returns:
        Python类型名；固定表中没有的类型返回None，由厂商层决定是否提供映射
    """
    return PYTHON_TYPES.get(sql_type)


def to_hive_type(sql_type: int, policy=None) -> Optional[str]:
    """
    将SQL类型代码映射为Hive类型名，委托给可替换的映射策略

    Args:
        sql_type: SQL类型代码
        policy: Hive类型映射策略，默认为HiveTypePolicy

    Returns:
        Hive类型名，无法映射时返回None
    """
    if policy is None:
        from .hive_types import HiveTypePolicy
        policy = HiveTypePolicy()
    return policy.to_hive_type(sql_type)


def resolve_type(sql_type: int,
                 override: Optional[Callable[[int], Optional[str]]] = None,
                 policy=None) -> TypeMapping:
    """
    解析SQL类型的完整映射

    固定表中没有Python类型时调用厂商提供的override；仍然没有结果则视为不支持

    Args:
        sql_type: SQL类型代码
        override: 厂商层的类型解析函数
        policy: Hive类型映射策略

    Returns:
        类型映射结果
    """
    python_type = to_python_type(sql_type)
    if python_type is None and override is not None:
        python_type = override(sql_type)
    return TypeMapping(
        sql_type=sql_type,
        python_type=python_type,
        hive_type=to_hive_type(sql_type, policy)
    )
