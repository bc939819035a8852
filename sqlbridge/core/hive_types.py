"""
Hive类型映射策略

将SQL类型代码映射为数据仓库(Hive)列类型。独立于宿主类型表，
更换仓库格式时只需替换策略对象
"""

import logging
from typing import Dict, Optional

from .type_mapper import SqlType


class HiveTypePolicy:
    """默认的Hive类型映射策略"""

    TYPE_MAP: Dict[int, str] = {
        SqlType.INTEGER: 'INT',
        SqlType.SMALLINT: 'INT',
        SqlType.TINYINT: 'TINYINT',
        SqlType.BIGINT: 'BIGINT',
        SqlType.VARCHAR: 'STRING',
        SqlType.CHAR: 'STRING',
        SqlType.LONGVARCHAR: 'STRING',
        SqlType.NVARCHAR: 'STRING',
        SqlType.NCHAR: 'STRING',
        SqlType.LONGNVARCHAR: 'STRING',
        SqlType.CLOB: 'STRING',
        # Hive没有精确的日期时间类型，以字符串保存
        SqlType.DATE: 'STRING',
        SqlType.TIME: 'STRING',
        SqlType.TIMESTAMP: 'STRING',
        SqlType.NUMERIC: 'DOUBLE',
        SqlType.DECIMAL: 'DOUBLE',
        SqlType.FLOAT: 'DOUBLE',
        SqlType.DOUBLE: 'DOUBLE',
        SqlType.REAL: 'DOUBLE',
        SqlType.BIT: 'BOOLEAN',
        SqlType.BOOLEAN: 'BOOLEAN',
        SqlType.BINARY: 'BINARY',
        SqlType.VARBINARY: 'BINARY',
        SqlType.LONGVARBINARY: 'BINARY',
        SqlType.BLOB: 'BINARY',
    }

    def __init__(self, overrides: Optional[Dict[int, str]] = None):
        """
        初始化映射策略

        Args:
            overrides: 覆盖默认映射的类型表
        """
        self.type_map = dict(self.TYPE_MAP)
        if overrides:
            self.type_map.update(overrides)
        self.logger = logging.getLogger(__name__)

    def to_hive_type(self, sql_type: int) -> Optional[str]:
        """
        获取SQL类型对应的Hive类型

        Args:
            sql_type: SQL类型代码

        Returns:
            Hive类型名，无法映射时返回None
        """
        hive_type = self.type_map.get(sql_type)
        if hive_type is None:
            self.logger.debug(f"SQL类型 {sql_type} 没有对应的Hive类型")
        return hive_type

