"""
拆分列推断模块

决定并行读取时用于把表切分成若干范围的列
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError
from .schema_introspector import SchemaIntrospector


@dataclass
class PartitionSpec:
    """拆分方案，column为None表示没有可用的拆分列"""
    column: Optional[str] = None

    @property
    def has_column(self) -> bool:
        return self.column is not None


class PartitionPlanner:
    """拆分列推断器"""

    def __init__(self, introspector: SchemaIntrospector):
        self.introspector = introspector
        self.logger = logging.getLogger(__name__)

    def choose_split_column(self, table_name: str,
                            explicit_column: Optional[str] = None,
                            num_mappers: int = 1) -> PartitionSpec:
        """
        选择拆分列

        显式指定的列无条件优先；否则使用推断出的主键，不再做其他推断。
        找不到拆分列时，单路读取不需要拆分；多路读取直接报错，
        不会悄悄降级为单路

        Args:
            table_name: 表名
            explicit_column: 用户指定的拆分列
            num_mappers: 并行读取数

        Returns:
            拆分方案

        Raises:
            ConfigurationError: 并行度大于1且找不到拆分列
        """
        if explicit_column:
            self.logger.debug(f"表 {table_name} 使用指定的拆分列: {explicit_column}")
            return PartitionSpec(explicit_column)

        primary_key = self.introspector.get_primary_key(table_name)
        if primary_key.value is not None:
            self.logger.info(f"表 {table_name} 使用主键 {primary_key.value} 作为拆分列")
            return PartitionSpec(primary_key.value)

        if num_mappers > 1:
            raise ConfigurationError(
                f"表 {table_name} 找不到主键。请使用 --split-by 指定拆分列，"
                f"或使用 '-m 1' 进行顺序导入。",
                table_name
            )

        self.logger.info(f"表 {table_name} 没有拆分列，按单路顺序读取")
        return PartitionSpec(None)
