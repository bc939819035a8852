"""
作业委托接口

真正执行分布式读写的调度组件不在本项目中实现，这里只定义交接边界
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional

from .options import ImportOptions


@dataclass
class ImportJobContext:
    """导入作业上下文"""
    table_name: str
    jar_file: Optional[str]
    options: ImportOptions
    input_format: Optional[str] = None


@dataclass
class ExportJobContext:
    """导出作业上下文"""
    table_name: str
    jar_file: Optional[str]
    options: ImportOptions
    export_dir: Optional[str] = None


class JobDelegate(ABC):
    """分布式作业委托"""

    @abstractmethod
    def run_import(self, table_name: str, jar_file: Optional[str],
                   split_column: Optional[str], conf: Dict,
                   context: Optional[ImportJobContext] = None):
        """启动分布式导入作业，失败时抛出JobError"""

    @abstractmethod
    def run_export(self, context: ExportJobContext):
        """启动分布式导出作业，失败时抛出JobError"""
