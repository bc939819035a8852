"""
主控制器模块

加载配置、初始化日志，整合连接管理器，提供统一的表探查和导入/导出接口
"""

import logging
import time
from typing import Dict, List, Optional, TextIO

import yaml

from .core.job_delegate import ExportJobContext, ImportJobContext, JobDelegate
from .core.options import ImportOptions
from .core.partition_planner import PartitionSpec
from .core.sql_manager import SqlManager
from .core.type_mapper import type_name
from .core.vendor_factory import VendorFactory


class BridgeController:
    """连接层主控制器"""

    def __init__(self, config_path: str = "config.yaml",
                 config: Optional[Dict] = None,
                 job_delegate: Optional[JobDelegate] = None):
        """
        初始化控制器

        Args:
            config_path: 配置文件路径
            config: 直接传入的配置字典，优先于配置文件
            job_delegate: 分布式作业委托
        """
        # 加载配置
        self.config = config if config is not None else self._load_config(config_path)

        # 设置日志
        self._setup_logging()
        self.logger = logging.getLogger(__name__)

        # 初始化连接管理器，连接在首次使用时建立
        self.options = ImportOptions.from_config(self.config)
        validation = VendorFactory.validate_options(self.options)
        if not validation['valid']:
            self.logger.warning(f"连接配置验证未通过: {validation['message']}")
        self.manager: SqlManager = VendorFactory.create_manager(self.options, job_delegate)

        self.logger.info(f"连接层控制器初始化完成，数据库类型: {self.manager.vendor.name}")

    def _load_config(self, config_path: str) -> Dict:
        """加载配置文件"""
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
                return config or self._get_default_config()
        except Exception as e:
            print(f"警告：加载配置文件失败 ({e})，使用默认配置")
            return self._get_default_config()

    def _get_default_config(self) -> Dict:
        """获取默认配置"""
        return {
            'database': {
                'connect': 'mysql://localhost:3306/test',
                'driver': None,
                'username': 'root',
                'password': ''
            },
            'import': {
                'table': None,
                'columns': None,
                'split_by': None,
                'where': None,
                'num_mappers': 4
            },
            'logging': {
                'level': 'INFO',
                'file': 'sqlbridge.log'
            }
        }

    def _setup_logging(self):
        """设置日志"""
        log_config = self.config.get('logging', {}) or {}
        level = getattr(logging, str(log_config.get('level', 'INFO')).upper(), logging.INFO)

        handlers = [logging.StreamHandler()]
        log_file = log_config.get('file')
        if log_file:
            handlers.append(logging.FileHandler(log_file, encoding='utf-8', delay=True))

        logging.basicConfig(
            level=level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=handlers
        )

    def list_tables(self) -> List[str]:
        """
        列出数据库中的表

        Returns:
            表名列表，读取失败时为空列表
        """
        result = self.manager.list_tables()
        return result.value if result.success else []

    def describe_table(self, table_name: Optional[str] = None) -> Dict:
        """
        汇总表结构信息

        Args:
            table_name: 表名，默认使用配置中的表

        Returns:
            {'table_name', 'success', 'columns': [{'name', 'sql_type', 'python_type', 'hive_type'}],
             'primary_key', 'error_message'}
        """
        table_name = table_name or self.options.table_name
        start_time = time.time()

        mappings = self.manager.get_type_mappings(table_name)
        if not mappings.success:
            return {
                'table_name': table_name,
                'success': False,
                'columns': [],
                'primary_key': None,
                'error_message': mappings.error_message
            }

        primary_key = self.manager.get_primary_key(table_name)
        columns = [
            {
                'name': name,
                'sql_type': type_name(mapping.sql_type) if mapping.sql_type is not None else None,
                'python_type': mapping.python_type,
                'hive_type': mapping.hive_type
            }
            for name, mapping in mappings.value.items()
        ]

        self.logger.info(f"表 {table_name} 结构读取完成: {len(columns)} 列, 耗时: {time.time() - start_time:.2f}秒")
        return {
            'table_name': table_name,
            'success': True,
            'columns': columns,
            'primary_key': primary_key.value,
            'error_message': primary_key.error_message
        }

    def plan_import(self, table_name: Optional[str] = None) -> PartitionSpec:
        """解析导入使用的拆分列"""
        return self.manager.get_split_column(table_name or self.options.table_name)

    def import_table(self, table_name: Optional[str] = None, input_format: Optional[str] = None):
        """
        导入表

        Args:
            table_name: 表名，默认使用配置中的表
            input_format: 分布式读取使用的输入格式

        Returns:
            作业委托的返回值
        """
        context = ImportJobContext(
            table_name=table_name or self.options.table_name,
            jar_file=self.options.jar_file,
            options=self.options,
            input_format=input_format
        )
        return self.manager.import_table(context)

    def export_table(self, table_name: Optional[str] = None, export_dir: Optional[str] = None):
        """导出到表"""
        context = ExportJobContext(
            table_name=table_name or self.options.table_name,
            jar_file=self.options.jar_file,
            options=self.options,
            export_dir=export_dir or self.options.export_dir
        )
        return self.manager.export_table(context)

    def run_query(self, statement: str, sink: Optional[TextIO] = None):
        """执行调试查询并打印结果"""
        self.manager.exec_and_print(statement, sink)

    def close(self):
        """关闭连接"""
        self.manager.close()
