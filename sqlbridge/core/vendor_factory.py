"""
厂商工厂模块

根据驱动或连接串选择合适的厂商实现（MySQL或PostgreSQL）
"""

import logging
from typing import Dict, Optional

from .job_delegate import JobDelegate
from .mysql_vendor import MySQLVendor
from .options import ImportOptions
from .postgresql_vendor import PostgreSQLVendor
from .sql_manager import SqlManager
from .vendor import VendorManager, parse_connect_string

_VENDORS = (MySQLVendor, PostgreSQLVendor)


class VendorFactory:
    """厂商管理器工厂类"""

    @staticmethod
    def get_supported_types() -> list:
        """
        获取支持的数据库类型列表

        Returns:
            支持的数据库类型列表
        """
        return [vendor.name for vendor in _VENDORS]

    @staticmethod
    def create_vendor(options: ImportOptions) -> VendorManager:
        """
        根据请求选项创建厂商管理器

        显式指定的驱动优先，其次根据连接串的scheme判断

        Args:
            options: 请求选项

        Returns:
            厂商管理器

        Raises:
            ValueError: 不支持的数据库类型
        """
        logger = logging.getLogger(__name__)

        if options.driver:
            for vendor_cls in _VENDORS:
                if options.driver in (vendor_cls.driver, vendor_cls.name):
                    logger.info(f"根据驱动 {options.driver} 选择 {vendor_cls.name} 厂商实现")
                    return vendor_cls()
            raise ValueError(f"不支持的驱动: {options.driver}。支持的驱动: "
                             f"{', '.join(v.driver for v in _VENDORS)}")

        scheme = parse_connect_string(options.connect_string).scheme
        for vendor_cls in _VENDORS:
            if scheme in vendor_cls.schemes:
                logger.info(f"根据连接串选择 {vendor_cls.name} 厂商实现")
                return vendor_cls()

        raise ValueError(f"不支持的数据库类型: {scheme}。支持的类型: "
                         f"{', '.join(VendorFactory.get_supported_types())}")

    @staticmethod
    def create_manager(options: ImportOptions,
                       job_delegate: Optional[JobDelegate] = None) -> SqlManager:
        """创建连接管理器，连接在首次使用时建立"""
        return SqlManager(VendorFactory.create_vendor(options), options, job_delegate)

    @staticmethod
    def validate_options(options: ImportOptions) -> Dict:
        """
        验证连接选项

        Args:
            options: 请求选项

        Returns:
            验证结果字典 {'valid': bool, 'message': str, 'vendor': str}
        """
        try:
            if not options.connect_string:
                return {
                    'valid': False,
                    'message': "缺少连接串",
                    'vendor': 'unknown'
                }

            vendor = VendorFactory.create_vendor(options)

            target = parse_connect_string(options.connect_string)
            if not target.host:
                return {
                    'valid': False,
                    'message': f"{vendor.name} 连接串缺少主机名",
                    'vendor': vendor.name
                }

            if options.num_mappers < 1:
                return {
                    'valid': False,
                    'message': f"并行数必须大于0: {options.num_mappers}",
                    'vendor': vendor.name
                }

            return {
                'valid': True,
                'message': f"{vendor.name} 连接配置验证通过",
                'vendor': vendor.name
            }

        except ValueError as e:
            return {
                'valid': False,
                'message': str(e),
                'vendor': 'unknown'
            }
