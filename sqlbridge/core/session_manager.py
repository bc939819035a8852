"""
会话管理模块

每个管理器实例持有一个延迟创建的数据库连接，任何时刻最多只有一个打开的游标。
元数据读取在完成后显式提交事务
"""

import logging
from contextlib import contextmanager
from typing import Optional

from .errors import DBConnectionError, ExecutionError
from .options import ImportOptions
from .vendor import VendorManager


class SessionManager:
    """
    数据库会话管理器

    只供单个逻辑任务使用，内部不加锁；并行任务各自持有自己的管理器和连接
    """

    def __init__(self, vendor: VendorManager, options: ImportOptions):
        """
        初始化会话管理器

        Args:
            vendor: 厂商管理器，提供驱动和连接
            options: 请求选项，提供连接串和认证信息
        """
        self.vendor = vendor
        self.options = options
        self.logger = logging.getLogger(__name__)

        self._connection = None
        self._last_cursor = None
        self._closed = False

    def connect(self):
        """
        建立数据库连接

        设置READ UNCOMMITTED隔离级别并关闭自动提交

        Returns:
            DB-API连接对象

        Raises:
            DBConnectionError: 驱动无法加载或连接失败，不做重试
        """
        driver_name = self.vendor.driver
        try:
            driver_module = self.vendor.load_driver()
        except ImportError as e:
            self.logger.error(f"无法加载数据库驱动 {driver_name}: {str(e)}")
            raise DBConnectionError(f"无法加载数据库驱动: {driver_name}") from e

        connection = None
        try:
            connection = self.vendor.make_connection(driver_module, self.options)
            self.vendor.configure_session(connection)
        except Exception as e:
            self.logger.error(f"连接数据库失败 ({self.vendor.name}): {str(e)}")
            if connection is not None:
                self._close_quietly(connection, "连接")
            raise DBConnectionError(f"连接数据库失败: {str(e)}") from e

        self.logger.info(f"{self.vendor.name} 数据库连接建立成功")
        return connection

    def get_connection(self):
        """
        获取会话连接，首次调用时建立连接

        Returns:
            在管理器生命周期内始终相同的连接对象
        """
        if self._closed:
            raise DBConnectionError("会话管理器已关闭")
        if self._connection is None:
            self._connection = self.connect()
        return self._connection

    @property
    def connected(self) -> bool:
        return self._connection is not None

    def execute(self, statement: str, *args):
        """
        执行SQL语句并返回游标

        执行前先释放之前打开的游标，参数按位置依次绑定

        Args:
            statement: SQL语句
            *args: 位置参数

        Returns:
            已执行的游标，由下一次execute或release释放

        Raises:
            ExecutionError: 执行失败，不做重试
        """
        self.release()

        connection = self.get_connection()
        cursor = None
        try:
            cursor = connection.cursor()
            self._last_cursor = cursor
            self.logger.info(f"执行SQL语句: {statement}")
            if args:
                cursor.execute(statement, args)
            else:
                cursor.execute(statement)
            return cursor
        except Exception as e:
            self.logger.error(f"执行SQL语句失败: {str(e)}")
            self.release()
            # 失败的语句会让事务处于中止状态，提交后后续查询才能继续
            self.commit()
            raise ExecutionError(f"执行SQL语句失败: {str(e)}", statement) from e

    @contextmanager
    def query(self, statement: str, *args):
        """
        在作用域内执行查询

        无论正常退出还是异常退出，都依次关闭游标、提交事务、释放游标

        Args:
            statement: SQL语句
            *args: 位置参数

        Yields:
            已执行的游标
        """
        cursor = self.execute(statement, *args)
        try:
            yield cursor
        finally:
            self.finish(cursor)

    def finish(self, cursor):
        """关闭游标并提交事务，错误只记录日志"""
        self._close_quietly(cursor, "游标")
        self.commit()
        if self._last_cursor is cursor:
            self._last_cursor = None

    def commit(self):
        """提交当前事务，失败只记录日志"""
        if self._connection is None:
            return
        try:
            self._connection.commit()
        except Exception as e:
            self.logger.warning(f"提交事务失败: {str(e)}")

    def release(self):
        """关闭最近打开的游标，可重复调用"""
        if self._last_cursor is not None:
            self._close_quietly(self._last_cursor, "游标")
            self._last_cursor = None

    @property
    def open_cursor(self) -> Optional[object]:
        return self._last_cursor

    def close(self):
        """释放游标并关闭连接，可重复调用"""
        self.release()
        if self._connection is not None:
            self._close_quietly(self._connection, "连接")
            self._connection = None
            self.logger.info(f"{self.vendor.name} 数据库连接已关闭")
        self._closed = True

    def _close_quietly(self, resource, kind: str):
        try:
            resource.close()
        except Exception as e:
            self.logger.warning(f"关闭{kind}失败: {str(e)}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
