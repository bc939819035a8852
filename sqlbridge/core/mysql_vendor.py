"""
MySQL厂商实现

基于PyMySQL驱动，兼容Doris等MySQL协议的数据库
"""

from typing import Dict, List, Optional, Tuple

from pymysql.constants import FIELD_TYPE

from .options import ImportOptions
from .type_mapper import SqlType
from .vendor import ColumnDescriptor, VendorManager, parse_connect_string, positional_name

# MySQL中binary字符集的编号，用于区分BLOB与TEXT
BINARY_CHARSET = 63

_TEXT_TYPES = {
    FIELD_TYPE.DECIMAL: SqlType.DECIMAL,
    FIELD_TYPE.NEWDECIMAL: SqlType.DECIMAL,
    FIELD_TYPE.TINY: SqlType.TINYINT,
    FIELD_TYPE.SHORT: SqlType.SMALLINT,
    FIELD_TYPE.LONG: SqlType.INTEGER,
    FIELD_TYPE.INT24: SqlType.INTEGER,
    FIELD_TYPE.LONGLONG: SqlType.BIGINT,
    FIELD_TYPE.FLOAT: SqlType.REAL,
    FIELD_TYPE.DOUBLE: SqlType.DOUBLE,
    FIELD_TYPE.NULL: SqlType.NULL,
    FIELD_TYPE.TIMESTAMP: SqlType.TIMESTAMP,
    FIELD_TYPE.DATETIME: SqlType.TIMESTAMP,
    FIELD_TYPE.DATE: SqlType.DATE,
    FIELD_TYPE.NEWDATE: SqlType.DATE,
    FIELD_TYPE.TIME: SqlType.TIME,
    FIELD_TYPE.YEAR: SqlType.SMALLINT,
    FIELD_TYPE.BIT: SqlType.BIT,
    FIELD_TYPE.JSON: SqlType.LONGVARCHAR,
    FIELD_TYPE.ENUM: SqlType.CHAR,
    FIELD_TYPE.SET: SqlType.CHAR,
    FIELD_TYPE.VARCHAR: SqlType.VARCHAR,
    FIELD_TYPE.VAR_STRING: SqlType.VARCHAR,
    FIELD_TYPE.STRING: SqlType.CHAR,
    FIELD_TYPE.TINY_BLOB: SqlType.LONGVARCHAR,
    FIELD_TYPE.MEDIUM_BLOB: SqlType.LONGVARCHAR,
    FIELD_TYPE.LONG_BLOB: SqlType.CLOB,
    FIELD_TYPE.BLOB: SqlType.LONGVARCHAR,
    FIELD_TYPE.GEOMETRY: SqlType.OTHER,
}

# 字符集为binary时的类型
_BINARY_TYPES = {
    FIELD_TYPE.VARCHAR: SqlType.VARBINARY,
    FIELD_TYPE.VAR_STRING: SqlType.VARBINARY,
    FIELD_TYPE.STRING: SqlType.BINARY,
    FIELD_TYPE.TINY_BLOB: SqlType.LONGVARBINARY,
    FIELD_TYPE.MEDIUM_BLOB: SqlType.LONGVARBINARY,
    FIELD_TYPE.LONG_BLOB: SqlType.BLOB,
    FIELD_TYPE.BLOB: SqlType.LONGVARBINARY,
}


class MySQLVendor(VendorManager):
    """MySQL/Doris厂商管理器"""

    name = 'mysql'
    driver = 'pymysql'
    schemes = ('mysql', 'mariadb', 'doris')
    default_port = 3306

    def connect_kwargs(self, options: ImportOptions) -> Dict:
        """
        生成pymysql.connect()参数

        Args:
            options: 请求选项

        Returns:
            连接参数字典
        """
        target = parse_connect_string(options.connect_string)
        params = target.params or {}

        kwargs = {
            'host': target.host or 'localhost',
            'port': target.port or self.default_port,
            'charset': params.get('charset', 'utf8mb4'),
            'autocommit': False,
            'connect_timeout': int(params.get('connect_timeout', 30)),
            # 元数据查询只需要最宽松的隔离级别
            'init_command': "SET SESSION TRANSACTION ISOLATION LEVEL READ UNCOMMITTED",
        }
        if target.database:
            kwargs['database'] = target.database

        credentials = options.credentials()
        if not credentials and target.user is not None:
            credentials = {'user': target.user, 'password': target.password or ''}
        kwargs.update(credentials)
        return kwargs

    def configure_session(self, connection):
        connection.autocommit(False)

    def escape_table_name(self, table_name: str) -> str:
        return '.'.join(self._quote(part) for part in table_name.split('.'))

    def escape_column_name(self, column_name: str) -> str:
        return self._quote(column_name)

    def _quote(self, identifier: str) -> str:
        if identifier.startswith('`') and identifier.endswith('`'):
            return identifier
        return '`' + identifier.replace('`', '``') + '`'

    def list_tables_query(self) -> Tuple[str, tuple]:
        return (
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_type = 'BASE TABLE' AND table_schema = DATABASE() "
            "ORDER BY table_name",
            ()
        )

    def primary_key_query(self, table_name: str) -> Tuple[str, tuple]:
        schema, name = self.split_table_name(table_name)
        if schema is None:
            return (
                "SELECT column_name FROM information_schema.key_column_usage "
                "WHERE constraint_name = 'PRIMARY' AND table_name = %s "
                "AND table_schema = DATABASE() ORDER BY ordinal_position",
                (name,)
            )
        return (
            "SELECT column_name FROM information_schema.key_column_usage "
            "WHERE constraint_name = 'PRIMARY' AND table_name = %s "
            "AND table_schema = %s ORDER BY ordinal_position",
            (name, schema)
        )

    def list_databases_query(self) -> Optional[str]:
        return "SHOW DATABASES"

    def resolve_type_code(self, type_code, charset: Optional[int] = None) -> Optional[int]:
        """
        将MySQL字段类型转换为SqlType代码

        Args:
            type_code: MySQL字段类型
            charset: 字段字符集编号，binary字符集表示二进制数据

        Returns:
            SqlType代码，未知类型返回None
        """
        if charset == BINARY_CHARSET and type_code in _BINARY_TYPES:
            return int(_BINARY_TYPES[type_code])
        sql_type = _TEXT_TYPES.get(type_code)
        return int(sql_type) if sql_type is not None else None

    def python_type_override(self, sql_type: int) -> Optional[str]:
        if sql_type == SqlType.OTHER:
            # GEOMETRY以WKB字节返回
            return 'bytes'
        return None

    def describe_columns(self, cursor) -> List[ColumnDescriptor]:
        """
        读取列描述

        PyMySQL的字段元数据同时保留了原始列名(org_name)和显示标签(name)，
        原始列名为空（例如表达式列）时使用显示标签，两者都为空时使用位置列名
        """
        fields = self._result_fields(cursor)
        if fields is None:
            return super().describe_columns(cursor)

        return [
            ColumnDescriptor(
                name=field.org_name or '',
                sql_type=self.resolve_type_code(field.type_code, field.charsetnr),
                label=field.name or positional_name(index)
            )
            for index, field in enumerate(fields)
        ]

    def result_origin(self, cursor) -> Tuple[Optional[str], Optional[str]]:
        fields = self._result_fields(cursor)
        if not fields:
            return None, None
        first = fields[0]
        return first.db or None, first.org_table or None

    def _result_fields(self, cursor):
        result = getattr(cursor, '_result', None)
        return getattr(result, 'fields', None) if result is not None else None
