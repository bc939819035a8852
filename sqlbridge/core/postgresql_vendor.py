"""
PostgreSQL厂商实现

基于psycopg2驱动
"""

import re
from typing import Dict, Optional, Tuple

from .options import ImportOptions
from .type_mapper import SqlType
from .vendor import VendorManager, parse_connect_string

# pg_type中内置类型的OID
_OID_TYPES = {
    16: SqlType.BIT,            # bool
    17: SqlType.BINARY,         # bytea
    18: SqlType.CHAR,           # char
    19: SqlType.VARCHAR,        # name
    20: SqlType.BIGINT,         # int8
    21: SqlType.SMALLINT,       # int2
    23: SqlType.INTEGER,        # int4
    25: SqlType.VARCHAR,        # text
    26: SqlType.BIGINT,         # oid
    114: SqlType.OTHER,         # json
    700: SqlType.REAL,          # float4
    701: SqlType.DOUBLE,        # float8
    1042: SqlType.CHAR,         # bpchar
    1043: SqlType.VARCHAR,      # varchar
    1082: SqlType.DATE,         # date
    1083: SqlType.TIME,         # time
    1114: SqlType.TIMESTAMP,    # timestamp
    1184: SqlType.TIMESTAMP,    # timestamptz
    1266: SqlType.TIME,         # timetz
    1700: SqlType.NUMERIC,      # numeric
    2950: SqlType.OTHER,        # uuid
    3802: SqlType.OTHER,        # jsonb
}

_PLAIN_IDENTIFIER = re.compile(r'^[a-z_][a-z0-9_$]*$')


class PostgreSQLVendor(VendorManager):
    """PostgreSQL厂商管理器"""

    name = 'postgresql'
    driver = 'psycopg2'
    schemes = ('postgresql', 'postgres')
    default_port = 5432
    default_schema_expression = 'current_schema()'

    def connect_kwargs(self, options: ImportOptions) -> Dict:
        """
        生成psycopg2.connect()参数

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
            'connect_timeout': int(params.get('connect_timeout', 30)),
        }
        if target.database:
            kwargs['dbname'] = target.database

        credentials = options.credentials()
        if not credentials and target.user is not None:
            credentials = {'user': target.user, 'password': target.password or ''}
        kwargs.update(credentials)
        return kwargs

    def configure_session(self, connection):
        # PostgreSQL将READ UNCOMMITTED按READ COMMITTED处理
        connection.set_session(isolation_level='READ UNCOMMITTED', autocommit=False)

    def escape_table_name(self, table_name: str) -> str:
        return '.'.join(self._quote(part) for part in table_name.split('.'))

    def escape_column_name(self, column_name: str) -> str:
        return self._quote(column_name)

    def _quote(self, identifier: str) -> str:
        # 普通小写标识符不加引号，避免改变大小写折叠语义
        if _PLAIN_IDENTIFIER.match(identifier) or identifier.startswith('"'):
            return identifier
        return '"' + identifier.replace('"', '""') + '"'

    def list_tables_query(self) -> Tuple[str, tuple]:
        return (
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_type = 'BASE TABLE' "
            "AND table_schema NOT IN ('pg_catalog', 'information_schema') "
            "ORDER BY table_schema, table_name",
            ()
        )

    def list_databases_query(self) -> Optional[str]:
        return "SELECT datname FROM pg_database WHERE NOT datistemplate ORDER BY datname"

    def resolve_type_code(self, type_code) -> Optional[int]:
        sql_type = _OID_TYPES.get(type_code)
        return int(sql_type) if sql_type is not None else None

    def python_type_override(self, sql_type: int) -> Optional[str]:
        if sql_type == SqlType.OTHER:
            # json/jsonb/uuid由psycopg2以字符串或dict返回，按文本处理
            return 'str'
        return None
