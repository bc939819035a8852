"""
结果集打印模块

调试用途：把游标的元数据和数据行写入调用方提供的文本输出
"""

import logging
from typing import List, Optional, TextIO

logger = logging.getLogger(__name__)

COLUMN_SEPARATOR = ' | '


def _format_value(value) -> str:
    if value is None:
        return 'null'
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    return str(value)


def print_result_set(sink: TextIO, cursor, batch_size: int = 500) -> int:
    """
    打印游标中的所有行

    第一行为列名，随后每行一条记录，列宽按已读取的数据对齐

    Args:
        sink: 文本输出
        cursor: 已执行的游标
        batch_size: 每次从游标获取的行数

    Returns:
        打印的行数
    """
    headers = [entry[0] for entry in (cursor.description or ())]
    rows: List[List[str]] = []
    while True:
        batch = cursor.fetchmany(batch_size)
        if not batch:
            break
        rows.extend([_format_value(v) for v in row] for row in batch)

    widths = [len(h) for h in headers]
    for row in rows:
        for i, text in enumerate(row):
            if i < len(widths):
                widths[i] = max(widths[i], len(text))
            else:
                widths.append(len(text))

    def render(values: List[str]) -> str:
        return COLUMN_SEPARATOR.join(v.ljust(widths[i]) for i, v in enumerate(values)).rstrip()

    if headers:
        sink.write(render(headers) + '\n')
        sink.write('-+-'.join('-' * w for w in widths) + '\n')
    for row in rows:
        sink.write(render(row) + '\n')

    logger.debug(f"结果集打印完成: {len(rows)} 行")
    return len(rows)


def print_header(sink: TextIO, column_count: int,
                 schema: Optional[str] = None, table: Optional[str] = None):
    """打印列数以及来源的schema/表"""
    sink.write(f"Got {column_count} columns back\n")
    if column_count > 0:
        if schema is not None:
            sink.write(f"Schema: {schema}\n")
        if table is not None:
            sink.write(f"Table: {table}\n")
