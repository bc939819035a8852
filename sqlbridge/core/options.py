"""
请求选项模块

描述一次导入/导出请求的连接参数与表参数，可从YAML配置构建
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class ImportOptions:
    """导入/导出请求选项"""
    connect_string: str = ""
    driver: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    table_name: Optional[str] = None
    columns: Optional[List[str]] = None
    split_by: Optional[str] = None
    where_clause: Optional[str] = None
    num_mappers: int = 1
    jar_file: Optional[str] = None
    export_dir: Optional[str] = None
    conf: Dict = field(default_factory=dict)

    def credentials(self) -> Dict:
        """
        获取认证参数

        有用户名但没有密码时，密码按空字符串处理，保证两个字段成对出现

        Returns:
            认证参数字典，没有用户名时为空字典
        """
        if self.username is None:
            return {}
        return {
            'user': self.username,
            'password': self.password if self.password is not None else ''
        }

    @classmethod
    def from_config(cls, config: Dict) -> 'ImportOptions':
        """
        从配置字典构建请求选项

        Args:
            config: 配置字典，包含database和import两部分

        Returns:
            请求选项
        """
        db_config = config.get('database', {}) or {}
        import_config = config.get('import', {}) or {}

        columns = import_config.get('columns')
        if isinstance(columns, str):
            columns = [c.strip() for c in columns.split(',') if c.strip()]

        return cls(
            connect_string=db_config.get('connect', ''),
            driver=db_config.get('driver'),
            username=db_config.get('username'),
            password=db_config.get('password'),
            table_name=import_config.get('table'),
            columns=columns,
            split_by=import_config.get('split_by'),
            where_clause=import_config.get('where'),
            num_mappers=int(import_config.get('num_mappers', 1)),
            jar_file=import_config.get('jar_file'),
            export_dir=import_config.get('export_dir'),
            conf=dict(config.get('conf', {}) or {})
        )
