"""
大对象引用

CLOB/BLOB列映射到的宿主类型。大对象可以内联保存，也可以指向外部存储文件
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class LobRef:
    """大对象引用基类"""
    data: Optional[object] = None
    file_name: Optional[str] = None
    offset: int = 0
    length: int = -1

    def is_external(self) -> bool:
        """数据是否存放在外部文件中"""
        return self.file_name is not None

    def __str__(self):
        if self.is_external():
            return f"externalLob({self.file_name},{self.offset},{self.length})"
        return str(self.data) if self.data is not None else ""


@dataclass
class ClobRef(LobRef):
    """字符大对象引用"""
    data: Optional[str] = None


@dataclass
class BlobRef(LobRef):
    """二进制大对象引用"""
    data: Optional[bytes] = None

    def __str__(self):
        if self.is_external():
            return super().__str__()
        return self.data.hex() if self.data is not None else ""
