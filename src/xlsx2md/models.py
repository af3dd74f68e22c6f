"""
数据模型定义模块
包含枚举、dataclass 和 Pydantic 模型
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from pathlib import Path
from typing import TypeAlias

from pydantic import BaseModel, Field, field_validator

# ============ 枚举定义 ============


class CellType(StrEnum):
    """单元格数据类型（无类型标记的单元格用 None 表示）"""

    BOOLEAN = "b"
    DATE = "d"
    SHARED_STRING = "s"
    NUMBER = "n"
    INLINE_STRING = "inlineStr"
    OTHER = "other"

    @classmethod
    def from_tag(cls, tag: str | None) -> "CellType | None":
        """将 OOXML 的 t 属性映射为类型枚举"""
        if tag is None:
            return None
        return _TAG_MAP.get(tag, cls.OTHER)


_TAG_MAP: dict[str, CellType] = {
    "b": CellType.BOOLEAN,
    "d": CellType.DATE,
    "s": CellType.SHARED_STRING,
    "n": CellType.NUMBER,
    "str": CellType.INLINE_STRING,
    "inlineStr": CellType.INLINE_STRING,
}


# ============ 内部数据模型 (dataclass) ============


@dataclass
class Cell:
    """原始单元格记录"""

    reference: str | None = None
    data_type: CellType | None = None
    value: str | None = None


@dataclass
class Row:
    """稀疏行：只包含实际存储的单元格"""

    cells: list[Cell] = field(default_factory=list)


@dataclass
class Sheet:
    """工作表"""

    name: str
    rows: list[Row] = field(default_factory=list)


@dataclass
class SharedStringItem:
    """共享字符串条目"""

    text: str | None
    inner_text: str = ""

    @property
    def display_text(self) -> str:
        return self.text if self.text is not None else self.inner_text


# 共享字符串表
SharedStringTable: TypeAlias = list[SharedStringItem]


@dataclass
class DocumentMetadata:
    """文档属性"""

    title: str | None = None
    subject: str | None = None
    author: str | None = None
    created: datetime | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.title or self.subject or self.author or self.created)


@dataclass
class WorkbookDocument:
    """解析后的工作簿"""

    sheets: list[Sheet] = field(default_factory=list)
    shared_strings: SharedStringTable | None = None
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)


@dataclass
class Grid:
    """栅格化后的矩形表格"""

    width: int = 0
    rows: list[list[str]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """没有任何行的工作表"""
        return not self.rows


@dataclass
class ConversionResult:
    """转换结果"""

    output_path: Path
    sheet_count: int
    status_message: str
    success: bool = True


# ============ 外部输入验证模型 (Pydantic) ============


class ConvertRequest(BaseModel):
    """转换请求（外部输入验证）"""

    input_path: Path
    output_path: Path
    include_metadata: bool = Field(default=True)

    @field_validator("input_path", "output_path", mode="before")
    @classmethod
    def parse_path(cls, v: str | Path) -> Path:
        """解析路径（去除首尾空白，展开 ~）"""
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("路径不能为空")
        return Path(v).expanduser()
