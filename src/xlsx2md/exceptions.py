"""
异常定义模块

异常层级：
    Xlsx2MdError (基类)
    ├── SourceNotFoundError   输入文件不存在
    ├── DocumentReadError     工作簿包或 XML 无法解析
    ├── OutputWriteError      输出文件写入失败
    └── CellValueError        单元格值无法解码（日期、共享字符串索引）
"""

from enum import StrEnum
from pathlib import Path
from typing import Any


class ErrorCode(StrEnum):
    """错误码"""

    FILE_NOT_FOUND = "E1001"
    FILE_READ_ERROR = "E1004"
    FILE_WRITE_ERROR = "E1005"
    CELL_VALUE_INVALID = "E4001"


class Xlsx2MdError(Exception):
    """转换异常基类"""

    default_code: ErrorCode = ErrorCode.FILE_READ_ERROR

    def __init__(
        self,
        message: str,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"error_code": self.code.value, "message": self.message, "details": self.details}


class SourceNotFoundError(Xlsx2MdError):
    """输入文件不存在"""

    default_code = ErrorCode.FILE_NOT_FOUND

    def __init__(self, path: Path) -> None:
        super().__init__(
            f"Input XLSX file not found: {path}",
            details={"path": str(path)},
        )
        self.path = path


class DocumentReadError(Xlsx2MdError):
    """工作簿解析失败"""

    default_code = ErrorCode.FILE_READ_ERROR


class OutputWriteError(Xlsx2MdError):
    """输出写入失败"""

    default_code = ErrorCode.FILE_WRITE_ERROR


class CellValueError(Xlsx2MdError):
    """单元格值解码失败"""

    default_code = ErrorCode.CELL_VALUE_INVALID

    def __init__(self, message: str, reference: str | None = None, value: str | None = None) -> None:
        super().__init__(message, details={"reference": reference, "value": value})
        self.reference = reference
        self.value = value
