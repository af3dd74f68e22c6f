"""
xlsx2md
把 Excel 工作簿转换为 Markdown 表格
"""

from .config import Settings, get_settings
from .converter import MarkdownConverter, convert_xlsx_to_md
from .exceptions import (
    CellValueError,
    DocumentReadError,
    OutputWriteError,
    SourceNotFoundError,
    Xlsx2MdError,
)
from .models import (
    Cell,
    CellType,
    ConversionResult,
    ConvertRequest,
    DocumentMetadata,
    Grid,
    Row,
    SharedStringItem,
    Sheet,
    WorkbookDocument,
)
from .rasterizer import column_index, column_letter, rasterize
from .reader import WorkbookReader, read_workbook
from .renderer import escape_markdown, render_document, render_sheet
from .resolver import resolve_cell

__all__ = [
    # 配置
    "Settings",
    "get_settings",
    # 转换器
    "MarkdownConverter",
    "WorkbookReader",
    # 数据模型
    "Cell",
    "CellType",
    "ConversionResult",
    "ConvertRequest",
    "DocumentMetadata",
    "Grid",
    "Row",
    "SharedStringItem",
    "Sheet",
    "WorkbookDocument",
    # 异常
    "Xlsx2MdError",
    "SourceNotFoundError",
    "DocumentReadError",
    "OutputWriteError",
    "CellValueError",
    # 核心函数
    "resolve_cell",
    "rasterize",
    "column_letter",
    "column_index",
    "escape_markdown",
    "render_sheet",
    "render_document",
    "read_workbook",
    "convert_xlsx_to_md",
]
