"""
Markdown 渲染
把栅格化后的表格和文档属性输出为 Markdown 文本
"""

from datetime import datetime

from .models import DocumentMetadata, Grid, WorkbookDocument
from .rasterizer import rasterize

DOCUMENT_TITLE = "Excel Document Conversion"
EMPTY_SHEET_MARKER = "*Empty worksheet*"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def escape_markdown(text: str) -> str:
    """转义表格单元格内容：竖线转义，换行替换为空格，去除首尾空白"""
    if not text:
        return ""
    return text.replace("|", "\\|").replace("\n", " ").strip()


def _format_row(values: list[str]) -> str:
    return "| " + "".join(f"{escape_markdown(v)} | " for v in values)


def render_table(grid: Grid) -> list[str]:
    """生成表格行：首行作为表头，随后是分隔行和数据行"""
    if grid.is_empty:
        return [EMPTY_SHEET_MARKER]

    header, *data_rows = grid.rows
    lines = [_format_row(header)]
    lines.append("| " + "--- | " * grid.width)
    lines.extend(_format_row(row) for row in data_rows)
    return lines


def render_sheet(grid: Grid, title: str) -> str:
    """生成单个 sheet 的 Markdown 段落（标题 + 表格）"""
    lines = [f"## {title}", ""]
    lines.extend(render_table(grid))
    return "\n".join(lines) + "\n"


def render_preamble(source_name: str, converted_at: datetime, timestamp_format: str = TIMESTAMP_FORMAT) -> str:
    """文档开头的来源信息"""
    lines = [
        f"# {DOCUMENT_TITLE}",
        f"*Source: {source_name}*",
        f"*Converted: {converted_at.strftime(timestamp_format)}*",
        "",
    ]
    return "\n".join(lines) + "\n"


def render_metadata(metadata: DocumentMetadata, timestamp_format: str = TIMESTAMP_FORMAT) -> str:
    """文档属性段落；没有任何属性时返回空字符串"""
    if metadata.is_empty:
        return ""

    lines = ["## Document Metadata"]
    if metadata.title:
        lines.append(f"**Title**: {metadata.title}")
    if metadata.subject:
        lines.append(f"**Subject**: {metadata.subject}")
    if metadata.author:
        lines.append(f"**Author**: {metadata.author}")
    if metadata.created:
        lines.append(f"**Created**: {metadata.created.strftime(timestamp_format)}")
    lines.append("")
    return "\n".join(lines) + "\n"


def render_document(
    document: WorkbookDocument,
    source_name: str,
    converted_at: datetime,
    include_metadata: bool = True,
    timestamp_format: str = TIMESTAMP_FORMAT,
) -> str:
    """组装完整的 Markdown 文档"""
    parts = [render_preamble(source_name, converted_at, timestamp_format)]

    for sheet in document.sheets:
        grid = rasterize(sheet.rows, document.shared_strings)
        parts.append(render_sheet(grid, sheet.name))
        parts.append("\n")

    if include_metadata:
        parts.append(render_metadata(document.metadata, timestamp_format))

    return "".join(parts)
