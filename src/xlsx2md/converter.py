"""
Excel 转 Markdown 转换器
读取 .xlsx 工作簿，逐个 sheet 栅格化为 Markdown 表格并写入输出文件
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from loguru import logger

from .exceptions import OutputWriteError, SourceNotFoundError
from .models import ConversionResult, WorkbookDocument
from .reader import read_workbook
from .renderer import TIMESTAMP_FORMAT, render_document


@dataclass
class MarkdownConverter:
    """Markdown 格式转换器"""

    include_metadata: bool = True
    timestamp_format: str = TIMESTAMP_FORMAT

    # ===== 模板方法 =====
    def convert(self, excel_path: Path, output_path: Path | None = None) -> ConversionResult:
        """执行转换：读取 -> 渲染 -> 写入"""
        source_path = Path(excel_path) if not isinstance(excel_path, Path) else excel_path

        if not source_path.exists():
            logger.error(f"找不到文件 '{source_path}'")
            raise SourceNotFoundError(source_path)

        out_path = self._determine_output_path(source_path, output_path)
        filename = source_path.name

        logger.info(f"正在处理: {filename}")
        document = read_workbook(source_path)

        content = self.convert_document(document, filename)
        self._write_output(out_path, content)

        return ConversionResult(
            output_path=out_path,
            sheet_count=len(document.sheets),
            status_message=f"Conversion complete: {out_path}",
        )

    def convert_document(
        self,
        document: WorkbookDocument,
        source_name: str,
        converted_at: datetime | None = None,
    ) -> str:
        """把已解析的工作簿渲染为 Markdown 文本（不做任何 I/O）"""
        for sheet in document.sheets:
            logger.debug(f"sheet '{sheet.name}': {len(sheet.rows)} 行")

        return render_document(
            document,
            source_name,
            converted_at or datetime.now(),
            include_metadata=self.include_metadata,
            timestamp_format=self.timestamp_format,
        )

    def _determine_output_path(self, source_path: Path, output_path: Path | None) -> Path:
        """确定输出路径"""
        if output_path:
            return Path(output_path)
        return source_path.with_suffix(".md")

    def _write_output(self, out_path: Path, content: str) -> None:
        """写入输出文件"""
        try:
            out_path.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.error(f"写入文件失败: {e}")
            raise OutputWriteError(
                f"Cannot write output file '{out_path}': {e}",
                details={"path": str(out_path)},
            ) from e
        logger.info(f"转换成功！输出: {out_path.absolute()}")


def convert_xlsx_to_md(
    excel_path: str,
    output_path: str | None = None,
    include_metadata: bool = True,
) -> str:
    """将单个 Excel 文件转换为 Markdown（兼容函数接口）"""
    converter = MarkdownConverter(include_metadata=include_metadata)
    result = converter.convert(Path(excel_path), Path(output_path) if output_path else None)
    return str(result.output_path)
