"""
工作簿读取器
解析 .xlsx（OOXML）包，保留单元格的原始引用、类型标记和值
"""

import posixpath
import zlib
from dataclasses import dataclass
from pathlib import Path
from xml.etree import ElementTree as ET
from zipfile import BadZipFile, ZipFile

from loguru import logger
from openpyxl.packaging.core import DocumentProperties

from .exceptions import DocumentReadError
from .models import (
    Cell,
    CellType,
    DocumentMetadata,
    Row,
    SharedStringItem,
    SharedStringTable,
    Sheet,
    WorkbookDocument,
)

SPREADSHEET_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
DOCUMENT_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PACKAGE_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"

NS = {"a": SPREADSHEET_NS}

OFFICE_DOCUMENT_REL = f"{DOCUMENT_REL_NS}/officeDocument"
SHARED_STRINGS_REL = f"{DOCUMENT_REL_NS}/sharedStrings"

DEFAULT_WORKBOOK_PATH = "xl/workbook.xml"
DEFAULT_SHARED_STRINGS_PATH = "xl/sharedStrings.xml"
CORE_PROPERTIES_PATH = "docProps/core.xml"


@dataclass
class _Relationship:
    rel_type: str
    target: str


def resolve_target(base_path: str, target: str) -> str:
    """把关系目标解析为包内路径"""
    if target.startswith("/"):
        return target[1:]
    return posixpath.normpath(posixpath.join(posixpath.dirname(base_path), target))


def rels_path_for(part_path: str) -> str:
    """部件对应的 .rels 路径（xl/workbook.xml -> xl/_rels/workbook.xml.rels）"""
    directory, name = posixpath.split(part_path)
    return posixpath.join(directory, "_rels", f"{name}.rels")


@dataclass
class WorkbookReader:
    """OOXML 工作簿读取器"""

    source_path: Path

    def read(self) -> WorkbookDocument:
        """读取整个工作簿"""
        try:
            with ZipFile(self.source_path) as zip_file:
                return self._read_package(zip_file)
        except (BadZipFile, ET.ParseError, KeyError, OSError, zlib.error) as e:
            raise DocumentReadError(
                f"Failed to read workbook '{self.source_path.name}': {e}",
                details={"path": str(self.source_path)},
            ) from e

    def _read_package(self, zip_file: ZipFile) -> WorkbookDocument:
        names = set(zip_file.namelist())
        workbook_path = self._find_workbook_path(zip_file, names)
        wb_root = ET.fromstring(zip_file.read(workbook_path))
        wb_rels = self._load_relationships(zip_file, names, rels_path_for(workbook_path))

        shared_strings = self._read_shared_strings(zip_file, names, workbook_path, wb_rels)
        sheets = self._read_sheets(zip_file, wb_root, workbook_path, wb_rels)
        metadata = self._read_metadata(zip_file, names)

        logger.debug(
            f"工作簿解析完成: {len(sheets)} 个 sheet, "
            f"共享字符串 {len(shared_strings) if shared_strings is not None else '无'}"
        )
        return WorkbookDocument(sheets=sheets, shared_strings=shared_strings, metadata=metadata)

    def _find_workbook_path(self, zip_file: ZipFile, names: set[str]) -> str:
        """从包关系中定位主工作簿部件"""
        for rel in self._load_relationships(zip_file, names, "_rels/.rels").values():
            if rel.rel_type == OFFICE_DOCUMENT_REL:
                return resolve_target("", rel.target)
        return DEFAULT_WORKBOOK_PATH

    def _load_relationships(
        self, zip_file: ZipFile, names: set[str], path: str
    ) -> dict[str, _Relationship]:
        if path not in names:
            return {}
        root = ET.fromstring(zip_file.read(path))
        rels: dict[str, _Relationship] = {}
        for rel in root.findall(f"{{{PACKAGE_REL_NS}}}Relationship"):
            rel_id = rel.attrib.get("Id")
            target = rel.attrib.get("Target")
            if rel_id and target:
                rels[rel_id] = _Relationship(rel_type=rel.attrib.get("Type", ""), target=target)
        return rels

    # ===== 共享字符串 =====
    def _read_shared_strings(
        self,
        zip_file: ZipFile,
        names: set[str],
        workbook_path: str,
        wb_rels: dict[str, _Relationship],
    ) -> SharedStringTable | None:
        path = DEFAULT_SHARED_STRINGS_PATH
        for rel in wb_rels.values():
            if rel.rel_type == SHARED_STRINGS_REL:
                path = resolve_target(workbook_path, rel.target)
                break

        if path not in names:
            return None

        root = ET.fromstring(zip_file.read(path))
        return [self._read_shared_string_item(si) for si in root.findall("a:si", NS)]

    def _read_shared_string_item(self, si: ET.Element) -> SharedStringItem:
        direct = si.find("a:t", NS)
        text = (direct.text or "") if direct is not None else None
        inner_text = "".join(t.text or "" for t in si.iter(f"{{{SPREADSHEET_NS}}}t"))
        return SharedStringItem(text=text, inner_text=inner_text)

    # ===== 工作表 =====
    def _read_sheets(
        self,
        zip_file: ZipFile,
        wb_root: ET.Element,
        workbook_path: str,
        wb_rels: dict[str, _Relationship],
    ) -> list[Sheet]:
        sheets: list[Sheet] = []
        for idx, sheet_elem in enumerate(wb_root.findall("a:sheets/a:sheet", NS)):
            name = sheet_elem.attrib.get("name", f"Sheet{idx + 1}")
            rel_id = sheet_elem.attrib.get(f"{{{DOCUMENT_REL_NS}}}id")
            if not rel_id:
                logger.warning(f"跳过 sheet '{name}': 缺少关系 ID")
                continue

            rel = wb_rels.get(rel_id)
            if rel is None:
                logger.warning(f"跳过 sheet '{name}': 找不到关系 '{rel_id}'")
                continue

            sheet_path = resolve_target(workbook_path, rel.target)
            rows = self._read_rows(ET.fromstring(zip_file.read(sheet_path)))
            sheets.append(Sheet(name=name, rows=rows))
        return sheets

    def _read_rows(self, root: ET.Element) -> list[Row]:
        """按存储顺序读取所有行"""
        sheet_data = root.find("a:sheetData", NS)
        if sheet_data is None:
            return []
        return [
            Row(cells=[self._read_cell(c) for c in row_elem.findall("a:c", NS)])
            for row_elem in sheet_data.findall("a:row", NS)
        ]

    def _read_cell(self, elem: ET.Element) -> Cell:
        data_type = CellType.from_tag(elem.attrib.get("t"))
        v = elem.find("a:v", NS)
        value = (v.text or "") if v is not None else None

        # 内联字符串的文本在 <is> 中
        if value is None and data_type == CellType.INLINE_STRING:
            inline = elem.find("a:is", NS)
            if inline is not None:
                value = "".join(t.text or "" for t in inline.iter(f"{{{SPREADSHEET_NS}}}t"))

        return Cell(reference=elem.attrib.get("r"), data_type=data_type, value=value)

    # ===== 文档属性 =====
    def _read_metadata(self, zip_file: ZipFile, names: set[str]) -> DocumentMetadata:
        if CORE_PROPERTIES_PATH not in names:
            return DocumentMetadata()

        node = ET.fromstring(zip_file.read(CORE_PROPERTIES_PATH))
        try:
            props = DocumentProperties.from_tree(node)
        except (TypeError, ValueError) as e:
            raise DocumentReadError(f"Invalid document properties: {e}") from e

        # DocumentProperties 会为缺失的 creator/created 填入默认值，只采用包中实际存在的属性
        present = {child.tag.rsplit("}", 1)[-1] for child in node}
        return DocumentMetadata(
            title=props.title if "title" in present else None,
            subject=props.subject if "subject" in present else None,
            author=props.creator if "creator" in present else None,
            created=props.created if "created" in present else None,
        )


def read_workbook(path: str | Path) -> WorkbookDocument:
    """读取 .xlsx 文件（兼容函数接口）"""
    return WorkbookReader(Path(path)).read()
