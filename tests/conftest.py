"""
pytest 共享 fixtures
"""

from collections.abc import Callable
from pathlib import Path
from typing import TypeAlias
from xml.sax.saxutils import escape
from zipfile import ZipFile

import pytest

from xlsx2md.models import SharedStringItem

SPREADSHEET_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
DOCUMENT_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PACKAGE_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"

# 单元格描述: (引用, 类型标记, 值)，类型标记为 None 表示无类型
CellSpec: TypeAlias = tuple[str, str | None, str | None]
SheetSpec: TypeAlias = tuple[str, list[list[CellSpec]]]


def _cell_xml(ref: str, tag: str | None, value: str | None) -> str:
    type_attr = f' t="{tag}"' if tag else ""
    if tag == "inlineStr":
        return f'<c r="{ref}" t="inlineStr"><is><t>{escape(value or "")}</t></is></c>'
    inner = f"<v>{escape(value)}</v>" if value is not None else ""
    return f'<c r="{ref}"{type_attr}>{inner}</c>'


def _sheet_xml(rows: list[list[CellSpec]] | None) -> str:
    if rows is None:
        return f'<worksheet xmlns="{SPREADSHEET_NS}"></worksheet>'
    row_xml = "".join(
        f'<row r="{idx}">' + "".join(_cell_xml(*cell) for cell in row) + "</row>"
        for idx, row in enumerate(rows, start=1)
    )
    return f'<worksheet xmlns="{SPREADSHEET_NS}"><sheetData>{row_xml}</sheetData></worksheet>'


def _shared_strings_xml(values: list[str]) -> str:
    items = "".join(f"<si><t>{escape(v)}</t></si>" for v in values)
    return f'<sst xmlns="{SPREADSHEET_NS}" count="{len(values)}" uniqueCount="{len(values)}">{items}</sst>'


def _core_xml(props: dict[str, str]) -> str:
    fields = []
    for key in ("title", "subject", "creator"):
        if key in props:
            fields.append(f"<dc:{key}>{escape(props[key])}</dc:{key}>")
    if "created" in props:
        fields.append(f'<dcterms:created xsi:type="dcterms:W3CDTF">{props["created"]}</dcterms:created>')
    return (
        '<cp:coreProperties '
        'xmlns:cp="http://schemas.openxmlformats.org/package/2006/metadata/core-properties" '
        'xmlns:dc="http://purl.org/dc/elements/1.1/" '
        'xmlns:dcterms="http://purl.org/dc/terms/" '
        'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">'
        + "".join(fields)
        + "</cp:coreProperties>"
    )


def build_xlsx(
    path: Path,
    sheets: list[SheetSpec],
    shared_strings: list[str] | None = None,
    core_properties: dict[str, str] | None = None,
) -> Path:
    """生成最小可用的 .xlsx 包"""
    sheet_entries = []
    rels = []
    with ZipFile(path, "w") as zf:
        for idx, (name, rows) in enumerate(sheets, start=1):
            sheet_entries.append(f'<sheet name="{escape(name)}" sheetId="{idx}" r:id="rId{idx}"/>')
            rels.append(
                f'<Relationship Id="rId{idx}" Type="{DOCUMENT_REL_NS}/worksheet" '
                f'Target="worksheets/sheet{idx}.xml"/>'
            )
            zf.writestr(f"xl/worksheets/sheet{idx}.xml", _sheet_xml(rows))

        if shared_strings is not None:
            rels.append(
                f'<Relationship Id="rIdSst" Type="{DOCUMENT_REL_NS}/sharedStrings" '
                'Target="sharedStrings.xml"/>'
            )
            zf.writestr("xl/sharedStrings.xml", _shared_strings_xml(shared_strings))

        zf.writestr(
            "xl/workbook.xml",
            f'<workbook xmlns="{SPREADSHEET_NS}" xmlns:r="{DOCUMENT_REL_NS}">'
            f'<sheets>{"".join(sheet_entries)}</sheets></workbook>',
        )
        zf.writestr(
            "xl/_rels/workbook.xml.rels",
            f'<Relationships xmlns="{PACKAGE_REL_NS}">{"".join(rels)}</Relationships>',
        )
        zf.writestr(
            "_rels/.rels",
            f'<Relationships xmlns="{PACKAGE_REL_NS}">'
            f'<Relationship Id="rId1" Type="{DOCUMENT_REL_NS}/officeDocument" Target="xl/workbook.xml"/>'
            "</Relationships>",
        )
        if core_properties is not None:
            zf.writestr("docProps/core.xml", _core_xml(core_properties))
    return path


@pytest.fixture
def make_xlsx(tmp_path: Path) -> Callable[..., Path]:
    """在临时目录生成 .xlsx 文件"""

    def _make(
        sheets: list[SheetSpec],
        shared_strings: list[str] | None = None,
        core_properties: dict[str, str] | None = None,
        name: str = "book.xlsx",
    ) -> Path:
        return build_xlsx(tmp_path / name, sheets, shared_strings, core_properties)

    return _make


@pytest.fixture
def shared_strings() -> list[SharedStringItem]:
    """示例共享字符串表"""
    return [SharedStringItem(text="x", inner_text="x"), SharedStringItem(text="y", inner_text="y")]
