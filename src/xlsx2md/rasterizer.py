"""
行栅格化
把稀疏的行/单元格集合转换为宽度统一的矩形表格
"""

from itertools import takewhile

from .models import Cell, Grid, Row, SharedStringTable
from .resolver import resolve_cell


def column_letter(index: int) -> str:
    """0 起始的列序号转列字母（0 -> A, 26 -> AA），没有上限"""
    if index < 0:
        raise ValueError("Column index must be >= 0")
    result: list[str] = []
    value = index + 1
    while value > 0:
        value, rem = divmod(value - 1, 26)
        result.append(chr(65 + rem))
    return "".join(reversed(result))


def column_index(letters: str) -> int:
    """列字母转 0 起始的列序号"""
    value = 0
    for char in letters.upper():
        value = value * 26 + (ord(char) - 64)
    return value - 1


def column_prefix(reference: str | None) -> str:
    """提取单元格引用开头的字母部分（"b12" -> "B"）"""
    if not reference:
        return ""
    return "".join(takewhile(str.isalpha, reference)).upper()


def grid_width(rows: list[Row]) -> int:
    """表格宽度 = 各行实际存储的单元格数的最大值"""
    return max((len(row.cells) for row in rows), default=0)


def _index_row(row: Row) -> dict[str, Cell]:
    """按列字母索引单元格，同一列重复出现时保留第一个"""
    by_column: dict[str, Cell] = {}
    for cell in row.cells:
        prefix = column_prefix(cell.reference)
        if prefix:
            by_column.setdefault(prefix, cell)
    return by_column


def rasterize_row(row: Row, width: int, shared_strings: SharedStringTable | None = None) -> list[str]:
    """按列位置解析一行，缺失的位置填充空字符串"""
    by_column = _index_row(row)
    return [
        resolve_cell(by_column.get(column_letter(i)), shared_strings)
        for i in range(width)
    ]


def rasterize(rows: list[Row], shared_strings: SharedStringTable | None = None) -> Grid:
    """栅格化整张工作表；没有行时返回空 Grid"""
    if not rows:
        return Grid()

    width = grid_width(rows)
    return Grid(
        width=width,
        rows=[rasterize_row(row, width, shared_strings) for row in rows],
    )
