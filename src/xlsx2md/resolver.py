"""
单元格值解析
根据单元格类型标记把原始值解码为显示字符串
"""

import math
from datetime import datetime, timedelta

from openpyxl.utils.datetime import SECS_PER_DAY, WINDOWS_EPOCH

from .exceptions import CellValueError
from .models import Cell, CellType, SharedStringTable

# OLE 自动化日期的有效范围（开区间）
MIN_OA_DATE = -657435.0
MAX_OA_DATE = 2958466.0


def resolve_cell(cell: Cell | None, shared_strings: SharedStringTable | None = None) -> str:
    """返回单元格的显示文本；缺失单元格返回空字符串"""
    if cell is None:
        return ""

    # 无类型标记：直接返回原始值
    if cell.data_type is None:
        return cell.value or ""

    value = cell.value
    if value is None:
        return ""

    match cell.data_type:
        case CellType.BOOLEAN:
            return "True" if value == "1" else "False"
        case CellType.DATE:
            return _format_serial_date(value, cell.reference)
        case CellType.SHARED_STRING:
            return _lookup_shared_string(shared_strings, value, cell.reference)
        case CellType.NUMBER | CellType.INLINE_STRING | CellType.OTHER:
            return value


def from_oa_date(serial: float) -> datetime:
    """把 Excel 序列日期（1899-12-30 起的天数，小数部分为时间）转换为 datetime

    负数的整数部分表示日期，小数部分始终按正向时间处理。
    """
    if math.isnan(serial) or not MIN_OA_DATE < serial < MAX_OA_DATE:
        raise ValueError(f"Invalid serial date: {serial}")
    days = math.trunc(serial)
    fraction = abs(serial - days)
    millis = round(fraction * SECS_PER_DAY * 1000)
    return WINDOWS_EPOCH + timedelta(days=days, milliseconds=millis)


def _format_serial_date(value: str, reference: str | None) -> str:
    try:
        moment = from_oa_date(float(value))
    except (ValueError, OverflowError) as e:
        raise CellValueError(
            f"Cannot parse date value '{value}' in cell {reference or '?'}",
            reference=reference,
            value=value,
        ) from e
    # YYYY-MM-DD
    return moment.date().isoformat()


def _lookup_shared_string(
    shared_strings: SharedStringTable | None, value: str, reference: str | None
) -> str:
    try:
        offset = int(value)
    except ValueError as e:
        raise CellValueError(
            f"Invalid shared string index '{value}' in cell {reference or '?'}",
            reference=reference,
            value=value,
        ) from e

    if shared_strings is None or not 0 <= offset < len(shared_strings):
        return ""
    return shared_strings[offset].display_text
