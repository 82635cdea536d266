"""解析工资表 Excel：自动寻找表头行、同义表头对应字段、月份标准化、数值清洗。

表格格式不固定：
  - 表头前可有标题列（只在前 10 列内找含「姓名」或「部门」的列）；
  - 列顺序任意，依表头文字对应字段，同一字段可有多种写法（见 fields.HEADER_SYNONYMS）；
  - 月份可为 Excel 日期序号、日期储存格、「2025-3」「2025.03」「2025/3」「2025年3月」或只有月份「7」；
  - 金额可为数字或含千分位逗号的文字，无法解析一律视为 0。
多个工作表时只取第一个有内容的工作表。解析失败整批不产生记录。
"""
import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from io import BytesIO
from typing import Any, Dict, List, Optional, Sequence, Tuple

from openpyxl import load_workbook
from openpyxl.utils.datetime import from_excel

from payroll.errors import (
    EmptyWorkbookError,
    HeaderNotFoundError,
    NoValidRowsError,
    UnreadableWorkbookError,
    UnsupportedFileTypeError,
)
from payroll.fields import (
    DEFAULT_DEPARTMENT,
    DEPARTMENT_HEADER,
    HEADER_SYNONYMS,
    HEADER_TOKENS,
    MONTH_HEADER,
    NAME_HEADER,
    YEAR_MONTH_PATTERN,
)
from payroll.schemas import SalaryRecord

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"xlsx", "xlsm", "xls"}

HEADER_SCAN_ROWS = 10
EXCEL_SERIAL_THRESHOLD = 20000
DEFAULT_MONTH = "2025-01"

# 只有月份：7 / 07 / 7月
BARE_MONTH_PATTERN = re.compile(r"^(\d{1,2})\s*月?$")

# 金额文字中要去掉的字元（千分位、空白、货币符号）
_NUMBER_NOISE = (",", "，", " ", "　", "¥", "￥", "元")

Grid = List[List[Any]]


@dataclass
class ParsedBatch:
    records: List[SalaryRecord]
    warnings: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.records)


# ---------- 文件与工作表 ----------


def check_file_type(filename: str) -> str:
    """回传小写扩展名；非 Excel 文件直接拒绝，不读取内容。"""
    name = (filename or "").strip().lower()
    ext = name.rsplit(".", 1)[-1] if "." in name else ""
    if ext not in ALLOWED_EXTENSIONS:
        raise UnsupportedFileTypeError()
    return ext


def _clean_cell(v: Any) -> Any:
    if v is None:
        return None
    if isinstance(v, str):
        return v if v.strip() else None
    if isinstance(v, float) and v.is_integer():
        return int(v)
    return v


def _is_populated(rows: Grid) -> bool:
    return any(v is not None for row in rows for v in row)


def _grids_from_openpyxl(content: bytes) -> List[Tuple[str, Grid]]:
    wb = load_workbook(BytesIO(content), data_only=True)
    try:
        return [
            (ws.title, [[_clean_cell(v) for v in row] for row in ws.iter_rows(values_only=True)])
            for ws in wb.worksheets
        ]
    finally:
        wb.close()


def _grids_from_xlrd(content: bytes) -> List[Tuple[str, Grid]]:
    import xlrd

    book = xlrd.open_workbook(file_contents=content)
    empty_types = (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR)
    sheets: List[Tuple[str, Grid]] = []
    for sheet in book.sheets():
        rows: Grid = []
        for r in range(sheet.nrows):
            row = []
            for c in range(sheet.ncols):
                cell = sheet.cell(r, c)
                if cell.ctype in empty_types:
                    row.append(None)
                elif cell.ctype == xlrd.XL_CELL_BOOLEAN:
                    row.append(bool(cell.value))
                else:
                    # 日期储存格保留为序号，交给月份标准化处理
                    row.append(_clean_cell(cell.value))
            rows.append(row)
        sheets.append((sheet.name, rows))
    return sheets


def load_first_populated_grid(content: bytes, filename: str) -> Grid:
    """读取工作簿，回传第一个有内容的工作表（二维储存格值）。"""
    ext = check_file_type(filename)
    try:
        sheets = _grids_from_xlrd(content) if ext == "xls" else _grids_from_openpyxl(content)
    except Exception as exc:
        logger.warning("工资表读取失败 filename=%s: %s", filename, exc)
        raise UnreadableWorkbookError() from exc
    for sheet_name, rows in sheets:
        if _is_populated(rows):
            logger.debug("工资表使用工作表【%s】，共 %s 列", sheet_name, len(rows))
            return rows
    raise EmptyWorkbookError()


# ---------- 表头 ----------


def _label(v: Any) -> str:
    return "" if v is None else str(v).strip()


def find_header(grid: Sequence[Sequence[Any]], scan_rows: int = HEADER_SCAN_ROWS) -> Tuple[int, Dict[str, int]]:
    """前 scan_rows 列内第一个含「姓名」或「部门」的列为表头；回传 (列索引, 表头文字→栏索引)。"""
    for i, row in enumerate(grid[:scan_rows]):
        labels = [_label(c) for c in row or []]
        if not any(lb in HEADER_TOKENS for lb in labels):
            continue
        header_map: Dict[str, int] = {}
        for idx, lb in enumerate(labels):
            if lb:
                header_map[lb] = idx
        return i, header_map
    raise HeaderNotFoundError()


def resolve_column(row: Sequence[Any], header_map: Dict[str, int], labels: Sequence[str]) -> Any:
    """依序尝试表头写法，取第一个存在的栏位之值；栏位不存在或超出该列长度回传 None。"""
    for lb in labels:
        idx = header_map.get(lb)
        if idx is None:
            continue
        return row[idx] if idx < len(row) else None
    return None


# ---------- 值清洗 ----------


def coerce_number(value: Any) -> float:
    """数字原样；文字去千分位后解析；其余或解析失败为 0。不抛错。"""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    if isinstance(value, str):
        s = value
        for noise in _NUMBER_NOISE:
            s = s.replace(noise, "")
        if not s:
            return 0.0
        try:
            n = float(s)
        except ValueError:
            return 0.0
        return n if math.isfinite(n) else 0.0
    return 0.0


def normalize_month(
    raw: Any,
    default_year: int,
    default_month: str = DEFAULT_MONTH,
    serial_threshold: int = EXCEL_SERIAL_THRESHOLD,
) -> Tuple[str, bool]:
    """
    月份转成 YYYY-MM。回传 (月份, 是否成功标准化)。
    无法辨识时回传原字符串与 False（记录照常产生，但依年/月筛选时会看不到）。
    """
    if raw is None or raw == "" or raw == 0:
        return default_month, True
    if isinstance(raw, (datetime, date)):
        return f"{raw.year:04d}-{raw.month:02d}", True
    if isinstance(raw, (int, float)) and not isinstance(raw, bool) and raw > serial_threshold:
        try:
            d = from_excel(raw)
        except (ValueError, OverflowError, TypeError):
            return str(raw), False
        return f"{d.year:04d}-{d.month:02d}", True

    text = str(raw).strip()
    m = YEAR_MONTH_PATTERN.search(text)
    if m:
        month = f"{m.group(1)}-{m.group(2).zfill(2)}"
        return month, 1 <= int(m.group(2)) <= 12
    m = BARE_MONTH_PATTERN.match(text)
    if m:
        n = int(m.group(1))
        if 1 <= n <= 12:
            return f"{default_year:04d}-{n:02d}", True
    return text, False


# ---------- 主流程 ----------


def parse_salary_grid(
    grid: Sequence[Sequence[Any]],
    *,
    default_year: int,
    default_month: str = DEFAULT_MONTH,
    header_scan_rows: int = HEADER_SCAN_ROWS,
    serial_threshold: int = EXCEL_SERIAL_THRESHOLD,
) -> ParsedBatch:
    """二维储存格 → 工资记录批次。无表头或无任何有效列时抛错。"""
    header_idx, header_map = find_header(grid, header_scan_rows)

    records: List[SalaryRecord] = []
    warnings: List[str] = []
    for index, row in enumerate(grid[header_idx + 1:]):
        if not row or all(v is None for v in row):
            continue
        name = _label(resolve_column(row, header_map, [NAME_HEADER]))
        if not name:
            continue
        department = _label(resolve_column(row, header_map, [DEPARTMENT_HEADER])) or DEFAULT_DEPARTMENT

        month_raw = resolve_column(row, header_map, [MONTH_HEADER])
        month, ok = normalize_month(month_raw, default_year, default_month, serial_threshold)
        if not ok:
            sheet_row = header_idx + index + 2
            msg = f"第 {sheet_row} 行（{name}）月份「{month}」无法识别，已按原值保存，按年份/月份筛选时将不会显示"
            logger.warning(msg)
            warnings.append(msg)

        components = {
            f: coerce_number(resolve_column(row, header_map, labels))
            for f, labels in HEADER_SYNONYMS.items()
        }
        records.append(
            SalaryRecord(
                sequence=index + 1,
                employee_name=name,
                department=department,
                month=month,
                **components,
            )
        )

    if not records:
        raise NoValidRowsError()
    return ParsedBatch(records=records, warnings=warnings)


def parse_salary_workbook(
    content: bytes,
    filename: str,
    *,
    default_year: int,
    default_month: str = DEFAULT_MONTH,
    header_scan_rows: int = HEADER_SCAN_ROWS,
    serial_threshold: int = EXCEL_SERIAL_THRESHOLD,
) -> ParsedBatch:
    grid = load_first_populated_grid(content, filename)
    batch = parse_salary_grid(
        grid,
        default_year=default_year,
        default_month=default_month,
        header_scan_rows=header_scan_rows,
        serial_threshold=serial_threshold,
    )
    logger.info("工资表解析完成 filename=%s 记录=%s 警告=%s", filename, batch.count, len(batch.warnings))
    return batch
