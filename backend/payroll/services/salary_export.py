"""工资数据导出 Excel：明细 / 人员汇总 / 部门汇总三种格式，数值栏位由使用者勾选。"""
import io
from typing import Any, Dict, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, Side

from payroll.errors import UnknownFieldError
from payroll.fields import ALL, FIELD_LABELS, NUMERIC_FIELDS, resolve_numeric_field
from payroll.schemas import ExportMode, SalaryRecord
from payroll.services.aggregation import aggregate_by_department, aggregate_by_person

SHEET_NAMES = {
    ExportMode.detail: "工资明细",
    ExportMode.by_person: "人员汇总",
    ExportMode.by_department: "部门汇总",
}

LEADING_HEADERS = {
    ExportMode.detail: ["月份", "姓名", "部门"],
    ExportMode.by_person: ["姓名", "部门", "统计月份数"],
    ExportMode.by_department: ["部门", "总人次"],
}


def normalize_columns(columns: Optional[Sequence[str]]) -> List[str]:
    """栏位名可用蛇形或驼峰，依固定顺序排列；未传则全部导出，有不认得的栏位直接拒绝。"""
    if not columns:
        return list(NUMERIC_FIELDS)
    wanted = set()
    unknown = []
    for name in columns:
        field = resolve_numeric_field(name)
        if field is None:
            unknown.append(name)
        else:
            wanted.add(field)
    if unknown:
        raise UnknownFieldError(unknown)
    return [f for f in NUMERIC_FIELDS if f in wanted]


def build_export_rows(
    records: Sequence[SalaryRecord], mode: ExportMode, columns: Sequence[str]
) -> List[List[Any]]:
    """回传不含表头的资料列。"""
    if mode == ExportMode.detail:
        return [
            [r.month, r.employee_name, r.department, *[getattr(r, c) for c in columns]]
            for r in records
        ]
    if mode == ExportMode.by_person:
        return [
            [p.employee_name, p.department, p.count, *[p.sums[c] for c in columns]]
            for p in aggregate_by_person(records, columns)
        ]
    return [
        [d.department, d.count, *[d.sums[c] for c in columns]]
        for d in aggregate_by_department(records, columns)
    ]


def export_headers(mode: ExportMode, columns: Sequence[str]) -> List[str]:
    return LEADING_HEADERS[mode] + [FIELD_LABELS[c] for c in columns]


def _write_headers(ws, headers: Sequence[str]) -> None:
    thin = Side(style="thin")
    header_font = Font(bold=True)
    header_alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for col, h in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col, value=h)
        cell.font = header_font
        cell.alignment = header_alignment
        cell.border = Border(top=thin, bottom=thin, left=thin, right=thin)
        ws.column_dimensions[cell.column_letter].width = 14


def build_salary_excel(
    records: Sequence[SalaryRecord],
    mode: ExportMode = ExportMode.by_person,
    columns: Optional[Sequence[str]] = None,
) -> bytes:
    cols = normalize_columns(columns)
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_NAMES[mode]
    _write_headers(ws, export_headers(mode, cols))
    for row in build_export_rows(records, mode, cols):
        ws.append(row)

    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf.getvalue()


def export_filenames(department: Optional[str], year: Optional[str], mode: ExportMode) -> Dict[str, str]:
    """回传 {"ascii": ..., "unicode": ...}；中文档名供浏览器显示，ASCII 为 header fallback。"""
    scope = "全院" if not department or department == ALL else department
    y = year or "全部"
    return {
        "ascii": f"salary_export_{year or 'all'}_{mode.value}.xlsx",
        "unicode": f"工资导出_{scope}_{y}_{mode.value}.xlsx",
    }
