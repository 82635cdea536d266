"""
工资导出单元测试：三种格式的工作表名称、表头、资料列与档名。
"""
from io import BytesIO

import pytest
from openpyxl import load_workbook

from payroll.errors import UnknownFieldError
from payroll.schemas import ExportMode
from payroll.services.salary_export import (
    build_salary_excel,
    export_filenames,
    export_headers,
    normalize_columns,
)
from payroll.utils.http_headers import build_content_disposition


def _rows(content):
    wb = load_workbook(BytesIO(content))
    ws = wb.active
    return ws.title, [list(r) for r in ws.iter_rows(values_only=True)], ws


def test_detail_export(samples):
    content = build_salary_excel(samples, ExportMode.detail, ["base_salary", "total", "net_total"])
    title, rows, ws = _rows(content)
    assert title == "工资明细"
    assert rows[0] == ["月份", "姓名", "部门", "基本工资", "合计", "实发合计"]
    assert rows[1] == ["2025-01", "张三", "基础地质所", 3500, 16900, 16900]
    assert rows[2][-2:] == [23500, 18500]
    assert len(rows) == 4
    assert ws["A1"].font.bold


def test_by_person_export(samples):
    content = build_salary_excel(samples + samples[:1], ExportMode.by_person, ["total"])
    title, rows, _ = _rows(content)
    assert title == "人员汇总"
    assert rows[0] == ["姓名", "部门", "统计月份数", "合计"]
    assert rows[1] == ["张三", "基础地质所", 2, 33800]
    assert len(rows) == 4


def test_by_department_export(samples):
    content = build_salary_excel(samples, ExportMode.by_department, ["net_total"])
    title, rows, _ = _rows(content)
    assert title == "部门汇总"
    assert rows[0] == ["部门", "总人次", "实发合计"]
    assert rows[2] == ["规划所", 1, 18500]


def test_export_without_records_has_header_only():
    _, rows, _ = _rows(build_salary_excel([], ExportMode.detail))
    assert len(rows) == 1
    assert rows[0][-1] == "实发合计"


def test_normalize_columns_keeps_field_order():
    assert normalize_columns(["net_total", "base_salary"]) == ["base_salary", "net_total"]
    assert len(normalize_columns(None)) == 14


def test_normalize_columns_accepts_camel_case_names():
    """栏位名与记录 JSON 相同的驼峰写法也可使用，可与蛇形混用"""
    assert normalize_columns(["netTotal", "baseSalary", "other_performance_accounting"]) == [
        "base_salary",
        "other_performance_accounting",
        "net_total",
    ]


def test_normalize_columns_rejects_unknown_names():
    with pytest.raises(UnknownFieldError) as exc_info:
        normalize_columns(["net_total", "bogus"])
    assert exc_info.value.status_code == 400
    assert "bogus" in exc_info.value.message


def test_by_person_export_with_camel_case_columns(samples):
    content = build_salary_excel(samples, ExportMode.by_person, ["netTotal", "baseSalary"])
    _, rows, _ = _rows(content)
    assert rows[0] == ["姓名", "部门", "统计月份数", "基本工资", "实发合计"]
    assert rows[2] == ["李四", "规划所", 1, 3800, 18500]


def test_export_headers_use_short_labels():
    headers = export_headers(ExportMode.by_person, ["certificate_subsidy", "other_performance_accounting"])
    assert headers[-2:] == ["证书补贴", "走账绩效"]


def test_export_filenames():
    names = export_filenames("all", "2025", ExportMode.by_person)
    assert names["unicode"] == "工资导出_全院_2025_by_person.xlsx"
    assert names["ascii"] == "salary_export_2025_by_person.xlsx"
    assert export_filenames("规划所", None, ExportMode.detail)["unicode"] == "工资导出_规划所_全部_detail.xlsx"


def test_content_disposition_is_latin1_safe():
    value = build_content_disposition("salary_export_2025_detail.xlsx", "工资导出_全院_2025_detail.xlsx")
    value.encode("latin-1")
    assert 'filename="salary_export_2025_detail.xlsx"' in value
    assert "filename*=UTF-8''%E5%B7%A5" in value
