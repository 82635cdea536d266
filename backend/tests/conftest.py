"""测试共用：内存 Excel 工作簿、样例记录。"""
from io import BytesIO

import pytest
from openpyxl import Workbook

from payroll.sample_data import sample_salary_records


def _workbook_bytes(sheets):
    wb = Workbook()
    wb.remove(wb.active)
    for title, rows in sheets:
        ws = wb.create_sheet(title)
        for row in rows:
            ws.append(list(row))
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


@pytest.fixture
def make_xlsx():
    """make_xlsx(rows) 或 make_xlsx(sheets=[(title, rows), ...]) → .xlsx bytes"""

    def _make(rows=None, sheets=None):
        if sheets is None:
            sheets = [("Sheet1", rows or [])]
        return _workbook_bytes(sheets)

    return _make


@pytest.fixture
def samples():
    return sample_salary_records()
