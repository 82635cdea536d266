"""
工资 API 测试：直接呼叫 router 函数（注入内存存储），以及经 TestClient 验证例外转换与档案下载。
"""
from io import BytesIO

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient
from openpyxl import load_workbook
from starlette.datastructures import Headers, UploadFile

from payroll.config import Settings
from payroll.errors import RecordNotFoundError, UnknownFieldError
from payroll.main import app
from payroll.routers import auth, salary
from payroll.schemas import ExportMode, SalaryRecordUpdate, ViewMode
from payroll.services.salary_import import SalaryImporter
from payroll.storage.memory_store import MemoryRecordStore


@pytest.fixture
def store(samples):
    return MemoryRecordStore(samples)


def _filters(**overrides):
    params = {"department": "all", "year": None, "month": None, "search": None}
    params.update(overrides)
    return params


# ---------- 直接呼叫 ----------


@pytest.mark.asyncio
async def test_list_records_monthly(store):
    result = await salary.list_records(view=ViewMode.monthly, store=store, **_filters(year="2025", month="1"))
    assert [r.employee_name for r in result] == ["张三", "李四"]


@pytest.mark.asyncio
async def test_list_records_summary(store):
    result = await salary.list_records(view=ViewMode.summary, store=store, **_filters(department="规划所"))
    assert len(result) == 1
    assert result[0].sums["net_total"] == 18500
    assert result[0].count == 1


@pytest.mark.asyncio
async def test_update_record_recomputes_totals(store):
    body = SalaryRecordUpdate(
        employee_name="李四", department="规划所", month="2025-01", base_salary=4000, other_performance_accounting=1000
    )
    rec = await salary.update_record("sample-2", body, store=store)
    assert rec.id == "sample-2"
    assert rec.total == 5000
    assert rec.net_total == 4000
    stored = next(r for r in await store.get_all() if r.id == "sample-2")
    assert stored.net_total == 4000


@pytest.mark.asyncio
async def test_update_unknown_record(store):
    body = SalaryRecordUpdate(employee_name="无此人", month="2025-01")
    with pytest.raises(RecordNotFoundError):
        await salary.update_record("missing", body, store=store)


@pytest.mark.asyncio
async def test_delete_record(store):
    assert await salary.delete_record("sample-1", store=store) == {"ok": True}
    assert [r.id for r in await store.get_all()] == ["sample-2", "sample-3"]
    with pytest.raises(RecordNotFoundError):
        await salary.delete_record("sample-1", store=store)


@pytest.mark.asyncio
async def test_import_endpoint(store, make_xlsx):
    content = make_xlsx([["姓名", "部门", "月份", "基本工资"], ["赵六", "遥感所", "3", 3000]])
    upload = UploadFile(file=BytesIO(content), filename="工资.xlsx", headers=Headers({}))
    result = await salary.import_salary_excel(
        file=upload, default_year=2025, store=store, importer=SalaryImporter(Settings())
    )
    assert result.count == 1
    assert len(await store.get_all()) == 4
    added = (await store.get_all())[-1]
    assert added.month == "2025-03"


@pytest.mark.asyncio
async def test_trend_endpoint(store):
    points = await salary.salary_trend(year="2025", department="all", store=store)
    assert len(points) == 12
    assert points[0].label == "1月"
    assert points[0].total == 35400
    assert points[1].total == 17300


@pytest.mark.asyncio
async def test_stats_endpoint(store):
    stats = await salary.salary_stats(stat_field="research_performance", store=store, **_filters())
    assert stats.stat_value == 4500
    assert stats.headcount == 3
    with pytest.raises(UnknownFieldError) as exc_info:
        await salary.salary_stats(stat_field="bogus", store=store, **_filters())
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_stats_endpoint_accepts_camel_case_field(store):
    stats = await salary.salary_stats(stat_field="otherPerformanceAccounting", store=store, **_filters())
    assert stats.stat_field == "other_performance_accounting"
    assert stats.stat_value == 5000


@pytest.mark.asyncio
async def test_directory_endpoint(store):
    entries = await salary.salary_directory(year="2025", department="all", search=None, store=store)
    assert [e.employee_name for e in entries] == ["李四", "王五", "张三"]


@pytest.mark.asyncio
async def test_years_and_departments(store):
    years = await salary.salary_years(store=store)
    assert "2025" in years
    depts = await salary.salary_departments(store=store)
    assert depts[0] == "基础地质所"


@pytest.mark.asyncio
async def test_export_endpoint(store):
    resp = await salary.export_salary_excel(
        mode=ExportMode.by_department, columns=["total"], store=store, **_filters(year="2025")
    )
    assert "filename*=UTF-8''" in resp.headers["content-disposition"]
    assert "salary_export_2025_by_department.xlsx" in resp.headers["content-disposition"]


@pytest.mark.asyncio
async def test_login():
    ok = await auth.login(auth.LoginRequest(username=" admin ", password="admin2025"))
    assert ok.access_token
    with pytest.raises(HTTPException) as exc_info:
        await auth.login(auth.LoginRequest(username="admin", password="wrong"))
    assert exc_info.value.status_code == 401


# ---------- 经 HTTP ----------

@pytest.fixture
def client(samples):
    memory_store = MemoryRecordStore(samples)
    importer = SalaryImporter(Settings(default_year=2025))
    app.dependency_overrides[salary.get_record_store] = lambda: memory_store
    app.dependency_overrides[salary.get_importer] = lambda: importer
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_http_records_use_camel_case(client):
    resp = client.get("/api/salary/records", params={"department": "规划所"})
    assert resp.status_code == 200
    body = resp.json()
    assert body[0]["employeeName"] == "李四"
    assert body[0]["netTotal"] == 18500


def test_http_not_found_maps_to_404(client):
    resp = client.delete("/api/salary/records/missing")
    assert resp.status_code == 404
    assert "missing" in resp.json()["detail"]


def test_http_import_error_maps_to_400(client):
    resp = client.post(
        "/api/salary/import",
        files={"file": ("工资.csv", b"a,b", "text/csv")},
    )
    assert resp.status_code == 400
    assert "Excel" in resp.json()["detail"]


def test_http_export_download(client):
    resp = client.get("/api/salary/export", params={"mode": "detail", "columns": ["base_salary", "net_total"]})
    assert resp.status_code == 200
    ws = load_workbook(BytesIO(resp.content)).active
    assert ws.title == "工资明细"
    assert [c.value for c in ws[1]] == ["月份", "姓名", "部门", "基本工资", "实发合计"]
    assert ws.max_row == 4


def test_http_put_ignores_supplied_totals(client):
    resp = client.put(
        "/api/salary/records/sample-1",
        json={"employeeName": "张三", "department": "基础地质所", "month": "2025-01", "baseSalary": 100, "total": 1},
    )
    assert resp.status_code == 200
    assert resp.json()["total"] == 100


@pytest.mark.asyncio
async def test_export_endpoint_rejects_unknown_column(store):
    with pytest.raises(UnknownFieldError):
        await salary.export_salary_excel(
            mode=ExportMode.detail, columns=["netTotal", "bogus"], store=store, **_filters()
        )


def test_http_summary_sums_use_camel_case(client):
    resp = client.get("/api/salary/records", params={"view": "summary", "department": "规划所"})
    assert resp.status_code == 200
    row = resp.json()[0]
    assert row["employeeName"] == "李四"
    assert row["sums"]["netTotal"] == 18500
    assert row["sums"]["otherPerformanceAccounting"] == 5000
    assert "net_total" not in row["sums"]


def test_http_export_camel_case_columns(client):
    resp = client.get(
        "/api/salary/export", params={"mode": "by_person", "columns": ["netTotal", "baseSalary"]}
    )
    assert resp.status_code == 200
    ws = load_workbook(BytesIO(resp.content)).active
    assert [c.value for c in ws[1]] == ["姓名", "部门", "统计月份数", "基本工资", "实发合计"]


def test_http_export_unknown_column_is_400(client):
    resp = client.get("/api/salary/export", params={"columns": ["bogus"]})
    assert resp.status_code == 400
    assert "bogus" in resp.json()["detail"]


def test_http_put_rejects_unrecognized_month(client):
    """手动修改的月份无法辨识时拒绝，原记录不变"""
    resp = client.put(
        "/api/salary/records/sample-2",
        json={"employeeName": "李四", "department": "规划所", "month": "March", "baseSalary": 100},
    )
    assert resp.status_code == 422
    resp = client.get("/api/salary/records", params={"year": "2025"})
    assert [r["id"] for r in resp.json()] == ["sample-1", "sample-2", "sample-3"]


def test_http_put_normalizes_month(client):
    resp = client.put(
        "/api/salary/records/sample-2",
        json={"employeeName": " 李四 ", "department": "规划所", "month": "2025-3", "baseSalary": 100},
    )
    assert resp.status_code == 200
    assert resp.json()["month"] == "2025-03"
    assert resp.json()["employeeName"] == "李四"


def test_http_put_rejects_blank_name(client):
    resp = client.put(
        "/api/salary/records/sample-2",
        json={"employeeName": "   ", "department": "规划所", "month": "2025-01"},
    )
    assert resp.status_code == 422
