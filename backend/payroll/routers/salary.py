"""工资记录：查询（月度 / 人员汇总）、编辑、删除、Excel 导入导出、看板数据。"""
import io
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile
from fastapi.responses import StreamingResponse

from payroll.config import settings
from payroll.errors import UnknownFieldError
from payroll.fields import DEPARTMENTS, resolve_numeric_field
from payroll.schemas import (
    DirectoryEntry,
    ExportMode,
    ImportResult,
    SalaryRecord,
    SalaryRecordUpdate,
    SalaryStats,
    TrendPoint,
    ViewMode,
)
from payroll.services.aggregation import (
    aggregate_by_person,
    available_years,
    employee_directory,
    filter_records,
    known_departments,
    monthly_trend,
    summarize,
)
from payroll.services.salary_export import build_salary_excel, export_filenames, normalize_columns
from payroll.services.salary_import import SalaryImporter
from payroll.storage.protocols import RecordStore
from payroll.utils.http_headers import build_content_disposition

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/salary", tags=["salary"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def get_record_store(request: Request) -> RecordStore:
    """存储后端于 app 启动时建立，放在 app.state。"""
    return request.app.state.record_store


def get_importer(request: Request) -> SalaryImporter:
    return request.app.state.importer


def _resolve_stat_field(stat_field: str) -> str:
    field = resolve_numeric_field(stat_field)
    if field is None:
        raise UnknownFieldError([stat_field])
    return field


@router.get("/records", summary="工资记录列表（view=monthly 明细 / view=summary 按人员汇总）")
async def list_records(
    view: ViewMode = Query(ViewMode.monthly, description="monthly=逐月明细，summary=按姓名+部门汇总"),
    department: str = Query("all", description="部门，all 为全院"),
    year: Optional[str] = Query(None, description="年份 YYYY"),
    month: Optional[str] = Query(None, description="月份：YYYY-MM 或搭配 year 的 1~12，all 为全年"),
    search: Optional[str] = Query(None, description="关键字（姓名或部门包含）"),
    store: RecordStore = Depends(get_record_store),
):
    records = filter_records(
        await store.get_all(), department=department, year=year, month=month, search=search
    )
    if view == ViewMode.summary:
        return aggregate_by_person(records)
    return records


@router.put("/records/{record_id}", response_model=SalaryRecord, summary="修改工资记录（整笔覆盖，合计自动重算）")
async def update_record(
    record_id: str,
    body: SalaryRecordUpdate,
    store: RecordStore = Depends(get_record_store),
):
    record = SalaryRecord.from_components(record_id, body)
    await store.update(record)
    logger.info("工资记录已修改 id=%s name=%s month=%s", record_id, record.employee_name, record.month)
    return record


@router.delete("/records/{record_id}", summary="删除工资记录")
async def delete_record(record_id: str, store: RecordStore = Depends(get_record_store)):
    await store.delete(record_id)
    logger.info("工资记录已删除 id=%s", record_id)
    return {"ok": True}


@router.post("/import", response_model=ImportResult, summary="上传工资表 Excel，解析后整批追加")
async def import_salary_excel(
    file: UploadFile = File(..., description="工资表 .xlsx / .xls（表头需含「姓名」或「部门」）"),
    default_year: Optional[int] = Form(None, description="只有月份（如 7）时补的年份，未传用系统设置"),
    store: RecordStore = Depends(get_record_store),
    importer: SalaryImporter = Depends(get_importer),
):
    filename = file.filename or ""
    raw = await file.read()
    if len(raw) > settings.max_upload_size_mb * 1024 * 1024:
        raise HTTPException(status_code=400, detail=f"文件不得超过 {settings.max_upload_size_mb}MB")
    return await importer.import_file(store, raw, filename, default_year=default_year)


@router.get("/export", summary="导出 Excel：detail 明细 / by_person 人员汇总 / by_department 部门汇总")
async def export_salary_excel(
    mode: ExportMode = Query(ExportMode.by_person, description="导出格式"),
    columns: Optional[List[str]] = Query(None, description="要导出的数值栏位（蛇形或驼峰），未传则全部"),
    department: str = Query("all", description="部门，all 为全院"),
    year: Optional[str] = Query(None, description="年份 YYYY"),
    month: Optional[str] = Query(None, description="月份"),
    search: Optional[str] = Query(None, description="关键字"),
    store: RecordStore = Depends(get_record_store),
):
    cols = normalize_columns(columns)
    records = filter_records(
        await store.get_all(), department=department, year=year, month=month, search=search
    )
    content = build_salary_excel(records, mode=mode, columns=cols)
    names = export_filenames(department, year, mode)
    logger.info("工资导出 mode=%s 记录=%s", mode.value, len(records))
    return StreamingResponse(
        io.BytesIO(content),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": build_content_disposition(names["ascii"], names["unicode"])},
    )


@router.get("/trend", response_model=List[TrendPoint], summary="全年 12 个月实发合计趋势")
async def salary_trend(
    year: Optional[str] = Query(None, description="年份 YYYY，未传用系统默认年份"),
    department: str = Query("all", description="部门，all 为全院"),
    store: RecordStore = Depends(get_record_store),
):
    y = year or str(settings.resolved_default_year())
    buckets = monthly_trend(await store.get_all(), y, department)
    return [TrendPoint(month=i + 1, label=f"{i + 1}月", total=v) for i, v in enumerate(buckets)]


@router.get("/stats", response_model=SalaryStats, summary="看板统计（依目前筛选条件）")
async def salary_stats(
    department: str = Query("all"),
    year: Optional[str] = Query(None),
    month: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    stat_field: str = Query("performance_salary", description="自选统计项（数值栏位名，蛇形或驼峰皆可）"),
    store: RecordStore = Depends(get_record_store),
):
    field = _resolve_stat_field(stat_field)
    records = filter_records(
        await store.get_all(), department=department, year=year, month=month, search=search
    )
    return summarize(records, field)


@router.get("/directory", response_model=List[DirectoryEntry], summary="全年人员名录（按实发合计排序）")
async def salary_directory(
    year: Optional[str] = Query(None, description="年份 YYYY，未传用系统默认年份"),
    department: str = Query("all"),
    search: Optional[str] = Query(None),
    store: RecordStore = Depends(get_record_store),
):
    y = year or str(settings.resolved_default_year())
    return employee_directory(await store.get_all(), year=y, department=department, search=search)


@router.get("/years", response_model=List[str], summary="资料中出现的年份（含系统默认年份）")
async def salary_years(store: RecordStore = Depends(get_record_store)):
    return available_years(await store.get_all(), settings.resolved_default_year())


@router.get("/departments", response_model=List[str], summary="部门清单")
async def salary_departments(store: RecordStore = Depends(get_record_store)):
    return known_departments(await store.get_all(), DEPARTMENTS)
