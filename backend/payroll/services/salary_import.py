"""工资表导入：同一时间只允许一个导入；解析在 worker thread 执行，成功后整批追加。"""
import asyncio
import logging
from typing import Optional

from payroll.config import Settings, settings as default_settings
from payroll.errors import ImportInProgressError
from payroll.schemas import ImportResult
from payroll.services.salary_excel_parser import check_file_type, parse_salary_workbook
from payroll.storage.protocols import RecordStore

logger = logging.getLogger(__name__)


class SalaryImporter:
    """整批导入：解析失败或写入失败都不会留下部分数据。"""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or default_settings
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def import_file(
        self,
        store: RecordStore,
        content: bytes,
        filename: str,
        default_year: Optional[int] = None,
    ) -> ImportResult:
        check_file_type(filename)
        if self._lock.locked():
            raise ImportInProgressError()
        async with self._lock:
            year = default_year or self._settings.resolved_default_year()
            batch = await asyncio.to_thread(
                parse_salary_workbook,
                content,
                filename,
                default_year=year,
                default_month=self._settings.default_month,
                header_scan_rows=self._settings.header_scan_rows,
                serial_threshold=self._settings.excel_serial_threshold,
            )
            await store.add_batch(batch.records)
            logger.info("工资表导入完成 filename=%s 笔数=%s", filename, batch.count)
            return ImportResult(
                count=batch.count,
                message=f"成功导入 {batch.count} 条数据。",
                warnings=batch.warnings,
            )
