"""CRUD 操作 - 工资记录（salary_records）。呼叫端负责 commit。"""
from typing import List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from payroll.fields import NUMERIC_FIELDS
from payroll.models import SalaryRecordRow
from payroll.schemas import SalaryRecord

_ROW_FIELDS = ["id", "sequence", "employee_name", "department", "month", *NUMERIC_FIELDS]


def row_to_record(row: SalaryRecordRow) -> SalaryRecord:
    return SalaryRecord.model_validate({f: getattr(row, f) for f in _ROW_FIELDS})


def _apply_record(row: SalaryRecordRow, record: SalaryRecord) -> SalaryRecordRow:
    for f in _ROW_FIELDS:
        if f == "id":
            continue
        setattr(row, f, getattr(record, f))
    return row


async def list_salary_records(db: AsyncSession) -> List[SalaryRecord]:
    q = select(SalaryRecordRow).order_by(SalaryRecordRow.created_at, SalaryRecordRow.sequence)
    r = await db.execute(q)
    return [row_to_record(row) for row in r.scalars().all()]


async def get_salary_record_row(db: AsyncSession, record_id: str) -> Optional[SalaryRecordRow]:
    r = await db.execute(select(SalaryRecordRow).where(SalaryRecordRow.id == record_id))
    return r.scalar_one_or_none()


async def add_salary_records(db: AsyncSession, records: Sequence[SalaryRecord]) -> int:
    rows = [_apply_record(SalaryRecordRow(id=rec.id), rec) for rec in records]
    db.add_all(rows)
    await db.flush()
    return len(rows)


async def replace_salary_record(db: AsyncSession, row: SalaryRecordRow, record: SalaryRecord) -> SalaryRecordRow:
    _apply_record(row, record)
    await db.flush()
    return row


async def delete_salary_record(db: AsyncSession, record_id: str) -> int:
    r = await db.execute(delete(SalaryRecordRow).where(SalaryRecordRow.id == record_id))
    return r.rowcount or 0
