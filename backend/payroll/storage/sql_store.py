"""数据库存储：每个操作一个 session，整批导入同一个 transaction，失败 rollback。"""
import logging
from typing import List, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from payroll import crud
from payroll.errors import RecordNotFoundError, StoreReadError, StoreWriteError
from payroll.schemas import SalaryRecord

logger = logging.getLogger(__name__)


class SqlRecordStore:
    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def get_all(self) -> List[SalaryRecord]:
        try:
            async with self._session_factory() as db:
                return await crud.list_salary_records(db)
        except SQLAlchemyError as exc:
            logger.exception("读取 salary_records 失败")
            raise StoreReadError() from exc

    async def add_batch(self, records: Sequence[SalaryRecord]) -> None:
        try:
            async with self._session_factory() as db:
                async with db.begin():
                    await crud.add_salary_records(db, records)
        except SQLAlchemyError as exc:
            logger.exception("批量写入 salary_records 失败（%s 笔）", len(records))
            raise StoreWriteError() from exc

    async def update(self, record: SalaryRecord) -> None:
        try:
            async with self._session_factory() as db:
                async with db.begin():
                    row = await crud.get_salary_record_row(db, record.id)
                    if row is None:
                        raise RecordNotFoundError(record.id)
                    await crud.replace_salary_record(db, row, record)
        except SQLAlchemyError as exc:
            logger.exception("更新 salary_records id=%s 失败", record.id)
            raise StoreWriteError() from exc

    async def delete(self, record_id: str) -> None:
        try:
            async with self._session_factory() as db:
                async with db.begin():
                    deleted = await crud.delete_salary_record(db, record_id)
        except SQLAlchemyError as exc:
            logger.exception("删除 salary_records id=%s 失败", record_id)
            raise StoreWriteError() from exc
        if not deleted:
            raise RecordNotFoundError(record_id)
