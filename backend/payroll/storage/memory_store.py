"""内存存储 - 测试与示范用（进程结束即消失）。"""
from typing import Dict, Iterable, List, Optional, Sequence

from payroll.errors import RecordNotFoundError
from payroll.schemas import SalaryRecord


class MemoryRecordStore:
    """Dict-backed RecordStore；保持插入顺序。"""

    def __init__(self, records: Optional[Iterable[SalaryRecord]] = None) -> None:
        self._records: Dict[str, SalaryRecord] = {}
        for rec in records or []:
            self._records[rec.id] = rec

    async def get_all(self) -> List[SalaryRecord]:
        return list(self._records.values())

    async def add_batch(self, records: Sequence[SalaryRecord]) -> None:
        for rec in records:
            self._records[rec.id] = rec

    async def update(self, record: SalaryRecord) -> None:
        if record.id not in self._records:
            raise RecordNotFoundError(record.id)
        self._records[record.id] = record

    async def delete(self, record_id: str) -> None:
        if self._records.pop(record_id, None) is None:
            raise RecordNotFoundError(record_id)
