"""本地 JSON 文件存储：整份记录存成一个 JSON 数组（驼峰字段名）。

每次写入先写临时文件再 replace，避免写到一半的文件被读到。文件读写在 worker thread 执行，不阻塞 event loop。
"""
import asyncio
import json
import logging
import os
from pathlib import Path
from typing import List, Sequence

from pydantic import TypeAdapter, ValidationError

from payroll.errors import RecordNotFoundError, StoreReadError, StoreWriteError
from payroll.schemas import SalaryRecord

logger = logging.getLogger(__name__)

_records_adapter = TypeAdapter(List[SalaryRecord])


class JsonFileRecordStore:
    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> List[SalaryRecord]:
        if not self._path.is_file():
            return []
        try:
            raw = self._path.read_bytes()
            if not raw.strip():
                return []
            return _records_adapter.validate_json(raw)
        except (OSError, ValidationError) as exc:
            logger.exception("读取工资数据文件失败：%s", self._path)
            raise StoreReadError() from exc

    def _save(self, records: List[SalaryRecord]) -> None:
        payload = [r.model_dump(by_alias=True) for r in records]
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=1), encoding="utf-8")
            os.replace(tmp, self._path)
        except OSError as exc:
            logger.exception("写入工资数据文件失败：%s", self._path)
            raise StoreWriteError() from exc

    async def get_all(self) -> List[SalaryRecord]:
        return await asyncio.to_thread(self._load)

    async def add_batch(self, records: Sequence[SalaryRecord]) -> None:
        data = await asyncio.to_thread(self._load)
        data.extend(records)
        await asyncio.to_thread(self._save, data)

    async def update(self, record: SalaryRecord) -> None:
        data = await asyncio.to_thread(self._load)
        for i, rec in enumerate(data):
            if rec.id == record.id:
                data[i] = record
                break
        else:
            raise RecordNotFoundError(record.id)
        await asyncio.to_thread(self._save, data)

    async def delete(self, record_id: str) -> None:
        data = await asyncio.to_thread(self._load)
        kept = [r for r in data if r.id != record_id]
        if len(kept) == len(data):
            raise RecordNotFoundError(record_id)
        await asyncio.to_thread(self._save, kept)
