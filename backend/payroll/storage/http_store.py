"""远程 CRUD API 存储（单一资源集合 /records，以 id 为键）。

GET    /records        取全部
POST   /records        追加一批（JSON 数组）
PUT    /records/{id}   整笔替换
DELETE /records/{id}   删除
非 2xx 或连线失败一律往上抛，不重试。
"""
import logging
from typing import List, Optional, Sequence

import httpx
from pydantic import TypeAdapter, ValidationError

from payroll.errors import RecordNotFoundError, StoreReadError, StoreWriteError
from payroll.schemas import SalaryRecord

logger = logging.getLogger(__name__)

_records_adapter = TypeAdapter(List[SalaryRecord])


class HttpRecordStore:
    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout, transport=self._transport)

    async def get_all(self) -> List[SalaryRecord]:
        try:
            async with self._client() as client:
                resp = await client.get("/records")
        except httpx.RequestError as exc:
            logger.exception("远程读取工资数据失败")
            raise StoreReadError() from exc
        if resp.status_code != 200:
            logger.error("远程读取工资数据失败：HTTP %s", resp.status_code)
            raise StoreReadError(f"读取工资数据失败（HTTP {resp.status_code}），请稍后刷新重试。")
        try:
            return _records_adapter.validate_python(resp.json())
        except (ValueError, ValidationError) as exc:
            logger.exception("远程工资数据格式错误")
            raise StoreReadError("远程工资数据格式错误，无法读取。") from exc

    async def _write(self, method: str, url: str, record_id: Optional[str] = None, **kwargs) -> None:
        try:
            async with self._client() as client:
                resp = await client.request(method, url, **kwargs)
        except httpx.RequestError as exc:
            logger.exception("远程写入失败：%s %s", method, url)
            raise StoreWriteError() from exc
        if resp.status_code == 404 and record_id is not None:
            raise RecordNotFoundError(record_id)
        if resp.status_code >= 300:
            logger.error("远程写入失败：%s %s → HTTP %s", method, url, resp.status_code)
            raise StoreWriteError(f"保存工资数据失败（HTTP {resp.status_code}），请刷新后确认数据并重试。")

    async def add_batch(self, records: Sequence[SalaryRecord]) -> None:
        payload = [r.model_dump(mode="json", by_alias=True) for r in records]
        await self._write("POST", "/records", json=payload)

    async def update(self, record: SalaryRecord) -> None:
        await self._write(
            "PUT",
            f"/records/{record.id}",
            record_id=record.id,
            json=record.model_dump(mode="json", by_alias=True),
        )

    async def delete(self, record_id: str) -> None:
        await self._write("DELETE", f"/records/{record_id}", record_id=record_id)
