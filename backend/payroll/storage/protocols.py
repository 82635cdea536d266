"""工资记录存储接口。

解析、汇总与 API 只依赖此接口；本地数据库、本地 JSON 文件、远程 CRUD API 与测试用内存实现
皆可替换。写入完成后的下一次读取须看得到写入结果，除此之外不保证一致性窗口。
"""
from typing import List, Protocol, Sequence, runtime_checkable

from payroll.schemas import SalaryRecord


@runtime_checkable
class RecordStore(Protocol):
    async def get_all(self) -> List[SalaryRecord]: ...

    async def add_batch(self, records: Sequence[SalaryRecord]) -> None: ...

    async def update(self, record: SalaryRecord) -> None: ...

    async def delete(self, record_id: str) -> None: ...
