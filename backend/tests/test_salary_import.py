"""
工资表导入服务测试：整批写入、重复导入、并发锁、失败不留资料。
"""
import asyncio

import pytest

from payroll.config import Settings
from payroll.errors import (
    HeaderNotFoundError,
    ImportInProgressError,
    StoreWriteError,
    UnsupportedFileTypeError,
)
from payroll.services.salary_import import SalaryImporter
from payroll.storage.memory_store import MemoryRecordStore

ROWS = [
    ["2025年1月工资表"],
    ["姓名", "部门", "月份", "岗位工资", "基本工资"],
    ["张三", "基础地质所", "2025-01", 5200, 3500],
    ["李四", "规划所", "7", 5500, 3800],
]


class FailingStore(MemoryRecordStore):
    async def add_batch(self, records):
        raise StoreWriteError()


class SlowStore(MemoryRecordStore):
    def __init__(self):
        super().__init__()
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def add_batch(self, records):
        self.started.set()
        await self.release.wait()
        await super().add_batch(records)


@pytest.fixture
def importer():
    return SalaryImporter(Settings(default_year=2025))


@pytest.mark.asyncio
async def test_import_appends_batch(importer, make_xlsx):
    store = MemoryRecordStore()
    result = await importer.import_file(store, make_xlsx(ROWS), "工资.xlsx")
    assert result.count == 2
    assert result.message == "成功导入 2 条数据。"
    assert result.warnings == []
    records = await store.get_all()
    assert [r.month for r in records] == ["2025-01", "2025-07"]
    assert records[0].total == 8700


@pytest.mark.asyncio
async def test_default_year_override(importer, make_xlsx):
    store = MemoryRecordStore()
    await importer.import_file(store, make_xlsx(ROWS), "工资.xlsx", default_year=2024)
    assert [r.month for r in await store.get_all()] == ["2025-01", "2024-07"]


@pytest.mark.asyncio
async def test_importing_same_file_twice_doubles_records(importer, make_xlsx):
    """重复导入不去重：笔数加倍，id 全部不同"""
    store = MemoryRecordStore()
    content = make_xlsx(ROWS)
    await importer.import_file(store, content, "工资.xlsx")
    await importer.import_file(store, content, "工资.xlsx")
    records = await store.get_all()
    assert len(records) == 4
    assert len({r.id for r in records}) == 4


@pytest.mark.asyncio
async def test_parse_failure_leaves_store_untouched(importer, make_xlsx):
    store = MemoryRecordStore()
    with pytest.raises(HeaderNotFoundError):
        await importer.import_file(store, make_xlsx([["无表头"], ["张三", 100]]), "工资.xlsx")
    assert await store.get_all() == []
    assert not importer.busy


@pytest.mark.asyncio
async def test_unsupported_file_type(importer):
    with pytest.raises(UnsupportedFileTypeError):
        await importer.import_file(MemoryRecordStore(), b"a,b", "工资.csv")


@pytest.mark.asyncio
async def test_store_failure_propagates_and_releases_lock(importer, make_xlsx):
    with pytest.raises(StoreWriteError):
        await importer.import_file(FailingStore(), make_xlsx(ROWS), "工资.xlsx")
    assert not importer.busy


@pytest.mark.asyncio
async def test_concurrent_import_rejected(importer, make_xlsx):
    """导入进行中再上传：回报 ImportInProgressError，不排队"""
    store = SlowStore()
    content = make_xlsx(ROWS)
    first = asyncio.create_task(importer.import_file(store, content, "工资.xlsx"))
    await asyncio.wait_for(store.started.wait(), timeout=5)
    assert importer.busy
    with pytest.raises(ImportInProgressError):
        await importer.import_file(store, content, "工资.xlsx")
    store.release.set()
    result = await first
    assert result.count == 2
    assert len(await store.get_all()) == 2
    assert not importer.busy
