"""写入三笔示范工资记录（存储为空时才写入）。依 PAYROLL_STORAGE_BACKEND 选择存储后端。"""
import asyncio
import logging
import sys
from pathlib import Path

# 项目根目录（backend）
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from payroll.config import settings
from payroll.database import create_engine_and_sessionmaker, init_db
from payroll.sample_data import sample_salary_records
from payroll.storage.factory import create_record_store
from payroll.storage.protocols import RecordStore

logger = logging.getLogger("seed_sample_records")


async def seed(store: RecordStore) -> int:
    """回传写入笔数；已有资料时不写入。"""
    existing = await store.get_all()
    if existing:
        logger.info("已有 %s 笔工资记录，略过示范资料", len(existing))
        return 0
    records = sample_salary_records()
    await store.add_batch(records)
    logger.info("已写入 %s 笔示范工资记录", len(records))
    return len(records)


async def run() -> None:
    engine = None
    session_factory = None
    if settings.storage_backend == "database":
        engine, session_factory = create_engine_and_sessionmaker()
        await init_db(engine)
    try:
        count = await seed(create_record_store(settings, session_factory))
        print(f"写入 {count} 笔")
    finally:
        if engine is not None:
            await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level.upper())
    asyncio.run(run())
