"""依设置建立存储后端。"""
from pathlib import Path
from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from payroll.config import BASE_DIR, Settings, settings as default_settings
from payroll.storage.http_store import HttpRecordStore
from payroll.storage.json_store import JsonFileRecordStore
from payroll.storage.memory_store import MemoryRecordStore
from payroll.storage.protocols import RecordStore
from payroll.storage.sql_store import SqlRecordStore


def _resolve_path(p: Path) -> Path:
    return p if p.is_absolute() else BASE_DIR / p


def create_record_store(
    settings: Optional[Settings] = None,
    session_factory: Optional[async_sessionmaker] = None,
) -> RecordStore:
    """database 后端需传入 session_factory（由 app 启动时建立 engine）。"""
    s = settings or default_settings
    if s.storage_backend == "database":
        if session_factory is None:
            raise ValueError("database 存储需要 session_factory")
        return SqlRecordStore(session_factory)
    if s.storage_backend == "json":
        return JsonFileRecordStore(_resolve_path(s.json_store_path))
    if s.storage_backend == "remote":
        return HttpRecordStore(s.remote_api_base_url, timeout=s.remote_api_timeout)
    return MemoryRecordStore()
