"""Alembic 环境：使用 payroll 的 Base 与 database_url，支持 SQLite / PostgreSQL 迁移。
路径一律以 pathlib 解析，不依赖工作目录。"""
from pathlib import Path
import sys

from logging.config import fileConfig

from alembic import context

# backend 目录加入 sys.path，使 payroll 可被 import
_script_dir = Path(__file__).resolve().parent
_project_root = _script_dir.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from payroll.config import settings
from payroll.database import Base, normalize_database_url
from payroll.models import SalaryRecordRow  # noqa: F401

config = context.config
if config.config_file_name is not None:
    config_path = Path(config.config_file_name).resolve()
    if config_path.exists():
        fileConfig(str(config_path))

# Alembic 走同步连线：aiosqlite -> sqlite、asyncpg -> psycopg2
# SQLite 相对路径改为以 backend 为基准的绝对路径
target_metadata = Base.metadata
db_url = normalize_database_url(settings.database_url)
if db_url.startswith("sqlite+aiosqlite"):
    sync_url = db_url.replace("sqlite+aiosqlite", "sqlite", 1)
    if sync_url.startswith("sqlite:///./"):
        rel = sync_url.replace("sqlite:///./", "").strip()
        sync_url = "sqlite:///" + (_project_root / rel).resolve().as_posix()
else:
    sync_url = db_url.replace("postgresql+asyncpg", "postgresql+psycopg2", 1)
config.set_main_option("sqlalchemy.url", sync_url)


def run_migrations_offline() -> None:
    """离线模式：只产生 SQL，不连 DB"""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """在线模式：连 DB 执行迁移"""
    from sqlalchemy import create_engine
    url = config.get_main_option("sqlalchemy.url")
    connectable = create_engine(url)
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
