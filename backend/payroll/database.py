"""
数据库连接与 Session（Async SQLAlchemy）
- PostgreSQL 一律改用 asyncpg driver（postgresql+asyncpg://）
- 本地 SQLite 开发可在启动时 create_all；正式环境交给 Alembic
"""
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from payroll.config import settings


def normalize_database_url(url: str) -> str:
    """Render 等平台常给 postgres:// 或 postgresql://，async 必须改成 postgresql+asyncpg://"""
    db_url = str(url or "").strip()
    if db_url.startswith("postgres://"):
        return "postgresql+asyncpg://" + db_url[len("postgres://"):]
    if db_url.startswith("postgresql://"):
        return "postgresql+asyncpg://" + db_url[len("postgresql://"):]
    if db_url.startswith("postgresql+psycopg2://"):
        return "postgresql+asyncpg://" + db_url[len("postgresql+psycopg2://"):]
    return db_url


class Base(DeclarativeBase):
    pass


def create_engine_and_sessionmaker(url: str | None = None) -> tuple[AsyncEngine, async_sessionmaker]:
    db_url = normalize_database_url(url or settings.database_url)
    engine = create_async_engine(
        db_url,
        echo=settings.debug,
        pool_pre_ping=True,
    )
    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
    return engine, session_factory


async def init_db(engine: AsyncEngine) -> None:
    if not settings.auto_create_tables:
        return
    # 确保 models 已注册到 Base.metadata
    from payroll import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
