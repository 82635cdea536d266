"""矿产资源分院工资管理 API"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from payroll.config import settings
from payroll.database import create_engine_and_sessionmaker, init_db
from payroll.errors import PayrollError
from payroll.routers import auth, salary
from payroll.services.salary_import import SalaryImporter
from payroll.storage.factory import create_record_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    engine = None
    session_factory = None
    # 只有 database 后端需要建立 engine
    if settings.storage_backend == "database":
        engine, session_factory = create_engine_and_sessionmaker()
        await init_db(engine)
    app.state.record_store = create_record_store(settings, session_factory)
    app.state.importer = SalaryImporter(settings)
    logger.info("工资管理服务启动，存储后端=%s", settings.storage_backend)
    yield
    if engine is not None:
        await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Payroll records API",
    version="1.0.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(salary.router)


@app.exception_handler(PayrollError)
async def payroll_error_handler(request: Request, exc: PayrollError):
    if exc.status_code >= 500:
        logger.error("%s %s 失败：%s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    if isinstance(exc, HTTPException):
        raise exc
    logger.exception("未处理的例外 %s %s", request.method, request.url.path)
    detail = str(exc) if exc else "Internal Server Error"
    return JSONResponse(
        status_code=500,
        content={"detail": detail},
    )


@app.get("/")
def home():
    return {"message": "工资管理系统运行中"}
