"""
NoteTree - FastAPI应用主入口
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from notetree.core.config import settings
from notetree.core.exceptions import NoteTreeError
from notetree.db.database import engine, init_db
from notetree.api import auth, folders, notes

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger("notetree")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期"""
    logger.info("Starting %s %s", settings.APP_NAME, settings.APP_VERSION)
    await init_db()
    yield
    await engine.dispose()
    logger.info("Shutdown completed")


# 创建FastAPI应用
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="基于访问码的个人笔记后端API",
    lifespan=lifespan,
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
    openapi_url=f"{settings.API_PREFIX}/openapi.json"
)

# 配置CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"]
)


def error_envelope(status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "code": code}
    )


@app.exception_handler(NoteTreeError)
async def notetree_error_handler(request: Request, exc: NoteTreeError):
    """业务异常 -> 响应信封"""
    return error_envelope(exc.status_code, exc.message, exc.error_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """请求体校验失败"""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return error_envelope(status.HTTP_400_BAD_REQUEST, message, "VALIDATION_ERROR")


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    """读操作中未被包装的数据库异常"""
    logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return error_envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Storage failure", "STORAGE_ERROR")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """处理所有未捕获的异常"""
    logger.error("Uncaught exception on %s %s", request.method, request.url.path, exc_info=exc)
    return error_envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        str(exc) if settings.DEBUG else "An unexpected error occurred",
        "INTERNAL_ERROR"
    )


# 注册路由
app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(folders.router, prefix=settings.API_PREFIX)
app.include_router(notes.router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    """根路径"""
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "message": "NoteTree API is running"
    }


@app.get(f"{settings.API_PREFIX}/health")
async def health_check():
    """健康检查"""
    return {"status": "healthy", "version": settings.APP_VERSION}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
