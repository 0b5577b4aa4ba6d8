"""
数据库连接和会话管理
"""
import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from notetree.core.config import settings
from notetree.core.exceptions import StorageError

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    # SQLite驱动不接受连接池大小参数
    if url.startswith("sqlite"):
        return {"echo": settings.DEBUG}
    return {
        "echo": settings.DEBUG,
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
    }


# 创建异步引擎
engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# 创建会话工厂
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# 创建Base类
Base = declarative_base()


async def get_db() -> AsyncSession:
    """
    获取数据库会话依赖
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db():
    """创建所有表（开发环境使用，生产环境应使用迁移）"""
    # 导入模型以注册到 Base.metadata
    from notetree import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def write_transaction(db: AsyncSession, operation: str):
    """
    包裹一次写操作：成功时提交，SQLAlchemy失败时回滚并转换为 StorageError

    业务异常（NoteTreeError）同样会触发回滚，但原样向上抛出。

    Args:
        db: 数据库会话
        operation: 操作名称，写入日志和异常详情
    """
    try:
        yield db
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("Storage failure during %s", operation, exc_info=True)
        raise StorageError(operation) from exc
    except Exception:
        await db.rollback()
        raise
