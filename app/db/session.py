"""
File: app/db/session.py
Description: 数据库会话管理 (Async SQLAlchemy)

本模块负责：
1. 创建进程内唯一的 AsyncEngine (生产: postgresql+asyncpg)
2. 配置连接池参数，从 Settings 读取 (SQLite 不支持池参数，自动跳过)
3. 创建 AsyncSession 工厂 (AsyncSessionLocal)，每个请求一个会话
4. 集成 orjson 用于 JSON 字段序列化
5. 提供引擎关闭函数，由应用 lifespan 在退出时调用

Created: 2026-10-17
"""

from typing import Any

import orjson
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import settings


def _orjson_serializer(obj: Any) -> str:
    """orjson 返回 bytes，SQLAlchemy 需要 str"""
    return orjson.dumps(obj).decode("utf-8")


def _orjson_deserializer(obj: str | bytes) -> Any:
    return orjson.loads(obj)


def build_engine_options(database_uri: str) -> dict[str, Any]:
    """
    按驱动组装 create_async_engine 参数。
    SQLite (aiosqlite) 使用单连接池，不接受 pool_size 等参数。
    """
    options: dict[str, Any] = {
        "echo": settings.DEBUG,
        "json_serializer": _orjson_serializer,
        "json_deserializer": _orjson_deserializer,
    }
    if database_uri.startswith("sqlite"):
        return options

    options.update(
        pool_pre_ping=settings.DB_POOL_PRE_PING,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )
    if database_uri.startswith("postgresql+asyncpg"):
        options["connect_args"] = {"ssl": False}
    return options


# 1. 创建异步引擎 (进程级单例，lifespan 结束时 dispose)
engine: AsyncEngine = create_async_engine(
    str(settings.SQLALCHEMY_DATABASE_URI),
    **build_engine_options(str(settings.SQLALCHEMY_DATABASE_URI)),
)

# 2. 创建异步会话工厂
# expire_on_commit=False 避免 commit 后访问属性触发隐式 IO
AsyncSessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)


async def close_engine() -> None:
    """
    关闭数据库引擎，释放连接池资源。
    """
    await engine.dispose()
