"""
File: alembic/env.py
Description: Alembic 迁移环境配置 - 同步版本

策略：
- 迁移 (Migration): 使用 psycopg (Sync) 同步驱动，避免在迁移脚本中管理事件循环
- 运行 (Runtime): 使用 asyncpg (Async)
- 本地 SQLite (aiosqlite) 调试库同样可迁移，自动切换为同步 sqlite 驱动

Created: 2026-10-17
"""

import sys
from logging.config import fileConfig
from pathlib import Path
from urllib.parse import quote_plus

from sqlalchemy import create_engine, pool

from alembic import context  # type: ignore

# ------------------------------------------------------------------------------
# 0. 将项目根目录加入 sys.path
# ------------------------------------------------------------------------------
sys.path.insert(0, str(Path(__file__).parent.parent.resolve()))

# ------------------------------------------------------------------------------
# 1. 导入项目配置与模型
# ------------------------------------------------------------------------------
from app.core.config import settings
from app.db.models import Base

config = context.config

# 2. 配置日志
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


# ------------------------------------------------------------------------------
# 3. 构建同步数据库 URL
# ------------------------------------------------------------------------------
def build_sync_uri() -> str:
    async_uri = str(settings.SQLALCHEMY_DATABASE_URI)

    if settings.is_sqlite:
        return async_uri.replace("sqlite+aiosqlite", "sqlite")

    if settings.POSTGRES_SERVER and settings.POSTGRES_USER:
        # 从组件手动构建，对密码做 URL 编码 (密码中可能包含 '@' 等字符)
        encoded_password = quote_plus(settings.POSTGRES_PASSWORD or "")
        return (
            f"postgresql+psycopg://{settings.POSTGRES_USER}:{encoded_password}"
            f"@{settings.POSTGRES_SERVER}:{settings.POSTGRES_PORT}/{settings.POSTGRES_DB}"
        )

    # 直接给出了完整 DSN 的情况
    return async_uri.replace("postgresql+asyncpg", "postgresql+psycopg")


# configparser 会把 % 当作插值符号
config.set_main_option("sqlalchemy.url", build_sync_uri().replace("%", "%%"))

# 4. 指定目标元数据
target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """离线模式迁移：生成 SQL 脚本而不实际连接数据库"""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """在线模式迁移：连接数据库并执行迁移"""
    connectable = create_engine(
        config.get_main_option("sqlalchemy.url") or "",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
            # SQLite 不支持 ALTER 约束，使用批量模式重建表
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()

    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
