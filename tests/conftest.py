"""
File: tests/conftest.py
Description: Pytest 全局 Fixtures 配置 (Async + 独立测试库)

1. 在导入 app 之前注入测试环境变量 (SECRET_KEY / DSN)
2. 默认使用内存 SQLite (aiosqlite + StaticPool)，设置 TEST_DATABASE_URL 可切换到 PostgreSQL
3. 每个测试函数独立建表 / 删表，互不干扰
4. HTTP 客户端每个请求使用独立会话，行为与生产环境 get_db 一致

Created: 2026-10-17
"""

import asyncio
import os
import sys
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

# ------------------------------------------------------------------------------
# Windows 平台特定修复 (必须在任何 async 操作之前)
# ------------------------------------------------------------------------------
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# ------------------------------------------------------------------------------
# 1. 环境配置 (必须早于任何 app.* 导入)
# ------------------------------------------------------------------------------
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-pytest-only-0123456789")
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", TEST_DATABASE_URL)
os.environ.setdefault("ENVIRONMENT", "local")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.core.config import settings
from app.core.security import TokenClaims, create_access_token, decode_access_token
from app.db.models import Base, User
from app.main import app

API = settings.API_V1_STR


# ------------------------------------------------------------------------------
# 2. 数据库 Fixtures
# ------------------------------------------------------------------------------


@pytest_asyncio.fixture(scope="function")
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    创建测试专用的数据库引擎 (Function 级别)。
    内存 SQLite 必须共享同一个连接，否则每个连接看到的是不同的空库。
    """
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(TEST_DATABASE_URL, pool_pre_ping=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    获取测试用的数据库会话 (Function 级别)，供 Service 单元测试使用。
    """
    async with session_factory() as session:
        yield session


# ------------------------------------------------------------------------------
# 3. HTTP Fixtures
# ------------------------------------------------------------------------------


@pytest_asyncio.fixture(scope="function")
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """
    获取异步 HTTP 客户端。
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"  # type: ignore
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ------------------------------------------------------------------------------
# 4. 数据构造 Fixtures
# ------------------------------------------------------------------------------


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """
    直接落库一个用户 (绕过身份解析流程)，供 Service 单元测试使用。
    """

    async def _make_user(username: str, email: str | None = None, **kwargs: Any) -> User:
        user = User(username=username, email=email or f"{username}@example.com", **kwargs)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


def claims_for(user: User) -> TokenClaims:
    """把用户转换为鉴权依赖产出的声明，等价于携带该用户的有效 Token"""
    return decode_access_token(create_access_token(user_id=user.id, email=user.email))


@pytest.fixture(name="claims_for")
def claims_for_fixture() -> Callable[[User], TokenClaims]:
    return claims_for


SignIn = Callable[..., Awaitable[dict[str, Any]]]


@pytest.fixture
def sign_in(client: AsyncClient) -> SignIn:
    """
    通过 oauth-handler 登录，返回 {"user": ..., "token": ..., "headers": ...}

    用法:
        ava = await sign_in("a@x.com", name="Ava")
        await client.post(..., headers=ava["headers"])
    """

    async def _sign_in(
        email: str,
        *,
        name: str | None = None,
        provider: str = "google",
        provider_account_id: str | None = None,
    ) -> dict[str, Any]:
        payload = {
            "email": email,
            "name": name,
            "provider": provider,
            "providerAccountId": provider_account_id or f"{provider}-{email}",
        }
        response = await client.post(f"{API}/users/oauth-handler", json=payload)
        assert response.status_code == 200, response.text

        data = response.json()["data"]
        token = data["token"]["access_token"]
        return {
            "user": data["user"],
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _sign_in
