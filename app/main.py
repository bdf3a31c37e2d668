"""
File: app/main.py
Description: FastAPI 应用入口

- lifespan: 初始化日志，退出时释放数据库连接池
- create_app: 组装中间件 / 异常处理器 / 业务路由
- /health 与 / 两个系统路由同样返回统一响应信封

Created: 2026-10-17
"""

import asyncio
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

# asyncpg 在 Windows 上只能跑在 SelectorEventLoop 上，需在事件循环创建前切换
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from fastapi import FastAPI
from fastapi.responses import ORJSONResponse

from app.api_router import api_router
from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.core.logging import logger, setup_logging
from app.core.middleware import register_middlewares
from app.core.response import ResponseModel
from app.db.session import close_engine

DOCS_URL = "/docs"
REDOC_URL = "/redoc"
HEALTH_URL = "/health"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.bind(environment=settings.ENVIRONMENT, api_prefix=settings.API_V1_STR).info(
        f"{settings.PROJECT_NAME} starting"
    )
    try:
        yield
    finally:
        await close_engine()
        logger.info(f"{settings.PROJECT_NAME} stopped")


async def health_check() -> ResponseModel[dict[str, str]]:
    """存活探针，不访问数据库"""
    return ResponseModel.success(data={"status": "ok"})


async def service_index() -> ResponseModel[dict[str, str]]:
    return ResponseModel.success(
        message=f"Welcome to {settings.PROJECT_NAME}",
        data={
            "status": "running",
            "api_prefix": settings.API_V1_STR,
            "docs_url": DOCS_URL,
            "redoc_url": REDOC_URL,
            "health_url": HEALTH_URL,
        },
    )


def _mount_system_routes(app: FastAPI) -> None:
    envelope = ResponseModel[dict[str, str]]
    app.add_api_route(
        HEALTH_URL, health_check, methods=["GET"], tags=["system"],
        summary="健康检查", response_model=envelope,
    )
    app.add_api_route(
        "/", service_index, methods=["GET"], tags=["system"],
        summary="服务信息", response_model=envelope,
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url=DOCS_URL,
        redoc_url=REDOC_URL,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    register_middlewares(app)
    register_exception_handlers(app)

    app.include_router(api_router, prefix=settings.API_V1_STR)
    _mount_system_routes(app)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000)
