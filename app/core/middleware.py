"""
File: app/core/middleware.py
Description: 请求追踪与 CORS 中间件

每个请求都会得到一个 request_id：
- 入站 X-Request-ID 合法 (8-64 位的字母数字及 -_.) 时直接沿用
- 否则生成 UUID v7
request_id 写入 request.state 供响应信封使用，回写到响应头，
并通过 logger.contextualize 附加到本次请求内的所有日志上。

Created: 2026-10-17
"""

import re
import time
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from uuid6 import uuid7

from app.core.config import settings
from app.core.logging import logger

REQUEST_ID_HEADER = "X-Request-ID"

# 探针类请求不写访问日志
QUIET_PATHS = frozenset({"/health", "/health/", "/favicon.ico"})

# 限制字符集与长度，避免把任意内容写进日志
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9\-_.]{8,64}$")


def resolve_request_id(raw: str | None) -> str:
    if raw and _REQUEST_ID_RE.match(raw):
        return raw
    return str(uuid7())


def _access_fields(request: Request, started: float) -> dict[str, Any]:
    return {
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "unknown",
        "duration_ms": round((time.perf_counter() - started) * 1000, 2),
    }


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        started = time.perf_counter()

        with logger.contextualize(request_id=request_id):
            try:
                response = await call_next(request)
            except Exception as exc:
                # 异常处理器没能兜住的错误
                logger.bind(**_access_fields(request, started)).opt(
                    exception=exc
                ).error("Request crashed")
                raise

            response.headers[REQUEST_ID_HEADER] = request_id
            if request.url.path not in QUIET_PATHS:
                logger.bind(
                    status_code=response.status_code,
                    **_access_fields(request, started),
                ).info("Request finished")
            return response


def register_middlewares(app: FastAPI) -> None:
    """
    注册顺序即包裹顺序：后注册者在最外层。
    """
    app.add_middleware(RequestContextMiddleware)

    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(o).rstrip("/") for o in settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=[REQUEST_ID_HEADER],
        )
