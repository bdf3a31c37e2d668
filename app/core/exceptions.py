"""
File: app/core/exceptions.py
Description: 业务异常类与全局异常处理器

1. 业务异常基类（AppException）接受 BaseErrorCode 枚举
2. 全局异常处理器把异常映射为：语义化 HTTP 状态码 + 字符串业务码
3. 存储层异常在边界处翻译：唯一约束冲突 -> 409，其他数据库故障 -> 500
4. 使用 ResponseModel.fail() 构造统一的失败响应信封

本模块不做任何重试，所有错误在第一次出现时直接返回给调用方。

Created: 2026-10-17
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.error_code import BaseErrorCode, SystemErrorCode
from app.core.logging import logger
from app.core.response import ResponseModel

# ------------------------------------------------------------------------------
# 1. 自定义业务异常类
# ------------------------------------------------------------------------------


class AppException(Exception):
    """
    应用基础异常类。

    用法示例:
        raise AppException(PostError.POST_NOT_FOUND)
        raise AppException(PostError.SLUG_CONFLICT, data={"slug": slug})
    """

    def __init__(
        self,
        error: BaseErrorCode,
        message: str = "",
        data: Any = None,
    ):
        self.error = error
        self.http_status = error.http_status
        self.code = error.code
        self.message = message or error.msg
        self.data = data
        super().__init__(self.message)


# ------------------------------------------------------------------------------
# 2. 辅助函数
# ------------------------------------------------------------------------------


def _get_request_id(request: Request) -> str:
    """尝试从 request.state 获取 request_id，如果不存在则返回 'unknown'"""
    return str(getattr(request.state, "request_id", "unknown"))


def _fail(
    request_id: str,
    http_status: int,
    code: str,
    message: str,
    data: Any = None,
) -> ORJSONResponse:
    response_model = ResponseModel.fail(
        code=code,
        message=message,
        data=data,
        request_id=request_id,
    )
    return ORJSONResponse(
        status_code=http_status,
        content=response_model.model_dump(mode="json"),
    )


# ------------------------------------------------------------------------------
# 3. 全局异常处理器 (Handlers)
# ------------------------------------------------------------------------------


async def app_exception_handler(request: Request, exc: AppException) -> ORJSONResponse:
    """
    处理自定义业务异常 (AppException)
    直接映射为定义好的 HTTP 状态码和 Code
    """
    request_id = _get_request_id(request)

    logger.bind(
        request_id=request_id,
        code=exc.code,
        http_status=exc.http_status,
        message=exc.message,
    ).warning("Business exception occurred")

    return _fail(request_id, exc.http_status, exc.code, exc.message, exc.data)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> ORJSONResponse:
    """
    处理 Pydantic 校验异常 (FastAPI 默认抛出 422)
    映射目标: HTTP 400 Bad Request / Code: system.invalid_params
    """
    request_id = _get_request_id(request)

    errors = exc.errors()
    first_error = errors[0] if errors else {}

    # loc 示例: ('body', 'title')
    loc = first_error.get("loc", [])
    field_name = str(loc[-1]) if loc else "unknown"
    msg = first_error.get("msg", "Invalid parameter")
    readable_message = f"{field_name}: {msg}"

    logger.bind(
        request_id=request_id,
        detail=readable_message,
    ).warning("Request validation failed")

    # 只回传可 JSON 化的字段，ctx 中可能带有异常对象
    safe_errors = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg"), "type": err.get("type")}
        for err in errors
    ]

    return _fail(
        request_id,
        SystemErrorCode.INVALID_PARAMS.http_status,
        SystemErrorCode.INVALID_PARAMS.code,
        readable_message,
        {"field": field_name, "errors": safe_errors},
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> ORJSONResponse:
    """
    处理框架层面的 HTTP 异常 (如 404 路由未匹配, 405 Method Not Allowed)
    """
    request_id = _get_request_id(request)

    code_str = (
        SystemErrorCode.NOT_FOUND.code
        if exc.status_code == 404
        else "system.http_error"
    )

    logger.bind(
        request_id=request_id,
        status_code=exc.status_code,
        detail=str(exc.detail),
    ).warning("Framework HTTP exception occurred")

    return _fail(request_id, exc.status_code, code_str, str(exc.detail))


async def integrity_exception_handler(
    request: Request, exc: IntegrityError
) -> ORJSONResponse:
    """
    处理存储层唯一约束 / 外键约束冲突
    典型场景: 并发首次登录生成了相同的 username，或并发创建了同 slug 文章
    """
    request_id = _get_request_id(request)

    logger.bind(request_id=request_id, detail=str(exc.orig)).warning(
        "Store integrity violation"
    )

    return _fail(
        request_id,
        SystemErrorCode.CONFLICT.http_status,
        SystemErrorCode.CONFLICT.code,
        SystemErrorCode.CONFLICT.msg,
    )


async def database_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> ORJSONResponse:
    """
    处理其余数据库异常 (连接失败、语句错误等)
    """
    request_id = _get_request_id(request)

    logger.opt(exception=exc).bind(request_id=request_id).error(
        "Database exception occurred"
    )

    return _fail(
        request_id,
        SystemErrorCode.DB_ERROR.http_status,
        SystemErrorCode.DB_ERROR.code,
        SystemErrorCode.DB_ERROR.msg,
    )


async def general_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """
    处理所有未捕获的异常 (500 Internal Server Error)
    屏蔽内部细节，返回通用系统错误
    """
    request_id = _get_request_id(request)

    logger.opt(exception=exc).bind(request_id=request_id).error(
        "Unhandled system exception occurred"
    )

    return _fail(
        request_id,
        SystemErrorCode.INTERNAL_ERROR.http_status,
        SystemErrorCode.INTERNAL_ERROR.code,
        SystemErrorCode.INTERNAL_ERROR.msg,
    )


# ------------------------------------------------------------------------------
# 4. 异常处理器注册函数
# ------------------------------------------------------------------------------


def register_exception_handlers(app: FastAPI) -> None:
    """
    统一注册所有异常处理器。
    应在 main.py 中调用。
    """
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore

    # IntegrityError 是 SQLAlchemyError 的子类，Starlette 按 MRO 选择最具体的处理器
    app.add_exception_handler(IntegrityError, integrity_exception_handler)  # type: ignore
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)  # type: ignore

    app.add_exception_handler(Exception, general_exception_handler)
