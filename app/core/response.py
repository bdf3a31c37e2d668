"""
File: app/core/response.py
Description: 统一响应信封（Unified Response Envelope）模型

所有 HTTP 接口 (包括错误响应) 都返回如下结构:
{code, message, request_id, timestamp, data}

- 成功: code="success"，data 为业务数据 (删除类接口为 null)
- 失败: code 为 "domain.reason" 形式的业务码，data 可携带出错字段等细节

Created: 2026-10-17
"""

from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

SUCCESS_CODE = "success"


def _jsonable(data: Any) -> Any:
    """Pydantic 模型 (或模型列表) -> JSON 安全的字典"""
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, list):
        return [_jsonable(item) for item in data]
    return data


class ResponseModel(BaseModel, Generic[T]):
    """
    统一响应信封。
    Router 中声明 response_model=ResponseModel[PostRead] 即可获得完整的 OpenAPI 文档。
    """

    code: str = Field(default=SUCCESS_CODE, description="业务状态码 (success / domain.reason)")
    message: str = Field(default="Success", description="响应消息")
    request_id: str | None = Field(default=None, description="请求追踪ID (同 X-Request-ID)")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="响应生成时间 (UTC)",
    )
    data: T | None = Field(default=None, description="业务数据")

    @classmethod
    def success(
        cls,
        data: Any = None,
        message: str = "Success",
        request_id: str | None = None,
    ) -> "ResponseModel[Any]":
        return cls(
            code=SUCCESS_CODE,
            message=message,
            data=_jsonable(data),
            request_id=request_id,
        )

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        data: Any = None,
        request_id: str | None = None,
    ) -> "ResponseModel[Any]":
        return cls(code=code, message=message, data=data, request_id=request_id)
