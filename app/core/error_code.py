"""
File: app/core/error_code.py
Description: 全局错误码基类与系统级错误定义

定义结构 Tuple(http_status, code, message):
1. http_status: HTTP 响应状态码 (4xx/5xx)
2. code: 字符串业务码 (格式: domain.reason)
3. message: 默认的人类可读错误消息

各业务领域 (posts / comments / users / auth) 在自己的 constants.py 中继承
BaseErrorCode 定义领域错误码。

Created: 2026-10-17
"""

from enum import Enum

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class BaseErrorCode(Enum):
    """
    错误码枚举基类
    所有业务领域的错误码 Enum 必须继承此类。

    Value Tuple Definition:
    (http_status, code, msg)
    """

    @property
    def http_status(self) -> int:
        """获取映射的 HTTP 状态码"""
        return self.value[0]

    @property
    def code(self) -> str:
        """获取业务错误标识 (domain.reason)"""
        return self.value[1]

    @property
    def msg(self) -> str:
        """获取默认错误描述信息"""
        return self.value[2]


class SystemErrorCode(BaseErrorCode):
    """
    系统通用错误定义 (System Domain)
    包含: 参数校验、凭证校验、存储层故障
    """

    # HTTP 400: 缺失/非法参数 (Pydantic 校验会自动映射到这里)
    INVALID_PARAMS = (HTTP_400_BAD_REQUEST, "system.invalid_params", "参数校验失败")

    # HTTP 401: 未携带凭证 / 凭证签名错误或已过期
    UNAUTHENTICATED = (HTTP_401_UNAUTHORIZED, "system.unauthenticated", "未提供身份凭证")
    INVALID_CREDENTIAL = (
        HTTP_401_UNAUTHORIZED,
        "system.invalid_credential",
        "身份凭证无效或已过期",
    )

    NOT_FOUND = (HTTP_404_NOT_FOUND, "system.not_found", "资源不存在")

    # HTTP 409: 存储层唯一约束冲突 (并发注册撞名等)
    CONFLICT = (HTTP_409_CONFLICT, "system.conflict", "数据冲突，请稍后重试")

    INTERNAL_ERROR = (
        HTTP_500_INTERNAL_SERVER_ERROR,
        "system.internal_error",
        "系统内部错误",
    )
    DB_ERROR = (HTTP_500_INTERNAL_SERVER_ERROR, "system.db_error", "数据库操作异常")
