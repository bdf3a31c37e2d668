"""
File: app/api/deps.py
Description: 全局依赖注入定义 (DB Session + Bearer 鉴权)

本模块负责：
1. 数据库会话管理 (get_db / DBSession)
2. Bearer 凭证提取与校验 (get_current_claims / CurrentClaims)
3. 公开读接口的可选身份 (get_optional_claims / OptionalClaims)，
   仅用于计算 can_delete / has_liked 等观察者相关字段

鉴权依赖只校验签名与有效期，不查库；
校验失败直接终止请求，业务处理函数不会执行。
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.error_code import SystemErrorCode
from app.core.exceptions import AppException
from app.core.logging import logger
from app.core.security import TokenClaims, decode_access_token
from app.db.session import AsyncSessionLocal

# ------------------------------------------------------------------------------
# 1. Database Dependencies
# ------------------------------------------------------------------------------


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    获取异步数据库会话依赖。
    请求结束时自动关闭 session (未提交的事务随之回滚)。
    """
    async with AsyncSessionLocal() as session:
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db)]


# ------------------------------------------------------------------------------
# 2. Authentication Dependencies (Bearer 鉴权)
# ------------------------------------------------------------------------------


def _split_bearer(authorization: str) -> str | None:
    scheme, _, param = authorization.partition(" ")
    if scheme.lower() != "bearer" or not param.strip():
        return None
    return param.strip()


async def get_token_from_header(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """
    从 Authorization Header 提取 Bearer Token。
    格式要求: Authorization: Bearer <token>
    """
    if not authorization:
        raise AppException(
            SystemErrorCode.UNAUTHENTICATED, message="Missing Authorization Header"
        )

    token = _split_bearer(authorization)
    if token is None:
        raise AppException(
            SystemErrorCode.UNAUTHENTICATED, message="Invalid Authentication Scheme"
        )
    return token


async def get_current_claims(
    token: Annotated[str, Depends(get_token_from_header)],
) -> TokenClaims:
    """
    校验 JWT 并返回强类型声明。
    签名错误 / 过期 -> 401 system.invalid_credential
    """
    return decode_access_token(token)


# 受保护接口依赖
# 用法: async def endpoint(claims: CurrentClaims): ...
CurrentClaims = Annotated[TokenClaims, Depends(get_current_claims)]


async def get_optional_claims(
    authorization: Annotated[str | None, Header()] = None,
) -> TokenClaims | None:
    """
    公开接口的可选身份。
    未携带或无法校验的凭证一律视为匿名访问者，不影响读取结果本身。
    """
    if not authorization:
        return None

    token = _split_bearer(authorization)
    if token is None:
        return None

    try:
        return decode_access_token(token)
    except AppException as exc:
        logger.bind(code=exc.code).debug("Ignoring unusable viewer token")
        return None


OptionalClaims = Annotated[TokenClaims | None, Depends(get_optional_claims)]
