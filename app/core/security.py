"""
File: app/core/security.py
Description: Bearer 凭证签发与校验 (JWT)

本模块是系统中唯一签发 / 校验凭证的地方：
1. create_access_token: 签发携带 user_id 与 email 的 HS256 JWT
2. decode_access_token: 校验签名与有效期，产出强类型的 TokenClaims

凭证不在服务端存储，其有效性只取决于签名与过期时间。

Created: 2026-10-17
"""

from datetime import UTC, datetime, timedelta
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel, ConfigDict

from app.core.config import settings
from app.core.error_code import SystemErrorCode
from app.core.exceptions import AppException

TOKEN_TYPE = "access"


class TokenClaims(BaseModel):
    """
    凭证解码后的声明集合。
    由 decode_access_token 产出，通过依赖注入显式传入 Router / Service。
    """

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    email: str
    issued_at: datetime
    expires_at: datetime


def _secret_key() -> str:
    # config.py 已在启动时校验，这里收窄类型
    secret_key = settings.SECRET_KEY
    if secret_key is None:
        raise ValueError("SECRET_KEY configuration is missing.")
    return secret_key


def create_access_token(
    user_id: UUID | str,
    email: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    签发 Bearer 凭证。

    Args:
        user_id: 内部用户 ID
        email: 用户邮箱
        expires_delta: 自定义有效期 (默认 ACCESS_TOKEN_EXPIRE_MINUTES)

    Returns:
        str: 编码后的 JWT 字符串
    """
    issued_at = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    # sub: 用户ID / iat: 签发时间 / exp: 过期时间 / type: 凭证类型
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
        "type": TOKEN_TYPE,
    }
    return jwt.encode(to_encode, _secret_key(), algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> TokenClaims:
    """
    校验凭证签名与有效期。

    Raises:
        AppException(SystemErrorCode.INVALID_CREDENTIAL): 签名错误、过期或声明缺失
    """
    try:
        payload = jwt.decode(token, _secret_key(), algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise AppException(
            SystemErrorCode.INVALID_CREDENTIAL, message="Token has expired"
        ) from None
    except JWTError:
        # from None 截断异常链，避免暴露 jose 内部细节
        raise AppException(SystemErrorCode.INVALID_CREDENTIAL) from None

    if payload.get("type") != TOKEN_TYPE:
        raise AppException(
            SystemErrorCode.INVALID_CREDENTIAL, message="Unexpected token type"
        )

    try:
        return TokenClaims(
            user_id=UUID(str(payload["sub"])),
            email=str(payload["email"]),
            issued_at=datetime.fromtimestamp(int(payload["iat"]), UTC),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), UTC),
        )
    except (KeyError, TypeError, ValueError):
        raise AppException(
            SystemErrorCode.INVALID_CREDENTIAL, message="Token is missing claims"
        ) from None
