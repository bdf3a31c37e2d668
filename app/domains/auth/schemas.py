"""
File: app/domains/auth/schemas.py
Description: 认证领域 Pydantic 模型 (Schema)

1. OAuthIdentity: OAuth 提供方回调后，前端服务端转发过来的身份声明
2. Token: Bearer 凭证响应结构
3. OAuthLoginResult: 身份解析结果 (用户 + 凭证)

Created: 2026-10-17
"""

from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator

from app.domains.users.schemas import UserRead

# 与 users.name / users.avatar 列长度一致
MAX_NAME_LENGTH = 100
MAX_AVATAR_LENGTH = 512


class OAuthIdentity(BaseModel):
    """
    外部身份声明。
    前端 (NextAuth) 使用 camelCase 的 providerAccountId，这里同时兼容 snake_case。
    """

    email: EmailStr = Field(..., description="邮箱 (大小写不敏感)")
    name: str | None = Field(default=None, description="显示名称 (超长截断)")
    avatar: str | None = Field(default=None, description="头像URL (超长视为未提供)")
    provider: str = Field(..., min_length=1, max_length=50, examples=["google"])
    provider_account_id: str = Field(
        ...,
        min_length=1,
        max_length=255,
        validation_alias=AliasChoices("provider_account_id", "providerAccountId"),
        description="提供方分配的账号 ID",
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("provider", "provider_account_id")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("name", "avatar")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        # 空值不得覆盖已有资料
        if v is None:
            return None
        return v.strip() or None

    @field_validator("name")
    @classmethod
    def clip_name(cls, v: str | None) -> str | None:
        # 资料字段可选，超长不应导致整个登录失败
        if v is None:
            return None
        return v[:MAX_NAME_LENGTH].rstrip()

    @field_validator("avatar")
    @classmethod
    def drop_long_avatar(cls, v: str | None) -> str | None:
        # 截断后的 URL 无法使用，直接丢弃
        if v is None or len(v) > MAX_AVATAR_LENGTH:
            return None
        return v


class Token(BaseModel):
    """
    Bearer 凭证响应结构。
    """

    access_token: str = Field(..., description="访问令牌 (JWT)")
    token_type: str = Field(default="bearer", description="令牌类型")
    expires_in: int = Field(..., description="有效期 (秒)")


class OAuthLoginResult(BaseModel):
    user: UserRead
    token: Token
