"""
File: app/domains/users/schemas.py
Description: 用户领域 Pydantic 模型 (Schema)

1. AuthorBrief: 内联到文章 / 评论中的作者摘要
2. UserPublic: 公开资料 (不含邮箱与外部身份)
3. UserRead: 用户本人可见的完整资料 (OAuth 登录后返回)
4. UserProfileUpdate: 资料更新参数 (所有字段可选)

Created: 2026-10-17
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ------------------------------------------------------------------------------
# Output Schemas (输出/响应模型)
# ------------------------------------------------------------------------------


class AuthorBrief(BaseModel):
    """
    作者摘要。
    作者记录缺失时 id 为 None，其余字段为占位值。
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID | None = Field(default=None, description="用户 ID")
    username: str = Field(..., description="用户 handle")
    name: str | None = Field(default=None, description="显示名称")
    avatar: str | None = Field(default=None, description="头像URL")


class AuthProviderRead(BaseModel):
    """已绑定的外部身份"""

    model_config = ConfigDict(from_attributes=True)

    provider: str
    provider_account_id: str


class UserPublic(BaseModel):
    """
    公开资料 (GET /users/{handle})
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    name: str | None = None
    avatar: str | None = None
    bio: str | None = None
    created_at: datetime


class UserRead(UserPublic):
    """
    完整资料 (仅返回给用户本人)
    """

    email: str
    auth_providers: list[AuthProviderRead] = Field(default_factory=list)
    updated_at: datetime


# ------------------------------------------------------------------------------
# Input Schemas (输入模型)
# ------------------------------------------------------------------------------


class UserProfileUpdate(BaseModel):
    """
    资料更新模型。
    仅更新传入的字段；传入空白字符串表示清空该字段。
    """

    name: str | None = Field(default=None, max_length=100)
    bio: str | None = Field(default=None, max_length=500)
    avatar: str | None = Field(default=None, max_length=512, description="头像URL")

    @field_validator("name", "bio", "avatar")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None
