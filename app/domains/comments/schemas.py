"""
File: app/domains/comments/schemas.py
Description: 评论领域 Pydantic 模型 (Schema)

Created: 2026-10-17
"""

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field, field_validator

from app.domains.users.schemas import AuthorBrief


class CommentCreate(BaseModel):
    """
    发表评论参数。
    前端提交 camelCase 的 postId，这里同时兼容 snake_case。
    """

    post_id: UUID = Field(
        ...,
        validation_alias=AliasChoices("post_id", "postId"),
        description="文章 ID",
    )
    content: str = Field(..., min_length=1, max_length=5000, description="评论内容")

    @field_validator("content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class CommentRead(BaseModel):
    """
    评论展示结构。
    can_delete 仅当访问者就是评论作者时为 True。
    """

    id: UUID
    post_id: UUID
    content: str
    author: AuthorBrief
    can_delete: bool = False
    created_at: datetime
    updated_at: datetime
