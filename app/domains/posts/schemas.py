"""
File: app/domains/posts/schemas.py
Description: 文章领域 Pydantic 模型 (Schema)

输入：
1. PostCreate: 创建文章 (title / content 必填，tags 可为列表或逗号分隔字符串)
2. PostUpdate: 更新文章 (PATCH 语义，仅更新传入字段)

输出：
3. PostRead: 文章展示结构 (内联作者、点赞集合、评论数、观察者相关标记)
4. LikeToggleResult / TagCount / PostDeleted

Created: 2026-10-17
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.domains.users.schemas import AuthorBrief

MAX_TAG_LENGTH = 64


def normalize_tags(value: Any) -> list[str]:
    """
    标签归一化：
    - 接受列表或逗号分隔字符串
    - 去除首尾空白，丢弃空项
    - 去重 (保留首次出现的位置)

    示例: " python, web ,,python " -> ["python", "web"]
    """
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, list | tuple):
        items = list(value)
    else:
        raise ValueError("tags must be a list or a comma separated string")

    tags: list[str] = []
    for item in items:
        if not isinstance(item, str):
            raise ValueError("each tag must be a string")
        tag = item.strip()
        if not tag or tag in tags:
            continue
        if len(tag) > MAX_TAG_LENGTH:
            raise ValueError(f"tag is longer than {MAX_TAG_LENGTH} characters")
        tags.append(tag)
    return tags


def _require_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


# ------------------------------------------------------------------------------
# Input Schemas (输入模型)
# ------------------------------------------------------------------------------


class PostCreate(BaseModel):
    """
    创建文章参数。
    """

    title: str = Field(..., min_length=1, max_length=200, description="标题")
    content: str = Field(..., min_length=1, description="正文 (编辑器产出的 HTML)")
    tags: list[str] = Field(
        default_factory=list,
        description=(
            "标签列表，也接受逗号分隔字符串。去除首尾空白、丢弃空值，"
            "重复标签只保留首次出现 (保持顺序)"
        ),
        examples=[["python", "fastapi"], "python, fastapi"],
    )

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _require_text(v)

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v: Any) -> list[str]:
        return normalize_tags(v)


class PostUpdate(BaseModel):
    """
    更新文章参数 (所有字段可选)。
    tags 显式传入空列表 / 空字符串表示清空标签。
    """

    title: str | None = Field(default=None, min_length=1, max_length=200)
    content: str | None = Field(default=None, min_length=1)
    tags: list[str] | None = Field(
        default=None,
        description="整体替换标签；规范化规则同创建 (去重，保留首次出现的顺序)",
    )

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return _require_text(v)

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v: Any) -> list[str] | None:
        if v is None:
            return None
        return normalize_tags(v)


# ------------------------------------------------------------------------------
# Output Schemas (输出/响应模型)
# ------------------------------------------------------------------------------


class PostRead(BaseModel):
    """
    文章展示结构。
    has_liked / can_delete 相对当前访问者计算，匿名访问者均为 False。
    """

    id: UUID
    title: str
    slug: str
    content: str
    tags: list[str]
    author: AuthorBrief
    likes: list[UUID] = Field(default_factory=list, description="点赞用户 ID 集合")
    like_count: int = 0
    comment_count: int = 0
    has_liked: bool = False
    can_delete: bool = False
    created_at: datetime
    updated_at: datetime


class LikeToggleResult(BaseModel):
    """
    点赞切换结果 (返回切换后的完整集合)
    """

    liked: bool = Field(..., description="切换后当前用户是否处于点赞状态")
    like_count: int
    likes: list[UUID]


class TagCount(BaseModel):
    name: str
    count: int


class PostDeleted(BaseModel):
    id: UUID
    deleted_comments: int = Field(..., description="级联删除的评论数")
