"""
File: app/db/models/post.py
Description: 文章相关模型 (文章主表 / 标签索引 / 点赞集合)

1. Post: 标题、slug、富文本正文、作者 (创建后不可变)
2. PostTag: 文章的有序标签列表，同时作为按标签检索与统计的索引
3. PostLike: 点赞集合 (Post <-> User 多对多)，复合主键保证每个用户最多出现一次，
   切换点赞通过单条 INSERT / DELETE 完成，不做"读出数组-修改-写回"

Created: 2026-10-17
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from app.db.models.base import Base, UUIDModel, utcnow
from app.utils.slug import MAX_SLUG_LENGTH


class Post(UUIDModel):
    """
    文章模型
    """

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return "posts"

    __table_args__ = (
        CheckConstraint("length(trim(title)) > 0", name="title_not_empty"),
        CheckConstraint("length(slug) > 0", name="slug_not_empty"),
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False, comment="标题")

    # 由标题派生，全局唯一
    slug: Mapped[str] = mapped_column(
        String(MAX_SLUG_LENGTH), unique=True, nullable=False, comment="URL slug"
    )

    # 编辑器产出的 HTML，后端只存储不解析
    content: Mapped[str] = mapped_column(Text, nullable=False, comment="正文 (HTML)")

    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        comment="作者ID",
    )


class PostTag(Base):
    """
    文章标签 (N:1 Post)，position 保留作者输入顺序
    """

    __tablename__ = "post_tags"

    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("posts.id"), primary_key=True
    )

    name: Mapped[str] = mapped_column(
        String(64), primary_key=True, index=True, comment="标签"
    )

    position: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, comment="标签顺序"
    )


class PostLike(Base):
    """
    点赞集合成员 (复合主键 = 集合语义)
    """

    __tablename__ = "post_likes"

    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("posts.id"), primary_key=True
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("users.id"), primary_key=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        comment="点赞时间 (UTC)",
    )
