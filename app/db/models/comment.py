"""
File: app/db/models/comment.py
Description: 评论模型

注意：
post_id / user_id 仅建索引，不建物理外键。
评论与文章、作者之间的一致性由应用层维护：
- 删除文章时由 PostService 级联删除其评论
- 读取评论时作者记录缺失，展示层使用占位作者，不让整个列表失败

Created: 2026-10-17
"""

import uuid

from sqlalchemy import Text, Uuid
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from app.db.models.base import UUIDModel


class Comment(UUIDModel):
    """
    评论模型 (N:1 Post, N:1 User)
    """

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return "comments"

    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), nullable=False, index=True, comment="所属文章ID"
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), nullable=False, index=True, comment="评论作者ID"
    )

    content: Mapped[str] = mapped_column(Text, nullable=False, comment="评论内容")
