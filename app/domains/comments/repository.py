"""
File: app/domains/comments/repository.py
Description: 评论领域仓储层

职责：
1. 按文章查询评论 (新建在前)
2. 批量统计评论数 (文章列表的 comment_count)
3. 按文章批量删除评论 (仅供文章删除时级联调用，不做归属校验)

Created: 2026-10-17
"""

from collections.abc import Iterable
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import delete, desc, func, select

from app.db.models.comment import Comment
from app.db.repositories.base import BaseRepository


class CommentRepository(BaseRepository[Comment, BaseModel, BaseModel]):
    """
    评论仓储
    """

    async def list_by_post(self, post_id: UUID) -> list[Comment]:
        stmt = (
            select(Comment)
            .where(Comment.post_id == post_id)
            .order_by(desc(Comment.created_at), desc(Comment.id))
        )
        return await self._all(stmt)

    async def count_by_posts(self, post_ids: Iterable[UUID]) -> dict[UUID, int]:
        """
        返回 {post_id: 评论数}，没有评论的文章不出现在结果中。
        """
        ids = set(post_ids)
        if not ids:
            return {}
        stmt = (
            select(Comment.post_id, func.count())
            .where(Comment.post_id.in_(ids))
            .group_by(Comment.post_id)
        )
        result = await self.session.execute(stmt)
        return {post_id: count for post_id, count in result.all()}

    async def delete_all_for_post(self, post_id: UUID) -> int:
        """
        删除某篇文章的全部评论，返回删除条数。
        """
        stmt = delete(Comment).where(Comment.post_id == post_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return int(result.rowcount or 0)
