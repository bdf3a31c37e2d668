"""
File: app/domains/posts/repository.py
Description: 文章领域仓储层

职责：
1. 文章查询：按 slug、按标签、按作者、全部 (新建在前)
2. 标签索引：有序标签的替换、批量读取、全站标签统计
3. 点赞集合：单条语句的原子 add / remove，避免"读-改-写"丢失更新

Created: 2026-10-17
"""

from collections import defaultdict
from collections.abc import Iterable
from typing import Any
from uuid import UUID

from sqlalchemy import delete, desc, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from app.db.models.post import Post, PostLike, PostTag
from app.db.repositories.base import BaseRepository
from app.domains.posts.schemas import PostCreate, PostUpdate


class PostRepository(BaseRepository[Post, PostCreate, PostUpdate]):
    """
    文章仓储
    """

    # --------------------------------------------------------------------------
    # 文章查询
    # --------------------------------------------------------------------------

    async def get_by_slug(self, slug: str) -> Post | None:
        stmt = select(Post).where(Post.slug == slug)
        return await self._first(stmt)

    async def slug_taken(self, slug: str, exclude_id: UUID | None = None) -> bool:
        stmt = select(Post.id).where(Post.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Post.id != exclude_id)
        result = await self.session.execute(stmt.limit(1))
        return result.first() is not None

    async def list_recent(
        self,
        *,
        tag: str | None = None,
        author_id: UUID | None = None,
    ) -> list[Post]:
        """
        文章列表，按创建时间倒序 (UUID v7 主键作为同一时刻的稳定次序)。
        """
        stmt = select(Post)
        if tag is not None:
            stmt = stmt.join(PostTag, PostTag.post_id == Post.id).where(
                PostTag.name == tag
            )
        if author_id is not None:
            stmt = stmt.where(Post.author_id == author_id)

        stmt = stmt.order_by(desc(Post.created_at), desc(Post.id))
        return await self._all(stmt)

    async def delete_post(self, post: Post) -> None:
        """
        删除文章及其标签、点赞 (评论由 CommentRepository 负责)。
        """
        await self.session.execute(delete(PostTag).where(PostTag.post_id == post.id))
        await self.session.execute(delete(PostLike).where(PostLike.post_id == post.id))
        await self.session.delete(post)
        await self.session.flush()

    # --------------------------------------------------------------------------
    # 标签
    # --------------------------------------------------------------------------

    async def replace_tags(self, post_id: UUID, tags: list[str]) -> None:
        await self.session.execute(delete(PostTag).where(PostTag.post_id == post_id))
        self.session.add_all(
            PostTag(post_id=post_id, name=name, position=position)
            for position, name in enumerate(tags)
        )
        await self.session.flush()

    async def get_tags_map(self, post_ids: Iterable[UUID]) -> dict[UUID, list[str]]:
        ids = set(post_ids)
        if not ids:
            return {}
        stmt = (
            select(PostTag.post_id, PostTag.name)
            .where(PostTag.post_id.in_(ids))
            .order_by(PostTag.post_id, PostTag.position)
        )
        result = await self.session.execute(stmt)

        tags_map: dict[UUID, list[str]] = defaultdict(list)
        for post_id, name in result.all():
            tags_map[post_id].append(name)
        return dict(tags_map)

    async def tag_counts(self) -> list[tuple[str, int]]:
        """
        全站标签统计，按出现次数倒序，次数相同按名称排序。
        """
        count_col = func.count().label("count")
        stmt = (
            select(PostTag.name, count_col)
            .group_by(PostTag.name)
            .order_by(desc(count_col), PostTag.name)
        )
        result = await self.session.execute(stmt)
        return [(name, count) for name, count in result.all()]

    # --------------------------------------------------------------------------
    # 点赞集合
    # --------------------------------------------------------------------------

    def _insert(self) -> Any:
        """按方言选择支持 ON CONFLICT 的 insert 构造器"""
        if self.dialect_name == "sqlite":
            return sqlite_insert
        return pg_insert

    async def add_like(self, post_id: UUID, user_id: UUID) -> None:
        """
        加入点赞集合，已存在时什么都不做 (集合语义)。
        """
        stmt = (
            self._insert()(PostLike)
            .values(post_id=post_id, user_id=user_id)
            .on_conflict_do_nothing(index_elements=["post_id", "user_id"])
        )
        await self.session.execute(stmt)

    async def remove_like(self, post_id: UUID, user_id: UUID) -> bool:
        """
        移出点赞集合，返回是否真的删除了一条记录。
        """
        stmt = delete(PostLike).where(
            PostLike.post_id == post_id, PostLike.user_id == user_id
        )
        result = await self.session.execute(stmt)
        return bool(result.rowcount)

    async def get_likes(self, post_id: UUID) -> list[UUID]:
        likes_map = await self.get_likes_map([post_id])
        return likes_map.get(post_id, [])

    async def get_likes_map(self, post_ids: Iterable[UUID]) -> dict[UUID, list[UUID]]:
        ids = set(post_ids)
        if not ids:
            return {}
        stmt = (
            select(PostLike.post_id, PostLike.user_id)
            .where(PostLike.post_id.in_(ids))
            .order_by(PostLike.post_id, PostLike.created_at, PostLike.user_id)
        )
        result = await self.session.execute(stmt)

        likes_map: dict[UUID, list[UUID]] = defaultdict(list)
        for post_id, user_id in result.all():
            likes_map[post_id].append(user_id)
        return dict(likes_map)
