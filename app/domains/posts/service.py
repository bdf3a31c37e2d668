"""
File: app/domains/posts/service.py
Description: 文章领域服务 (业务逻辑层)

本模块封装文章生命周期的核心业务规则：
1. 创建：slug 由标题派生且全局唯一，标签归一化后写入标签索引
2. 更新：仅作者可改；仅更新传入字段；标题变化重新生成 slug；
   每次成功更新都会刷新 updated_at
3. 删除：仅作者可删；先级联删除全部评论，再删除文章 (同一事务内提交)
4. 查询：按 slug / 全部 / 按标签 / 按作者，组装内联作者、评论数、点赞集合
5. 点赞切换：单条 DELETE 未命中则 INSERT，集合成员关系由复合主键保证

注意：
- 所有数据库写操作的事务提交 (Commit) 由本层负责
- 归属校验先于任何写操作，失败时不会产生部分修改
"""

from datetime import UTC, datetime
from uuid import UUID

from app.core.exceptions import AppException
from app.core.logging import logger
from app.core.security import TokenClaims
from app.db.models.post import Post
from app.domains.comments.repository import CommentRepository
from app.domains.posts.constants import PostError
from app.domains.posts.repository import PostRepository
from app.domains.posts.schemas import (
    LikeToggleResult,
    PostCreate,
    PostDeleted,
    PostRead,
    PostUpdate,
    TagCount,
)
from app.domains.presentation import present_post
from app.domains.users.constants import UserError
from app.domains.users.repository import UserRepository
from app.utils.slug import slugify


class PostService:
    """
    文章领域服务。
    """

    def __init__(
        self,
        repo: PostRepository,
        comment_repo: CommentRepository,
        user_repo: UserRepository,
    ):
        self.repo = repo
        self.comment_repo = comment_repo
        self.user_repo = user_repo

    # --------------------------------------------------------------------------
    # 写操作
    # --------------------------------------------------------------------------

    async def create(self, claims: TokenClaims, obj_in: PostCreate) -> PostRead:
        author = await self.user_repo.get(claims.user_id)
        if author is None:
            raise AppException(UserError.USER_NOT_FOUND)

        slug = await self._available_slug(obj_in.title)

        post = await self.repo.create(
            {
                "title": obj_in.title,
                "slug": slug,
                "content": obj_in.content,
                "author_id": author.id,
            }
        )
        await self.repo.replace_tags(post.id, obj_in.tags)
        await self.repo.session.commit()

        logger.bind(post_id=str(post.id), user_id=str(author.id), slug=slug).info(
            "Post created"
        )

        return present_post(
            post,
            author=author,
            tags=obj_in.tags,
            likes=[],
            comment_count=0,
            viewer_id=claims.user_id,
        )

    async def update(
        self, post_id: UUID, claims: TokenClaims, obj_in: PostUpdate
    ) -> PostRead:
        post = await self._get_owned(post_id, claims.user_id)

        update_data = obj_in.model_dump(exclude_unset=True, exclude_none=True)
        tags = update_data.pop("tags", None)

        if "title" in update_data:
            update_data["slug"] = await self._available_slug(
                update_data["title"], exclude_id=post.id
            )

        # 无字段变化时 onupdate 不会触发，这里显式刷新
        post.updated_at = datetime.now(UTC)
        post = await self.repo.update(post, update_data)

        if tags is not None:
            await self.repo.replace_tags(post.id, tags)

        await self.repo.session.commit()

        logger.bind(
            post_id=str(post.id),
            user_id=str(claims.user_id),
            fields=sorted(obj_in.model_dump(exclude_unset=True, exclude_none=True)),
        ).info("Post updated")

        return await self._present_one(post, claims.user_id)

    async def delete(self, post_id: UUID, claims: TokenClaims) -> PostDeleted:
        """
        删除文章并级联删除其评论。

        两步删除在同一事务中提交；若底层存储不支持事务，
        两步之间的故障会留下孤儿评论，读取侧需容忍。
        """
        post = await self._get_owned(post_id, claims.user_id)

        deleted_comments = await self.comment_repo.delete_all_for_post(post.id)
        await self.repo.delete_post(post)
        await self.repo.session.commit()

        logger.bind(
            post_id=str(post_id),
            user_id=str(claims.user_id),
            deleted_comments=deleted_comments,
        ).info("Post deleted with comment cascade")

        return PostDeleted(id=post_id, deleted_comments=deleted_comments)

    async def toggle_like(self, post_id: UUID, claims: TokenClaims) -> LikeToggleResult:
        """
        点赞 / 取消点赞。
        同一用户连续两次切换，点赞集合恢复原状。
        """
        post = await self.repo.get(post_id)
        if post is None:
            raise AppException(PostError.POST_NOT_FOUND)

        removed = await self.repo.remove_like(post.id, claims.user_id)
        if not removed:
            await self.repo.add_like(post.id, claims.user_id)
        await self.repo.session.commit()

        likes = await self.repo.get_likes(post.id)
        liked = claims.user_id in likes

        logger.bind(post_id=str(post.id), user_id=str(claims.user_id), liked=liked).info(
            "Post like toggled"
        )

        return LikeToggleResult(liked=liked, like_count=len(likes), likes=likes)

    # --------------------------------------------------------------------------
    # 读操作 (公开)
    # --------------------------------------------------------------------------

    async def get_by_slug(self, slug: str, viewer_id: UUID | None = None) -> PostRead:
        post = await self.repo.get_by_slug(slug)
        if post is None:
            raise AppException(PostError.POST_NOT_FOUND)
        return await self._present_one(post, viewer_id)

    async def list_all(
        self, tag: str | None = None, viewer_id: UUID | None = None
    ) -> list[PostRead]:
        """
        文章列表 (新建在前)；按标签过滤无结果时返回空列表。
        """
        posts = await self.repo.list_recent(tag=tag)
        return await self._present_many(posts, viewer_id)

    async def list_by_author(
        self, author_id: UUID, viewer_id: UUID | None = None
    ) -> list[PostRead]:
        posts = await self.repo.list_recent(author_id=author_id)
        return await self._present_many(posts, viewer_id)

    async def list_tags(self) -> list[TagCount]:
        return [
            TagCount(name=name, count=count)
            for name, count in await self.repo.tag_counts()
        ]

    # --------------------------------------------------------------------------
    # 内部方法
    # --------------------------------------------------------------------------

    async def _get_owned(self, post_id: UUID, caller_id: UUID) -> Post:
        post = await self.repo.get(post_id)
        if post is None:
            raise AppException(PostError.POST_NOT_FOUND)
        if post.author_id != caller_id:
            logger.bind(post_id=str(post_id), user_id=str(caller_id)).warning(
                "Rejected post mutation by non-author"
            )
            raise AppException(PostError.NOT_POST_OWNER)
        return post

    async def _available_slug(self, title: str, exclude_id: UUID | None = None) -> str:
        slug = slugify(title)
        if not slug:
            raise AppException(PostError.SLUG_EMPTY, data={"field": "title"})
        if await self.repo.slug_taken(slug, exclude_id=exclude_id):
            raise AppException(PostError.SLUG_CONFLICT, data={"slug": slug})
        return slug

    async def _present_one(self, post: Post, viewer_id: UUID | None) -> PostRead:
        presented = await self._present_many([post], viewer_id)
        return presented[0]

    async def _present_many(
        self, posts: list[Post], viewer_id: UUID | None
    ) -> list[PostRead]:
        """
        多查询组装：作者、标签、点赞、评论数各一次批量查询。
        """
        if not posts:
            return []

        post_ids = [post.id for post in posts]
        authors = await self.user_repo.get_many(post.author_id for post in posts)
        tags_map = await self.repo.get_tags_map(post_ids)
        likes_map = await self.repo.get_likes_map(post_ids)
        comment_counts = await self.comment_repo.count_by_posts(post_ids)

        return [
            present_post(
                post,
                author=authors.get(post.author_id),
                tags=tags_map.get(post.id, []),
                likes=likes_map.get(post.id, []),
                comment_count=comment_counts.get(post.id, 0),
                viewer_id=viewer_id,
            )
            for post in posts
        ]
