"""
File: app/domains/comments/service.py
Description: 评论领域服务 (业务逻辑层)

1. add: 文章必须存在、作者必须可解析；返回内联作者的评论
2. list_by_post: 公开读取，新建在前；作者缺失时使用占位作者
3. delete: 仅评论作者可删

按文章批量删除 (级联) 不在本层暴露，由 PostService 直接调用
CommentRepository.delete_all_for_post，且已在文章删除边界完成鉴权。
"""

from uuid import UUID

from app.core.exceptions import AppException
from app.core.logging import logger
from app.core.security import TokenClaims
from app.domains.comments.constants import CommentError
from app.domains.comments.repository import CommentRepository
from app.domains.comments.schemas import CommentCreate, CommentRead
from app.domains.posts.constants import PostError
from app.domains.posts.repository import PostRepository
from app.domains.presentation import present_comment
from app.domains.users.constants import UserError
from app.domains.users.repository import UserRepository


class CommentService:
    """
    评论领域服务。
    """

    def __init__(
        self,
        repo: CommentRepository,
        post_repo: PostRepository,
        user_repo: UserRepository,
    ):
        self.repo = repo
        self.post_repo = post_repo
        self.user_repo = user_repo

    async def add(self, claims: TokenClaims, obj_in: CommentCreate) -> CommentRead:
        if not await self.post_repo.exists(obj_in.post_id):
            raise AppException(PostError.POST_NOT_FOUND)

        author = await self.user_repo.get(claims.user_id)
        if author is None:
            raise AppException(UserError.USER_NOT_FOUND)

        comment = await self.repo.create(
            {
                "post_id": obj_in.post_id,
                "user_id": author.id,
                "content": obj_in.content,
            }
        )
        await self.repo.session.commit()

        logger.bind(
            comment_id=str(comment.id),
            post_id=str(obj_in.post_id),
            user_id=str(author.id),
        ).info("Comment created")

        return present_comment(comment, author=author, viewer_id=claims.user_id)

    async def list_by_post(
        self, post_id: UUID, viewer_id: UUID | None = None
    ) -> list[CommentRead]:
        comments = await self.repo.list_by_post(post_id)
        authors = await self.user_repo.get_many(c.user_id for c in comments)

        return [
            present_comment(
                comment,
                author=authors.get(comment.user_id),
                viewer_id=viewer_id,
            )
            for comment in comments
        ]

    async def delete(self, comment_id: UUID, claims: TokenClaims) -> None:
        comment = await self.repo.get(comment_id)
        if comment is None:
            raise AppException(CommentError.COMMENT_NOT_FOUND)
        if comment.user_id != claims.user_id:
            raise AppException(CommentError.NOT_COMMENT_OWNER)

        await self.repo.session.delete(comment)
        await self.repo.session.commit()

        logger.bind(comment_id=str(comment_id), user_id=str(claims.user_id)).info(
            "Comment deleted"
        )
