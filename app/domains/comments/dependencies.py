"""
File: app/domains/comments/dependencies.py
Description: 评论领域依赖注入 (DI)

依赖链：
DBSession → CommentRepository → CommentService → CommentServiceDep

CommentRepoDep 同时供文章领域使用 (评论数统计、删除文章时级联删除评论)，
因此本模块不反向依赖 posts.dependencies，PostRepository 在此直接构造。
"""

from typing import Annotated

from fastapi import Depends

from app.api.deps import DBSession
from app.db.models.comment import Comment
from app.db.models.post import Post
from app.domains.comments.repository import CommentRepository
from app.domains.comments.service import CommentService
from app.domains.posts.repository import PostRepository
from app.domains.users.dependencies import UserRepoDep


async def get_comment_repository(session: DBSession) -> CommentRepository:
    return CommentRepository(model=Comment, session=session)


CommentRepoDep = Annotated[CommentRepository, Depends(get_comment_repository)]


async def get_comment_service(
    session: DBSession,
    repo: CommentRepoDep,
    user_repo: UserRepoDep,
) -> CommentService:
    post_repo = PostRepository(model=Post, session=session)
    return CommentService(repo=repo, post_repo=post_repo, user_repo=user_repo)


CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]
