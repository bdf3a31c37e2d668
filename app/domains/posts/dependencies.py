"""
File: app/domains/posts/dependencies.py
Description: 文章领域依赖注入 (DI)

依赖链：
DBSession → PostRepository ─────┐
            CommentRepository ──┼→ PostService → PostServiceDep
            UserRepository ─────┘
"""

from typing import Annotated

from fastapi import Depends

from app.api.deps import DBSession
from app.db.models.post import Post
from app.domains.comments.dependencies import CommentRepoDep
from app.domains.posts.repository import PostRepository
from app.domains.posts.service import PostService
from app.domains.users.dependencies import UserRepoDep


async def get_post_repository(session: DBSession) -> PostRepository:
    return PostRepository(model=Post, session=session)


PostRepoDep = Annotated[PostRepository, Depends(get_post_repository)]


async def get_post_service(
    repo: PostRepoDep,
    comment_repo: CommentRepoDep,
    user_repo: UserRepoDep,
) -> PostService:
    return PostService(repo=repo, comment_repo=comment_repo, user_repo=user_repo)


PostServiceDep = Annotated[PostService, Depends(get_post_service)]
