"""
File: tests/unit/test_comment_service.py
Description: 评论领域服务单元测试

Created: 2026-10-17
"""

from collections.abc import Awaitable, Callable

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession
from uuid6 import uuid7

from app.core.exceptions import AppException
from app.core.security import TokenClaims
from app.db.models.comment import Comment
from app.db.models.post import Post
from app.db.models.user import User
from app.domains.comments.constants import CommentError
from app.domains.comments.repository import CommentRepository
from app.domains.comments.schemas import CommentCreate
from app.domains.comments.service import CommentService
from app.domains.posts.constants import PostError
from app.domains.posts.repository import PostRepository
from app.domains.presentation import DELETED_AUTHOR
from app.domains.users.repository import UserRepository

ClaimsFor = Callable[[User], TokenClaims]


@pytest.fixture
def comment_service(db_session: AsyncSession) -> CommentService:
    return CommentService(
        repo=CommentRepository(model=Comment, session=db_session),
        post_repo=PostRepository(model=Post, session=db_session),
        user_repo=UserRepository(model=User, session=db_session),
    )


@pytest_asyncio.fixture
async def ava(make_user: Callable[..., Awaitable[User]]) -> User:
    return await make_user("ava", name="Ava")


@pytest_asyncio.fixture
async def bob(make_user: Callable[..., Awaitable[User]]) -> User:
    return await make_user("bob")


@pytest_asyncio.fixture
async def post(db_session: AsyncSession, ava: User) -> Post:
    post = Post(title="Hello", slug="hello", content="<p>x</p>", author_id=ava.id)
    db_session.add(post)
    await db_session.commit()
    return post


@pytest.mark.asyncio
async def test_add_comment_inlines_author(
    comment_service: CommentService, post: Post, ava: User, claims_for: ClaimsFor
) -> None:
    comment = await comment_service.add(
        claims_for(ava), CommentCreate(postId=post.id, content="  Nice post  ")
    )

    assert comment.content == "Nice post"
    assert comment.post_id == post.id
    assert comment.author.username == "ava"
    assert comment.author.name == "Ava"
    assert comment.can_delete is True


@pytest.mark.asyncio
async def test_add_comment_to_missing_post(
    comment_service: CommentService, ava: User, claims_for: ClaimsFor
) -> None:
    with pytest.raises(AppException) as exc_info:
        await comment_service.add(
            claims_for(ava), CommentCreate(post_id=uuid7(), content="hello?")
        )

    assert exc_info.value.error == PostError.POST_NOT_FOUND


@pytest.mark.asyncio
async def test_list_marks_only_own_comments_deletable(
    comment_service: CommentService,
    post: Post,
    ava: User,
    bob: User,
    claims_for: ClaimsFor,
) -> None:
    await comment_service.add(claims_for(ava), CommentCreate(post_id=post.id, content="first"))
    await comment_service.add(claims_for(bob), CommentCreate(post_id=post.id, content="second"))

    as_ava = await comment_service.list_by_post(post.id, viewer_id=ava.id)
    assert [(c.content, c.can_delete) for c in as_ava] == [
        ("second", False),
        ("first", True),
    ]

    anonymous = await comment_service.list_by_post(post.id)
    assert not any(c.can_delete for c in anonymous)


@pytest.mark.asyncio
async def test_list_substitutes_placeholder_for_missing_author(
    comment_service: CommentService, db_session: AsyncSession, post: Post
) -> None:
    db_session.add(Comment(post_id=post.id, user_id=uuid7(), content="orphan"))
    await db_session.commit()

    [comment] = await comment_service.list_by_post(post.id)

    assert comment.author == DELETED_AUTHOR
    assert comment.content == "orphan"


@pytest.mark.asyncio
async def test_list_for_unknown_post_is_empty(comment_service: CommentService) -> None:
    assert await comment_service.list_by_post(uuid7()) == []


@pytest.mark.asyncio
async def test_only_author_can_delete_comment(
    comment_service: CommentService,
    post: Post,
    ava: User,
    bob: User,
    claims_for: ClaimsFor,
) -> None:
    comment = await comment_service.add(
        claims_for(ava), CommentCreate(post_id=post.id, content="mine")
    )

    with pytest.raises(AppException) as exc_info:
        await comment_service.delete(comment.id, claims_for(bob))
    assert exc_info.value.error == CommentError.NOT_COMMENT_OWNER

    await comment_service.delete(comment.id, claims_for(ava))
    assert await comment_service.list_by_post(post.id) == []


@pytest.mark.asyncio
async def test_delete_missing_comment(
    comment_service: CommentService, ava: User, claims_for: ClaimsFor
) -> None:
    with pytest.raises(AppException) as exc_info:
        await comment_service.delete(uuid7(), claims_for(ava))

    assert exc_info.value.error == CommentError.COMMENT_NOT_FOUND
