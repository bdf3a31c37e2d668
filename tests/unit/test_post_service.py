"""
File: tests/unit/test_post_service.py
Description: 文章领域服务单元测试

覆盖：
1. 创建：slug 派生、标签归一化、slug 冲突 / 为空
2. 更新：仅作者、仅更新传入字段、标题变化重新生成 slug、updated_at 刷新
3. 删除：仅作者、级联删除评论
4. 点赞切换：两次切换恢复原状
5. 列表：新建在前、按标签过滤、标签统计

Created: 2026-10-17
"""

import asyncio
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
from app.domains.comments.repository import CommentRepository
from app.domains.posts.constants import PostError
from app.domains.posts.repository import PostRepository
from app.domains.posts.schemas import PostCreate, PostUpdate
from app.domains.posts.service import PostService
from app.domains.users.repository import UserRepository

ClaimsFor = Callable[[User], TokenClaims]


@pytest.fixture
def post_service(db_session: AsyncSession) -> PostService:
    return PostService(
        repo=PostRepository(model=Post, session=db_session),
        comment_repo=CommentRepository(model=Comment, session=db_session),
        user_repo=UserRepository(model=User, session=db_session),
    )


@pytest_asyncio.fixture
async def ava(make_user: Callable[..., Awaitable[User]]) -> User:
    return await make_user("ava", name="Ava")


@pytest_asyncio.fixture
async def bob(make_user: Callable[..., Awaitable[User]]) -> User:
    return await make_user("bob", name="Bob")


# ------------------------------------------------------------------------------
# Create
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_derives_slug_and_tags(
    post_service: PostService, ava: User, claims_for: ClaimsFor
) -> None:
    post = await post_service.create(
        claims_for(ava),
        PostCreate(title="Hello, World!", content="<p>hi</p>", tags="python, web ,python"),
    )

    assert post.slug == "hello-world"
    assert post.tags == ["python", "web"]
    assert post.author.username == "ava"
    assert post.likes == []
    assert post.comment_count == 0
    assert post.can_delete is True


@pytest.mark.asyncio
async def test_create_with_duplicate_slug_conflicts(
    post_service: PostService, ava: User, bob: User, claims_for: ClaimsFor
) -> None:
    await post_service.create(claims_for(ava), PostCreate(title="Hello World", content="x"))

    with pytest.raises(AppException) as exc_info:
        await post_service.create(
            claims_for(bob), PostCreate(title="hello,  world", content="y")
        )

    assert exc_info.value.error == PostError.SLUG_CONFLICT
    assert exc_info.value.data == {"slug": "hello-world"}


@pytest.mark.asyncio
async def test_create_with_symbol_only_title_is_rejected(
    post_service: PostService, ava: User, claims_for: ClaimsFor
) -> None:
    with pytest.raises(AppException) as exc_info:
        await post_service.create(claims_for(ava), PostCreate(title="?!", content="x"))

    assert exc_info.value.error == PostError.SLUG_EMPTY


@pytest.mark.asyncio
async def test_create_with_expanding_title_fits_slug_column(
    post_service: PostService, ava: User, claims_for: ClaimsFor
) -> None:
    post = await post_service.create(
        claims_for(ava), PostCreate(title="\u3389" * 200, content="x")
    )

    assert post.slug.startswith("kcal")
    assert len(post.slug) <= Post.__table__.c.slug.type.length


@pytest.mark.asyncio
async def test_create_for_unknown_caller_is_rejected(
    post_service: PostService, ava: User, claims_for: ClaimsFor
) -> None:
    ghost = User(id=uuid7(), username="ghost", email="ghost@example.com")

    with pytest.raises(AppException) as exc_info:
        await post_service.create(claims_for(ghost), PostCreate(title="Boo", content="x"))

    assert exc_info.value.http_status == 404


# ------------------------------------------------------------------------------
# Update
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_update_title_regenerates_slug(
    post_service: PostService, ava: User, claims_for: ClaimsFor
) -> None:
    created = await post_service.create(
        claims_for(ava), PostCreate(title="First Draft", content="body", tags=["a"])
    )
    await asyncio.sleep(0.01)

    updated = await post_service.update(
        created.id, claims_for(ava), PostUpdate(title="Final Version")
    )

    assert updated.slug == "final-version"
    assert updated.content == "body"
    assert updated.tags == ["a"]
    assert updated.updated_at > created.updated_at


@pytest.mark.asyncio
async def test_empty_update_still_refreshes_timestamp(
    post_service: PostService, ava: User, claims_for: ClaimsFor
) -> None:
    created = await post_service.create(
        claims_for(ava), PostCreate(title="Quiet Edit", content="body", tags=["a"])
    )
    await asyncio.sleep(0.01)

    updated = await post_service.update(created.id, claims_for(ava), PostUpdate())

    assert updated.updated_at > created.updated_at
    assert updated.slug == created.slug
    assert updated.content == created.content
    assert updated.tags == created.tags


@pytest.mark.asyncio
async def test_update_without_title_keeps_slug(
    post_service: PostService, ava: User, claims_for: ClaimsFor
) -> None:
    created = await post_service.create(
        claims_for(ava), PostCreate(title="Stable", content="old", tags=["a", "b"])
    )

    updated = await post_service.update(
        created.id, claims_for(ava), PostUpdate(content="new", tags=[])
    )

    assert updated.slug == "stable"
    assert updated.content == "new"
    assert updated.tags == []


@pytest.mark.asyncio
async def test_update_by_non_author_is_forbidden(
    post_service: PostService, ava: User, bob: User, claims_for: ClaimsFor
) -> None:
    created = await post_service.create(claims_for(ava), PostCreate(title="Mine", content="x"))

    with pytest.raises(AppException) as exc_info:
        await post_service.update(created.id, claims_for(bob), PostUpdate(title="Yours"))

    assert exc_info.value.error == PostError.NOT_POST_OWNER
    unchanged = await post_service.get_by_slug("mine")
    assert unchanged.title == "Mine"


@pytest.mark.asyncio
async def test_update_missing_post_is_not_found(
    post_service: PostService, ava: User, claims_for: ClaimsFor
) -> None:
    with pytest.raises(AppException) as exc_info:
        await post_service.update(uuid7(), claims_for(ava), PostUpdate(title="x"))

    assert exc_info.value.error == PostError.POST_NOT_FOUND


# ------------------------------------------------------------------------------
# Delete
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_delete_cascades_comments(
    post_service: PostService,
    db_session: AsyncSession,
    ava: User,
    bob: User,
    claims_for: ClaimsFor,
) -> None:
    post = await post_service.create(claims_for(ava), PostCreate(title="Doomed", content="x"))
    await post_service.toggle_like(post.id, claims_for(bob))
    db_session.add_all(
        [
            Comment(post_id=post.id, user_id=ava.id, content="one"),
            Comment(post_id=post.id, user_id=bob.id, content="two"),
        ]
    )
    await db_session.commit()

    result = await post_service.delete(post.id, claims_for(ava))

    assert result.deleted_comments == 2
    assert await post_service.comment_repo.list_by_post(post.id) == []
    with pytest.raises(AppException) as exc_info:
        await post_service.get_by_slug("doomed")
    assert exc_info.value.error == PostError.POST_NOT_FOUND


@pytest.mark.asyncio
async def test_delete_by_non_author_keeps_everything(
    post_service: PostService,
    db_session: AsyncSession,
    ava: User,
    bob: User,
    claims_for: ClaimsFor,
) -> None:
    post = await post_service.create(claims_for(ava), PostCreate(title="Keep", content="x"))
    db_session.add(Comment(post_id=post.id, user_id=bob.id, content="hi"))
    await db_session.commit()

    with pytest.raises(AppException) as exc_info:
        await post_service.delete(post.id, claims_for(bob))

    assert exc_info.value.error == PostError.NOT_POST_OWNER
    assert len(await post_service.comment_repo.list_by_post(post.id)) == 1


# ------------------------------------------------------------------------------
# Like
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_toggle_like_twice_restores_like_set(
    post_service: PostService, ava: User, bob: User, claims_for: ClaimsFor
) -> None:
    post = await post_service.create(claims_for(ava), PostCreate(title="Likeable", content="x"))

    liked = await post_service.toggle_like(post.id, claims_for(bob))
    assert liked.liked is True
    assert liked.like_count == 1
    assert liked.likes == [bob.id]

    unliked = await post_service.toggle_like(post.id, claims_for(bob))
    assert unliked.liked is False
    assert unliked.like_count == 0
    assert unliked.likes == []


@pytest.mark.asyncio
async def test_like_set_holds_each_user_once(
    post_service: PostService, ava: User, bob: User, claims_for: ClaimsFor
) -> None:
    post = await post_service.create(claims_for(ava), PostCreate(title="Popular", content="x"))

    await post_service.toggle_like(post.id, claims_for(ava))
    await post_service.toggle_like(post.id, claims_for(bob))
    # 直接重复加入集合不会产生第二条记录
    await post_service.repo.add_like(post.id, bob.id)
    await post_service.repo.session.commit()

    view = await post_service.get_by_slug("popular", viewer_id=bob.id)
    assert sorted(view.likes) == sorted([ava.id, bob.id])
    assert view.has_liked is True
    assert view.can_delete is False


@pytest.mark.asyncio
async def test_toggle_like_on_missing_post(
    post_service: PostService, ava: User, claims_for: ClaimsFor
) -> None:
    with pytest.raises(AppException) as exc_info:
        await post_service.toggle_like(uuid7(), claims_for(ava))

    assert exc_info.value.error == PostError.POST_NOT_FOUND


# ------------------------------------------------------------------------------
# Listing
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_list_all_newest_first_with_tag_filter(
    post_service: PostService, ava: User, bob: User, claims_for: ClaimsFor
) -> None:
    await post_service.create(claims_for(ava), PostCreate(title="One", content="x", tags=["py"]))
    await post_service.create(claims_for(bob), PostCreate(title="Two", content="x", tags=["go"]))
    await post_service.create(
        claims_for(ava), PostCreate(title="Three", content="x", tags=["py", "web"])
    )

    everything = await post_service.list_all()
    assert [p.slug for p in everything] == ["three", "two", "one"]

    python_posts = await post_service.list_all(tag="py")
    assert [p.slug for p in python_posts] == ["three", "one"]

    assert await post_service.list_all(tag="rust") == []

    by_bob = await post_service.list_by_author(bob.id)
    assert [p.slug for p in by_bob] == ["two"]

    tags = await post_service.list_tags()
    assert [(t.name, t.count) for t in tags] == [("py", 2), ("go", 1), ("web", 1)]


@pytest.mark.asyncio
async def test_list_counts_comments_and_tolerates_missing_author(
    post_service: PostService,
    db_session: AsyncSession,
    ava: User,
    claims_for: ClaimsFor,
) -> None:
    post = await post_service.create(claims_for(ava), PostCreate(title="Chatty", content="x"))
    db_session.add_all(
        [Comment(post_id=post.id, user_id=uuid7(), content=str(i)) for i in range(3)]
    )
    await db_session.commit()

    [listed] = await post_service.list_all()
    assert listed.comment_count == 3
    assert listed.author.username == "ava"
