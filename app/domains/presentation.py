"""
File: app/domains/presentation.py
Description: 展示组装层 (Aggregation / Presentation)

把仓储层取回的原始记录组装成前端需要的响应结构：
1. 外键 -> 内联作者摘要 (作者记录缺失时使用占位作者)
2. 计数字段 (like_count / comment_count)
3. 相对访问者的布尔标记 (has_liked / can_delete)

纯函数：不查库、不校验，相同输入总是得到相同输出。
"""

from collections.abc import Sequence
from uuid import UUID

from app.db.models.comment import Comment
from app.db.models.post import Post
from app.db.models.user import User
from app.db.models.user_auth_provider import UserAuthProvider
from app.domains.comments.schemas import CommentRead
from app.domains.posts.schemas import PostRead
from app.domains.users.schemas import AuthorBrief, AuthProviderRead, UserRead

# 作者记录已不存在时的占位身份
DELETED_AUTHOR = AuthorBrief(id=None, username="deleted", name="Deleted user")


def author_brief(user: User | None) -> AuthorBrief:
    if user is None:
        return DELETED_AUTHOR
    return AuthorBrief.model_validate(user)


def present_user(user: User, providers: Sequence[UserAuthProvider]) -> UserRead:
    return UserRead(
        id=user.id,
        username=user.username,
        email=user.email,
        name=user.name,
        avatar=user.avatar,
        bio=user.bio,
        created_at=user.created_at,
        updated_at=user.updated_at,
        auth_providers=[AuthProviderRead.model_validate(p) for p in providers],
    )


def present_post(
    post: Post,
    *,
    author: User | None,
    tags: Sequence[str],
    likes: Sequence[UUID],
    comment_count: int,
    viewer_id: UUID | None,
) -> PostRead:
    return PostRead(
        id=post.id,
        title=post.title,
        slug=post.slug,
        content=post.content,
        tags=list(tags),
        author=author_brief(author),
        likes=list(likes),
        like_count=len(likes),
        comment_count=comment_count,
        has_liked=viewer_id is not None and viewer_id in likes,
        can_delete=viewer_id is not None and viewer_id == post.author_id,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


def present_comment(
    comment: Comment,
    *,
    author: User | None,
    viewer_id: UUID | None,
) -> CommentRead:
    return CommentRead(
        id=comment.id,
        post_id=comment.post_id,
        content=comment.content,
        author=author_brief(author),
        can_delete=viewer_id is not None and viewer_id == comment.user_id,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
    )
