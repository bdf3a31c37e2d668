"""
File: app/domains/posts/router.py
Description: 文章领域 HTTP 路由层

1. 读接口 (列表 / 详情 / 标签) 公开，可选携带 Token 以计算 has_liked / can_delete
2. 写接口 (创建 / 更新 / 删除 / 点赞) 必须鉴权 (CurrentClaims)
3. 固定路径 (/tags, /tag/{tag}, /like/{post_id}) 必须声明在 /{slug} 之前

Created: 2026-10-17
"""

from uuid import UUID

from fastapi import APIRouter, Query, Request, status

from app.api.deps import CurrentClaims, OptionalClaims
from app.core.response import ResponseModel
from app.domains.posts.constants import PostMsg
from app.domains.posts.dependencies import PostServiceDep
from app.domains.posts.schemas import (
    LikeToggleResult,
    PostCreate,
    PostDeleted,
    PostRead,
    PostUpdate,
    TagCount,
)

router = APIRouter()


def _viewer(claims: OptionalClaims) -> UUID | None:
    return claims.user_id if claims else None


# ------------------------------------------------------------------------------
# Public Endpoints (公开接口)
# ------------------------------------------------------------------------------


@router.get(
    "",
    response_model=ResponseModel[list[PostRead]],
    summary="文章列表",
    description="按创建时间倒序返回全部文章；可选 tag 参数过滤，无匹配时返回空列表。",
)
async def list_posts(
    request: Request,
    service: PostServiceDep,
    claims: OptionalClaims,
    tag: str | None = Query(default=None, max_length=64, description="按标签过滤"),
) -> ResponseModel[list[PostRead]]:
    posts = await service.list_all(tag=tag, viewer_id=_viewer(claims))
    return ResponseModel.success(
        data=posts,
        request_id=getattr(request.state, "request_id", None),
    )


@router.get(
    "/tags",
    response_model=ResponseModel[list[TagCount]],
    summary="标签列表",
    description="返回所有出现过的标签及其文章数，按文章数降序、名称升序。",
)
async def list_tags(
    request: Request,
    service: PostServiceDep,
) -> ResponseModel[list[TagCount]]:
    tags = await service.list_tags()
    return ResponseModel.success(
        data=tags,
        request_id=getattr(request.state, "request_id", None),
    )


@router.get(
    "/tag/{tag}",
    response_model=ResponseModel[list[PostRead]],
    summary="按标签查询文章",
)
async def list_posts_by_tag(
    request: Request,
    tag: str,
    service: PostServiceDep,
    claims: OptionalClaims,
) -> ResponseModel[list[PostRead]]:
    posts = await service.list_all(tag=tag, viewer_id=_viewer(claims))
    return ResponseModel.success(
        data=posts,
        request_id=getattr(request.state, "request_id", None),
    )


@router.get(
    "/{slug}",
    response_model=ResponseModel[PostRead],
    summary="文章详情",
    description="按 slug 获取单篇文章，作者信息内联。",
)
async def get_post(
    request: Request,
    slug: str,
    service: PostServiceDep,
    claims: OptionalClaims,
) -> ResponseModel[PostRead]:
    post = await service.get_by_slug(slug, viewer_id=_viewer(claims))
    return ResponseModel.success(
        data=post,
        request_id=getattr(request.state, "request_id", None),
    )


# ------------------------------------------------------------------------------
# Protected Endpoints (受保护接口 - 需登录)
# ------------------------------------------------------------------------------


@router.post(
    "",
    response_model=ResponseModel[PostRead],
    status_code=status.HTTP_201_CREATED,
    summary="发布文章",
    description="slug 由标题派生；同名 slug 已存在时返回 409。",
)
async def create_post(
    request: Request,
    post_in: PostCreate,
    claims: CurrentClaims,
    service: PostServiceDep,
) -> ResponseModel[PostRead]:
    post = await service.create(claims, post_in)
    return ResponseModel.success(
        data=post,
        message=PostMsg.CREATED,
        request_id=getattr(request.state, "request_id", None),
    )


@router.put(
    "/{post_id}",
    response_model=ResponseModel[PostRead],
    summary="更新文章",
    description="仅作者可操作。仅更新传入的字段；标题变化时重新生成 slug。",
)
async def update_post(
    request: Request,
    post_id: UUID,
    post_in: PostUpdate,
    claims: CurrentClaims,
    service: PostServiceDep,
) -> ResponseModel[PostRead]:
    post = await service.update(post_id, claims, post_in)
    return ResponseModel.success(
        data=post,
        message=PostMsg.UPDATED,
        request_id=getattr(request.state, "request_id", None),
    )


@router.delete(
    "/{post_id}",
    response_model=ResponseModel[PostDeleted],
    summary="删除文章",
    description="仅作者可操作。同时删除该文章下的全部评论。",
)
async def delete_post(
    request: Request,
    post_id: UUID,
    claims: CurrentClaims,
    service: PostServiceDep,
) -> ResponseModel[PostDeleted]:
    result = await service.delete(post_id, claims)
    return ResponseModel.success(
        data=result,
        message=PostMsg.DELETED,
        request_id=getattr(request.state, "request_id", None),
    )


@router.post(
    "/like/{post_id}",
    response_model=ResponseModel[LikeToggleResult],
    summary="点赞 / 取消点赞",
    description="已点赞则取消，未点赞则点赞；返回切换后的点赞集合。",
)
async def toggle_like(
    request: Request,
    post_id: UUID,
    claims: CurrentClaims,
    service: PostServiceDep,
) -> ResponseModel[LikeToggleResult]:
    result = await service.toggle_like(post_id, claims)
    return ResponseModel.success(
        data=result,
        message=PostMsg.LIKED if result.liked else PostMsg.UNLIKED,
        request_id=getattr(request.state, "request_id", None),
    )
