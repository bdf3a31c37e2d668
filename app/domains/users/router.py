"""
File: app/domains/users/router.py
Description: 用户领域 HTTP 路由层

本模块定义用户相关的 API 端点：
1. POST /oauth-handler: 外部身份解析 + 签发凭证 (服务端到服务端调用，公开)
2. GET /{username} 与 GET /{username}/posts: 公开资料与作者文章列表
3. PUT /{user_id}: 资料更新，必须鉴权且只能修改自己

Created: 2026-10-17
"""

from uuid import UUID

from fastapi import APIRouter, Request

from app.api.deps import CurrentClaims, OptionalClaims
from app.core.response import ResponseModel
from app.domains.auth.constants import AuthMsg
from app.domains.auth.dependencies import AuthServiceDep
from app.domains.auth.schemas import OAuthIdentity, OAuthLoginResult
from app.domains.posts.dependencies import PostServiceDep
from app.domains.posts.schemas import PostRead
from app.domains.users.constants import UserMsg
from app.domains.users.dependencies import UserServiceDep
from app.domains.users.schemas import UserProfileUpdate, UserPublic, UserRead

router = APIRouter()


# ------------------------------------------------------------------------------
# Public Endpoints (公开接口)
# ------------------------------------------------------------------------------


@router.post(
    "/oauth-handler",
    response_model=ResponseModel[OAuthLoginResult],
    summary="外部身份登录",
    description=(
        "按邮箱查找或创建用户，并绑定外部身份 (provider, providerAccountId)。"
        "成功后返回用户资料与 Bearer Token。"
    ),
)
async def oauth_handler(
    request: Request,
    identity: OAuthIdentity,
    service: AuthServiceDep,
) -> ResponseModel[OAuthLoginResult]:
    result = await service.login_with_identity(identity)
    return ResponseModel.success(
        data=result,
        message=AuthMsg.LOGIN_SUCCESS,
        request_id=getattr(request.state, "request_id", None),
    )


@router.get(
    "/{username}",
    response_model=ResponseModel[UserPublic],
    summary="公开资料",
)
async def read_user(
    request: Request,
    username: str,
    service: UserServiceDep,
) -> ResponseModel[UserPublic]:
    user = await service.get_by_username(username)
    return ResponseModel.success(
        data=UserPublic.model_validate(user),
        request_id=getattr(request.state, "request_id", None),
    )


@router.get(
    "/{username}/posts",
    response_model=ResponseModel[list[PostRead]],
    summary="作者文章列表",
    description="按创建时间倒序返回该用户发布的文章。用户不存在时返回 404。",
)
async def list_user_posts(
    request: Request,
    username: str,
    claims: OptionalClaims,
    service: UserServiceDep,
    post_service: PostServiceDep,
) -> ResponseModel[list[PostRead]]:
    user = await service.get_by_username(username)
    posts = await post_service.list_by_author(
        user.id, viewer_id=claims.user_id if claims else None
    )
    return ResponseModel.success(
        data=posts,
        request_id=getattr(request.state, "request_id", None),
    )


# ------------------------------------------------------------------------------
# Protected Endpoints (受保护接口 - 需登录)
# ------------------------------------------------------------------------------


@router.put(
    "/{user_id}",
    response_model=ResponseModel[UserRead],
    summary="更新个人资料",
    description="仅允许修改自己的 name / bio / avatar。",
)
async def update_user(
    request: Request,
    user_id: UUID,
    user_in: UserProfileUpdate,
    claims: CurrentClaims,
    service: UserServiceDep,
) -> ResponseModel[UserRead]:
    user = await service.update_profile(user_id, claims, user_in)
    return ResponseModel.success(
        data=user,
        message=UserMsg.PROFILE_UPDATED,
        request_id=getattr(request.state, "request_id", None),
    )
