"""
File: app/domains/comments/router.py
Description: 评论领域 HTTP 路由层

- POST   /comments               发表评论 (需登录)
- GET    /comments/{post_id}     评论列表 (公开，可选 Token 计算 can_delete)
- DELETE /comments/{comment_id}  删除评论 (仅评论作者)

Created: 2026-10-17
"""

from uuid import UUID

from fastapi import APIRouter, Request, status

from app.api.deps import CurrentClaims, OptionalClaims
from app.core.response import ResponseModel
from app.domains.comments.constants import CommentMsg
from app.domains.comments.dependencies import CommentServiceDep
from app.domains.comments.schemas import CommentCreate, CommentRead

router = APIRouter()


@router.post(
    "",
    response_model=ResponseModel[CommentRead],
    status_code=status.HTTP_201_CREATED,
    summary="发表评论",
)
async def add_comment(
    request: Request,
    comment_in: CommentCreate,
    claims: CurrentClaims,
    service: CommentServiceDep,
) -> ResponseModel[CommentRead]:
    comment = await service.add(claims, comment_in)
    return ResponseModel.success(
        data=comment,
        message=CommentMsg.CREATED,
        request_id=getattr(request.state, "request_id", None),
    )


@router.get(
    "/{post_id}",
    response_model=ResponseModel[list[CommentRead]],
    summary="评论列表",
    description="按创建时间倒序返回文章下的评论；文章不存在时返回空列表。",
)
async def list_comments(
    request: Request,
    post_id: UUID,
    claims: OptionalClaims,
    service: CommentServiceDep,
) -> ResponseModel[list[CommentRead]]:
    viewer_id = claims.user_id if claims else None
    comments = await service.list_by_post(post_id, viewer_id=viewer_id)
    return ResponseModel.success(
        data=comments,
        request_id=getattr(request.state, "request_id", None),
    )


@router.delete(
    "/{comment_id}",
    response_model=ResponseModel[None],
    summary="删除评论",
)
async def delete_comment(
    request: Request,
    comment_id: UUID,
    claims: CurrentClaims,
    service: CommentServiceDep,
) -> ResponseModel[None]:
    await service.delete(comment_id, claims)
    return ResponseModel.success(
        message=CommentMsg.DELETED,
        request_id=getattr(request.state, "request_id", None),
    )
