"""
File: app/api_router.py
Description: 根 API 路由聚合层

本模块负责：
1. 聚合所有业务领域的 Router (posts, comments, users)
2. 统一设置路由前缀与 OpenAPI 文档分组标签

Created: 2026-10-17
"""

from fastapi import APIRouter

from app.domains.comments.router import router as comments_router
from app.domains.posts.router import router as posts_router
from app.domains.users.router import router as users_router

api_router = APIRouter()

# 1. 文章模块 (含标签与点赞)
api_router.include_router(posts_router, prefix="/posts", tags=["posts"])

# 2. 评论模块
api_router.include_router(comments_router, prefix="/comments", tags=["comments"])

# 3. 用户模块 (含 oauth-handler 身份解析)
api_router.include_router(users_router, prefix="/users", tags=["users"])
