"""
File: app/domains/posts/constants.py
Description: 文章领域常量定义 (错误码 + 成功提示)
Namespace: posts.*

Created: 2026-10-17
"""

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
)

from app.core.error_code import BaseErrorCode


class PostError(BaseErrorCode):
    """
    文章领域错误定义
    """

    # --- 400 ---
    # 标题不含任何字母或数字时无法生成 slug
    SLUG_EMPTY = (HTTP_400_BAD_REQUEST, "posts.slug_empty", "标题必须包含字母或数字")

    # --- 403 ---
    NOT_POST_OWNER = (HTTP_403_FORBIDDEN, "posts.not_owner", "只有作者可以修改或删除文章")

    # --- 404 ---
    POST_NOT_FOUND = (HTTP_404_NOT_FOUND, "posts.not_found", "文章不存在")

    # --- 409 ---
    SLUG_CONFLICT = (HTTP_409_CONFLICT, "posts.slug_conflict", "已存在相同标题的文章")


class PostMsg:
    """
    文章领域成功提示文案
    """

    CREATED = "Post created successfully"
    UPDATED = "Post updated successfully"
    DELETED = "Post deleted successfully"
    LIKED = "Post liked successfully"
    UNLIKED = "Post unliked successfully"
