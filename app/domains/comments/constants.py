"""
File: app/domains/comments/constants.py
Description: 评论领域常量定义 (错误码 + 成功提示)
Namespace: comments.*
"""

from starlette.status import HTTP_403_FORBIDDEN, HTTP_404_NOT_FOUND

from app.core.error_code import BaseErrorCode


class CommentError(BaseErrorCode):
    """评论领域错误码"""

    COMMENT_NOT_FOUND = (HTTP_404_NOT_FOUND, "comments.not_found", "评论不存在")
    NOT_COMMENT_OWNER = (HTTP_403_FORBIDDEN, "comments.not_owner", "只能删除自己的评论")


class CommentMsg:
    CREATED = "Comment added successfully"
    DELETED = "Comment deleted successfully"
