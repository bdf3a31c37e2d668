"""
File: app/domains/users/constants.py
Description: 用户领域常量定义 (错误码 + 成功提示)
Namespace: users.*
"""

from starlette.status import HTTP_403_FORBIDDEN, HTTP_404_NOT_FOUND

from app.core.error_code import BaseErrorCode


class UserError(BaseErrorCode):
    """用户领域错误码"""

    # 格式: (HTTP状态, 业务码, 默认文案)
    USER_NOT_FOUND = (HTTP_404_NOT_FOUND, "users.not_found", "用户不存在")

    # 只能修改自己的资料
    NOT_PROFILE_OWNER = (HTTP_403_FORBIDDEN, "users.not_owner", "无权修改其他用户的资料")


class UserMsg:
    """用户领域成功提示文案"""

    PROFILE_UPDATED = "Profile updated successfully"
