"""
File: app/domains/auth/constants.py
Description: 认证领域常量定义 (错误码 + 成功提示)
Namespace: auth.*

Created: 2026-10-17
"""

from starlette.status import HTTP_409_CONFLICT

from app.core.error_code import BaseErrorCode

# ==============================================================================
# 1. 错误码定义 (Error Codes)
# ==============================================================================


class AuthError(BaseErrorCode):
    """
    认证领域错误定义
    Tuple Structure: (HTTP_Status, Code_String, Default_Message)
    """

    # 同一个 (provider, provider_account_id) 最多绑定一个用户
    PROVIDER_LINKED_ELSEWHERE = (
        HTTP_409_CONFLICT,
        "auth.provider_linked_elsewhere",
        "该外部账号已绑定到其他用户",
    )


# ==============================================================================
# 2. 成功提示语 (Success Messages)
# ==============================================================================


class AuthMsg:
    """
    认证领域成功提示文案
    """

    LOGIN_SUCCESS = "Signed in successfully"
