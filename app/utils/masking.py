"""
File: app/utils/masking.py
Description: 日志脱敏工具

身份解析流程会记录邮箱与外部账号 ID，写日志前统一经过本模块脱敏，
确保日志中不出现完整的个人标识。

Created: 2026-10-17
"""

MASK = "******"


def mask_email(email: str | None) -> str:
    """
    邮箱脱敏。
    规则: 保留用户名首位和域名，中间掩盖。
    示例: ava.lin@blog.io -> a***@blog.io
    """
    if not email or "@" not in email:
        return MASK

    user_part, domain_part = email.split("@", 1)
    masked_user = "*" * 4 if len(user_part) <= 1 else f"{user_part[0]}***"
    return f"{masked_user}@{domain_part}"


def mask_account_id(account_id: str | None) -> str:
    """
    外部账号 ID 脱敏，只保留末 4 位。
    示例: 109876543210 -> ****3210
    """
    if not account_id or len(account_id) <= 4:
        return MASK
    return f"****{account_id[-4:]}"
