"""
File: app/db/models/user.py
Description: 用户核心模型 (OAuth 身份解析后的内部用户)

继承 UUIDModel，自动拥有 UUID v7 主键与 created_at / updated_at。

约束:
- username (对外 handle) 全局唯一，由邮箱本地部分派生
- email 全局唯一，入库前统一转小写 (大小写不敏感)
- 用户不会被任何接口删除

Created: 2026-10-17
"""

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from app.db.models.base import UUIDModel


class User(UUIDModel):
    """
    用户模型 (账号域)
    """

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return "users"

    __table_args__ = (
        CheckConstraint("length(trim(email)) > 0", name="email_not_empty"),
        CheckConstraint("length(trim(username)) > 0", name="username_not_empty"),
    )

    # 对外展示的唯一 handle，如 /users/{username}
    username: Mapped[str] = mapped_column(
        String(64), unique=True, nullable=False, comment="用户 handle (唯一)"
    )

    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, comment="邮箱 (小写, 唯一)"
    )

    # 展示名：来自 OAuth 提供方，可重复
    name: Mapped[str | None] = mapped_column(
        String(100), nullable=True, comment="显示名称"
    )

    avatar: Mapped[str | None] = mapped_column(
        String(512), nullable=True, comment="头像URL"
    )

    bio: Mapped[str | None] = mapped_column(
        String(500), nullable=True, comment="个人简介"
    )
