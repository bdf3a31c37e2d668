"""
File: app/db/models/user_auth_provider.py
Description: 用户外部身份绑定模型 (google / github 等 OAuth 提供方)

一个 User 可以绑定多个外部身份；
每个 (provider, provider_account_id) 组合最多对应一个 User (唯一约束保证)。

注意：
采用 "No-Relationship" 模式，不定义 ORM relationship，
关联仅通过 user_id 外键物理约束。

Created: 2026-10-17
"""

import uuid

from sqlalchemy import ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from app.db.models.base import UUIDModel


class UserAuthProvider(UUIDModel):
    """
    外部身份绑定表 (N:1 User)
    """

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return "user_auth_providers"

    __table_args__ = (
        UniqueConstraint(
            "provider",
            "provider_account_id",
            name="uq_user_auth_providers_provider_account",
        ),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        comment="关联用户ID",
    )

    # 提供方标识: google, github ...
    provider: Mapped[str] = mapped_column(
        String(50), nullable=False, comment="身份提供方"
    )

    # 提供方分配的账号 ID (OAuth sub)
    provider_account_id: Mapped[str] = mapped_column(
        String(255), nullable=False, comment="提供方账号ID"
    )
