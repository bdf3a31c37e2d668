"""
File: app/db/models/base.py
Description: ORM 模型基类与组件化定义

采用"组件化组合" (Mixin) 模式：
1. UUIDBase: [基础] UUID v7 主键 + 自动表名(snake_case) + update 方法
2. TimestampMixin: [组件] created_at, updated_at (UTC)
3. UUIDModel: [标准] UUIDBase + TimestampMixin (用户 / 文章 / 评论)

主键与时间列使用 SQLAlchemy 通用类型 (Uuid / DateTime)，
PostgreSQL 下映射为 UUID / TIMESTAMPTZ，测试用 SQLite 同样可用。

Created: 2026-10-17
"""

import re
import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import DateTime, MetaData, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column
from uuid6 import uuid7

# 约束命名约定 (alembic autogenerate 依赖稳定的约束名)
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def resolve_table_name(name: str) -> str:
    """
    将驼峰命名 (CamelCase) 转换为蛇形命名 (snake_case)。

    示例:
    - PostLike -> post_like
    - UserAuthProvider -> user_auth_provider
    """
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """SQLAlchemy 声明式元类"""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# ==============================================================================
# 1. 功能组件 (Mixins)
# ==============================================================================


class TimestampMixin:
    """
    [组件] 时间戳混入类

    规范：强制使用 UTC 时间存储，展示时再转本地时间。
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        index=True,
        comment="创建时间 (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
        comment="更新时间 (UTC)",
    )


# ==============================================================================
# 2. 基础模型 (Base Models)
# ==============================================================================


class UUIDBase(Base):
    """
    [纯净版] 仅包含 ID 和基础工具方法。
    """

    __abstract__ = True

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return resolve_table_name(cls.__name__)

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid7, comment="主键 (UUID v7)"
    )

    def update(self, **kwargs: Any) -> None:
        """
        [工具方法] 动态更新模型属性

        用法:
        post.update(**schema.model_dump(exclude_unset=True))
        """
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)


class UUIDModel(UUIDBase, TimestampMixin):
    """
    [标准版] 全站通用的业务模型基类 (ID + 时间戳)。
    """

    __abstract__ = True
