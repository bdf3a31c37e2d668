"""
File: app/db/models/__init__.py
Description: ORM 模型注册表

导入所有业务模型，供 Alembic (env.py) 与测试建表时发现 metadata。

注意：
每当新增一个 Model 文件，必须在此处导入，
否则 Alembic autogenerate 无法检测到新表。

Created: 2026-10-17
"""

from app.db.models.base import Base, TimestampMixin, UUIDBase, UUIDModel
from app.db.models.comment import Comment
from app.db.models.post import Post, PostLike, PostTag
from app.db.models.user import User
from app.db.models.user_auth_provider import UserAuthProvider

__all__ = [
    # 基类
    "Base",
    "UUIDBase",
    "UUIDModel",
    "TimestampMixin",
    # 业务模型
    "User",
    "UserAuthProvider",
    "Post",
    "PostTag",
    "PostLike",
    "Comment",
]
