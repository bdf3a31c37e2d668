"""
File: app/domains/users/repository.py
Description: 用户领域仓储层 (Repository)

1. UserRepository: 按 email / username 查询、批量按 ID 查询 (作者内联)
2. AuthProviderRepository: 外部身份绑定的查询与追加

Created: 2026-10-17
"""

from collections.abc import Iterable
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import select

from app.db.models.user import User
from app.db.models.user_auth_provider import UserAuthProvider
from app.db.repositories.base import BaseRepository
from app.domains.users.schemas import UserProfileUpdate


class UserRepository(BaseRepository[User, BaseModel, UserProfileUpdate]):
    """
    用户仓储类。
    email 入库即为小写，查询前由调用方统一转小写。
    """

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        return await self._first(stmt)

    async def get_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username)
        return await self._first(stmt)

    async def get_many(self, ids: Iterable[UUID]) -> dict[UUID, User]:
        """
        批量查询用户，返回 {id: User}。
        不存在的 ID 不会出现在结果中，由展示层替换为占位作者。
        """
        unique_ids = set(ids)
        if not unique_ids:
            return {}
        stmt = select(User).where(User.id.in_(unique_ids))
        return {user.id: user for user in await self._all(stmt)}


class AuthProviderRepository(BaseRepository[UserAuthProvider, BaseModel, BaseModel]):
    """
    外部身份绑定仓储。
    """

    async def get_by_provider_account(
        self, provider: str, provider_account_id: str
    ) -> UserAuthProvider | None:
        stmt = select(UserAuthProvider).where(
            UserAuthProvider.provider == provider,
            UserAuthProvider.provider_account_id == provider_account_id,
        )
        return await self._first(stmt)

    async def list_for_user(self, user_id: UUID) -> list[UserAuthProvider]:
        stmt = (
            select(UserAuthProvider)
            .where(UserAuthProvider.user_id == user_id)
            .order_by(UserAuthProvider.created_at, UserAuthProvider.id)
        )
        return await self._all(stmt)
