"""
File: app/domains/users/service.py
Description: 用户领域服务 (业务逻辑层)

1. 公开资料查询：按 handle 获取用户
2. 资料更新：仅允许本人修改 name / bio / avatar

注意：
- 写操作的事务提交 (Commit) 由本层负责
- 用户的创建与外部身份绑定属于身份解析流程，见 app/domains/auth/service.py

Created: 2026-10-17
"""

from uuid import UUID

from app.core.exceptions import AppException
from app.core.logging import logger
from app.core.security import TokenClaims
from app.db.models.user import User
from app.domains.presentation import present_user
from app.domains.users.constants import UserError
from app.domains.users.repository import AuthProviderRepository, UserRepository
from app.domains.users.schemas import UserProfileUpdate, UserRead


class UserService:
    """
    用户领域服务。
    """

    def __init__(self, repo: UserRepository, provider_repo: AuthProviderRepository):
        self.repo = repo
        self.provider_repo = provider_repo

    async def get(self, user_id: UUID) -> User:
        user = await self.repo.get(user_id)
        if not user:
            raise AppException(UserError.USER_NOT_FOUND)
        return user

    async def get_by_username(self, username: str) -> User:
        user = await self.repo.get_by_username(username)
        if not user:
            raise AppException(UserError.USER_NOT_FOUND)
        return user

    async def update_profile(
        self, user_id: UUID, claims: TokenClaims, obj_in: UserProfileUpdate
    ) -> UserRead:
        """
        更新资料 (self-only)。
        先做身份比对再查库，非本人请求不会泄露目标用户是否存在。
        """
        if user_id != claims.user_id:
            raise AppException(UserError.NOT_PROFILE_OWNER)

        user = await self.get(user_id)
        updated_user = await self.repo.update(user, obj_in)
        await self.repo.session.commit()

        logger.bind(
            user_id=str(user_id),
            fields=sorted(obj_in.model_dump(exclude_unset=True).keys()),
        ).info("User profile updated")

        providers = await self.provider_repo.list_for_user(updated_user.id)
        return present_user(updated_user, providers)
