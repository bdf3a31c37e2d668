"""
File: app/domains/auth/service.py
Description: 认证领域服务 (身份解析 + 凭证签发)

本模块封装认证核心业务逻辑：
1. resolve_or_create: 外部身份 -> 内部用户 (find-or-create by email)
   - 已存在：仅用非空值刷新 name / avatar，追加未绑定过的外部身份
   - 不存在：由邮箱本地部分派生 handle，冲突时追加递增数字后缀
2. issue_credential: 为用户签发 Bearer 凭证 (系统中唯一的签发入口)

注意：
handle 生成是"先查后写"，并发首次登录撞名时由 users.username 唯一约束兜底，
IntegrityError 经全局异常处理器映射为 409，本层不做重试。

Created: 2026-10-17
"""

from app.core.config import settings
from app.core.exceptions import AppException
from app.core.logging import logger
from app.core.security import create_access_token
from app.db.models.user import User
from app.domains.auth.constants import AuthError
from app.domains.auth.schemas import OAuthIdentity, OAuthLoginResult, Token
from app.domains.presentation import present_user
from app.domains.users.repository import AuthProviderRepository, UserRepository
from app.utils.masking import mask_account_id, mask_email
from app.utils.slug import derive_handle_base


class AuthService:
    """
    认证服务类。
    """

    def __init__(self, user_repo: UserRepository, provider_repo: AuthProviderRepository):
        self.user_repo = user_repo
        self.provider_repo = provider_repo

    async def login_with_identity(self, identity: OAuthIdentity) -> OAuthLoginResult:
        """
        oauth-handler 流程：解析身份并签发凭证。
        """
        user = await self.resolve_or_create(identity)
        providers = await self.provider_repo.list_for_user(user.id)
        return OAuthLoginResult(
            user=present_user(user, providers),
            token=self.issue_credential(user),
        )

    async def resolve_or_create(self, identity: OAuthIdentity) -> User:
        """
        外部身份解析 (find-or-create)。

        Raises:
            AppException(AuthError.PROVIDER_LINKED_ELSEWHERE): 外部身份已绑定其他用户
        """
        session = self.user_repo.session
        email = identity.email

        linked = await self.provider_repo.get_by_provider_account(
            identity.provider, identity.provider_account_id
        )
        user = await self.user_repo.get_by_email(email)

        if linked is not None and (user is None or linked.user_id != user.id):
            logger.bind(
                provider=identity.provider,
                provider_account_id=mask_account_id(identity.provider_account_id),
                email=mask_email(email),
            ).warning("External identity already linked to another user")
            raise AppException(AuthError.PROVIDER_LINKED_ELSEWHERE)

        if user is not None:
            # 1. 已有用户：空值不覆盖已有资料
            if identity.name:
                user.name = identity.name
            if identity.avatar:
                user.avatar = identity.avatar
            session.add(user)

            if linked is None:
                await self._link_provider(user, identity)
                logger.bind(user_id=str(user.id), provider=identity.provider).info(
                    "External identity linked to existing user"
                )
        else:
            # 2. 新用户：派生唯一 handle
            username = await self._generate_username(email)
            user = User(
                username=username,
                email=email,
                name=identity.name,
                avatar=identity.avatar,
            )
            session.add(user)
            await session.flush()
            await self._link_provider(user, identity)

            logger.bind(
                user_id=str(user.id),
                username=username,
                email=mask_email(email),
                provider=identity.provider,
            ).info("User created from external identity")

        await session.commit()
        await session.refresh(user)
        return user

    def issue_credential(self, user: User) -> Token:
        """
        签发 Bearer 凭证 (携带 user_id 与 email)。
        """
        access_token = create_access_token(user_id=user.id, email=user.email)
        return Token(
            access_token=access_token,
            token_type="bearer",
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        )

    # --------------------------------------------------------------------------
    # 内部方法
    # --------------------------------------------------------------------------

    async def _generate_username(self, email: str) -> str:
        """
        handle 生成: base, base1, base2 ... 直到未被占用
        """
        base = derive_handle_base(email)
        candidate = base
        suffix = 0
        while await self.user_repo.get_by_username(candidate) is not None:
            suffix += 1
            candidate = f"{base}{suffix}"
        return candidate

    async def _link_provider(self, user: User, identity: OAuthIdentity) -> None:
        await self.provider_repo.create(
            {
                "user_id": user.id,
                "provider": identity.provider,
                "provider_account_id": identity.provider_account_id,
            }
        )
