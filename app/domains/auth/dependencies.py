"""
File: app/domains/auth/dependencies.py
Description: 认证领域依赖注入 (DI)

复用用户领域的 Repository 构造 AuthService。
"""

from typing import Annotated

from fastapi import Depends

from app.domains.auth.service import AuthService
from app.domains.users.dependencies import ProviderRepoDep, UserRepoDep


async def get_auth_service(
    user_repo: UserRepoDep,
    provider_repo: ProviderRepoDep,
) -> AuthService:
    return AuthService(user_repo=user_repo, provider_repo=provider_repo)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
