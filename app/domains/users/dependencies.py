"""
File: app/domains/users/dependencies.py
Description: 用户领域依赖注入 (DI)

依赖链：
DBSession → UserRepository / AuthProviderRepository → UserService → UserServiceDep

UserRepoDep 同时被 posts / comments / auth 领域复用 (作者内联、身份解析)。
同一请求内 FastAPI 会缓存依赖结果，各领域拿到的是同一个会话。
"""

from typing import Annotated

from fastapi import Depends

from app.api.deps import DBSession
from app.db.models.user import User
from app.db.models.user_auth_provider import UserAuthProvider
from app.domains.users.repository import AuthProviderRepository, UserRepository
from app.domains.users.service import UserService


async def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(model=User, session=session)


UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]


async def get_provider_repository(session: DBSession) -> AuthProviderRepository:
    return AuthProviderRepository(model=UserAuthProvider, session=session)


ProviderRepoDep = Annotated[AuthProviderRepository, Depends(get_provider_repository)]


async def get_user_service(
    repo: UserRepoDep,
    provider_repo: ProviderRepoDep,
) -> UserService:
    return UserService(repo=repo, provider_repo=provider_repo)


# Router 中只需写: service: UserServiceDep
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
