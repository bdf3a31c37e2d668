"""
File: tests/unit/test_user_service.py
Description: 用户领域服务单元测试

本模块测试 UserService 的核心业务逻辑：
1. 按 handle 查询 (存在 / 不存在)
2. 资料更新仅限本人，且只更新传入的字段

Created: 2026-10-17
"""

from collections.abc import Awaitable, Callable

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AppException
from app.core.security import TokenClaims
from app.db.models.user import User
from app.db.models.user_auth_provider import UserAuthProvider
from app.domains.users.constants import UserError
from app.domains.users.repository import AuthProviderRepository, UserRepository
from app.domains.users.schemas import UserProfileUpdate
from app.domains.users.service import UserService

MakeUser = Callable[..., Awaitable[User]]
ClaimsFor = Callable[[User], TokenClaims]


@pytest.fixture
def user_service(db_session: AsyncSession) -> UserService:
    return UserService(
        repo=UserRepository(model=User, session=db_session),
        provider_repo=AuthProviderRepository(model=UserAuthProvider, session=db_session),
    )


@pytest.mark.asyncio
async def test_get_by_username(user_service: UserService, make_user: MakeUser) -> None:
    created = await make_user("ava", name="Ava")

    user = await user_service.get_by_username("ava")

    assert user.id == created.id


@pytest.mark.asyncio
async def test_get_by_unknown_username(user_service: UserService) -> None:
    with pytest.raises(AppException) as exc_info:
        await user_service.get_by_username("nobody")

    assert exc_info.value.error == UserError.USER_NOT_FOUND


@pytest.mark.asyncio
async def test_update_profile_only_touches_given_fields(
    user_service: UserService, make_user: MakeUser, claims_for: ClaimsFor
) -> None:
    ava = await make_user("ava", name="Ava", avatar="https://img.example.com/a.png")

    updated = await user_service.update_profile(
        ava.id, claims_for(ava), UserProfileUpdate(bio="Writes about Python")
    )

    assert updated.bio == "Writes about Python"
    assert updated.name == "Ava"
    assert updated.avatar == "https://img.example.com/a.png"
    assert updated.email == "ava@example.com"


@pytest.mark.asyncio
async def test_update_profile_blank_clears_field(
    user_service: UserService, make_user: MakeUser, claims_for: ClaimsFor
) -> None:
    ava = await make_user("ava", bio="old bio")

    updated = await user_service.update_profile(
        ava.id, claims_for(ava), UserProfileUpdate(bio="   ")
    )

    assert updated.bio is None


@pytest.mark.asyncio
async def test_update_other_profile_is_forbidden(
    user_service: UserService, make_user: MakeUser, claims_for: ClaimsFor
) -> None:
    ava = await make_user("ava", bio="mine")
    bob = await make_user("bob")

    with pytest.raises(AppException) as exc_info:
        await user_service.update_profile(
            ava.id, claims_for(bob), UserProfileUpdate(bio="hacked")
        )

    assert exc_info.value.error == UserError.NOT_PROFILE_OWNER
    assert (await user_service.get(ava.id)).bio == "mine"
