"""
File: tests/integration/test_comments_router.py
Description: 评论领域 HTTP 接口集成测试

Created: 2026-10-17
"""

from collections.abc import Awaitable, Callable
from typing import Any

import pytest
from httpx import AsyncClient
from uuid6 import uuid7

from app.core.config import settings

API = settings.API_V1_STR

SignIn = Callable[..., Awaitable[dict[str, Any]]]


async def new_post(client: AsyncClient, who: dict[str, Any], title: str) -> str:
    response = await client.post(
        f"{API}/posts", json={"title": title, "content": "x"}, headers=who["headers"]
    )
    assert response.status_code == 201
    return response.json()["data"]["id"]


@pytest.mark.asyncio
async def test_add_and_list_comments(client: AsyncClient, sign_in: SignIn) -> None:
    ava = await sign_in("ava@x.com", name="Ava")
    post_id = await new_post(client, ava, "Discuss")

    created = await client.post(
        f"{API}/comments",
        json={"postId": post_id, "content": "Nice post"},
        headers=ava["headers"],
    )

    assert created.status_code == 201
    assert created.json()["message"] == "Comment added successfully"
    comment = created.json()["data"]
    assert comment["author"]["username"] == "ava"
    assert comment["post_id"] == post_id

    listed = await client.get(f"{API}/comments/{post_id}")
    assert listed.status_code == 200
    assert [c["content"] for c in listed.json()["data"]] == ["Nice post"]


@pytest.mark.asyncio
async def test_comment_on_missing_post(client: AsyncClient, sign_in: SignIn) -> None:
    ava = await sign_in("ava@x.com")

    response = await client.post(
        f"{API}/comments",
        json={"postId": str(uuid7()), "content": "hello?"},
        headers=ava["headers"],
    )

    assert response.status_code == 404
    assert response.json()["code"] == "posts.not_found"


@pytest.mark.asyncio
async def test_comment_requires_token(client: AsyncClient) -> None:
    response = await client.post(
        f"{API}/comments", json={"postId": str(uuid7()), "content": "anon"}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_delete_comment_owner_only(client: AsyncClient, sign_in: SignIn) -> None:
    ava = await sign_in("ava@x.com")
    bob = await sign_in("bob@x.com")
    post_id = await new_post(client, ava, "Thread")
    created = await client.post(
        f"{API}/comments",
        json={"postId": post_id, "content": "bob was here"},
        headers=bob["headers"],
    )
    comment_id = created.json()["data"]["id"]

    # 文章作者也不能删除别人的评论
    forbidden = await client.delete(f"{API}/comments/{comment_id}", headers=ava["headers"])
    assert forbidden.status_code == 403
    assert forbidden.json()["code"] == "comments.not_owner"

    deleted = await client.delete(f"{API}/comments/{comment_id}", headers=bob["headers"])
    assert deleted.status_code == 200
    assert deleted.json()["data"] is None

    listed = await client.get(f"{API}/comments/{post_id}")
    assert listed.json()["data"] == []


@pytest.mark.asyncio
async def test_delete_missing_comment(client: AsyncClient, sign_in: SignIn) -> None:
    ava = await sign_in("ava@x.com")

    response = await client.delete(f"{API}/comments/{uuid7()}", headers=ava["headers"])

    assert response.status_code == 404
    assert response.json()["code"] == "comments.not_found"
