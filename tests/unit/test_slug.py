"""
File: tests/unit/test_slug.py
Description: slug / handle 派生规则单元测试

Created: 2026-10-17
"""

import pytest

from app.db.models.post import Post
from app.utils.slug import (
    DEFAULT_HANDLE,
    MAX_HANDLE_BASE_LENGTH,
    MAX_SLUG_LENGTH,
    derive_handle_base,
    slugify,
)


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Hello, World!", "hello-world"),
        ("  Async   I/O in Python ", "async-io-in-python"),
        ("Café au lait", "cafe-au-lait"),
        ("snake_case and-dashes", "snake-case-and-dashes"),
        ("Top 10 Tips", "top-10-tips"),
    ],
)
def test_slugify(title: str, expected: str) -> None:
    assert slugify(title) == expected


def test_slugify_is_deterministic() -> None:
    assert slugify("Same Title") == slugify("Same Title")


def test_slugify_without_alphanumerics_is_empty() -> None:
    assert slugify("!!! ??? ...") == ""


@pytest.mark.parametrize("title", ["\u3389" * 200, "\u3371 " * 100, "x" * 200])
def test_slugify_fits_slug_column(title: str) -> None:
    # 兼容字符展开后 ("㎉" -> "kcal") 仍不能超过列长
    slug = slugify(title)
    assert 0 < len(slug) <= Post.__table__.c.slug.type.length
    assert MAX_SLUG_LENGTH == Post.__table__.c.slug.type.length


def test_slugify_truncation_drops_trailing_hyphen() -> None:
    slug = slugify("a" * (MAX_SLUG_LENGTH - 1) + " b")
    assert slug == "a" * (MAX_SLUG_LENGTH - 1)


@pytest.mark.parametrize(
    ("email", "expected"),
    [
        ("a@x.com", "a"),
        ("Ava.Lin+blog@x.com", "avalinblog"),
        ("john_doe-99@example.org", "johndoe99"),
    ],
)
def test_derive_handle_base(email: str, expected: str) -> None:
    assert derive_handle_base(email) == expected


def test_derive_handle_base_fallback() -> None:
    assert derive_handle_base("...@x.com") == DEFAULT_HANDLE


def test_derive_handle_base_truncates() -> None:
    handle = derive_handle_base("a" * 100 + "@x.com")
    assert len(handle) == MAX_HANDLE_BASE_LENGTH
