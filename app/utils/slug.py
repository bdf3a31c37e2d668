"""
File: app/utils/slug.py
Description: 文本派生标识工具 (slug / handle)

1. slugify: 由文章标题派生 URL slug
   小写化，去除非字母数字字符，连续空白 (以及 - / _) 折叠为单个连字符，
   首尾不留连字符，超过 MAX_SLUG_LENGTH 时截断。纯函数，同一标题永远得到同一 slug。
2. derive_handle_base: 由邮箱本地部分派生用户 handle 基础值
   小写化后只保留 [a-z0-9]，冲突时由调用方追加数字后缀。

Created: 2026-10-17
"""

import re
import unicodedata

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9\s_-]")
_SEPARATORS = re.compile(r"[\s_-]+")
_NON_HANDLE_CHARS = re.compile(r"[^a-z0-9]")

# 与 posts.slug 列长度一致
MAX_SLUG_LENGTH = 200

# 预留数字后缀空间 (users.username 长度 64)
MAX_HANDLE_BASE_LENGTH = 48

# 邮箱本地部分不含任何字母数字时的兜底 handle
DEFAULT_HANDLE = "user"


def _ascii_fold(value: str) -> str:
    """Café -> Cafe，无法折叠的字符直接丢弃"""
    normalized = unicodedata.normalize("NFKD", value)
    return normalized.encode("ascii", "ignore").decode("ascii")


def slugify(title: str) -> str:
    """
    示例:
    - "Hello, World!" -> "hello-world"
    - "  Async   I/O in Python " -> "async-io-in-python"

    NFKD 会展开兼容字符 ("㎉" -> "kcal")，slug 可能比标题长得多，故按列长截断。
    """
    text = _ascii_fold(title).lower()
    text = _NON_SLUG_CHARS.sub("", text)
    slug = "-".join(part for part in _SEPARATORS.split(text) if part)
    return slug[:MAX_SLUG_LENGTH].strip("-")


def derive_handle_base(email: str) -> str:
    """
    示例:
    - "Ava.Lin+blog@x.com" -> "avalinblog"
    - "a@x.com" -> "a"
    """
    local_part = email.split("@", 1)[0]
    handle = _NON_HANDLE_CHARS.sub("", _ascii_fold(local_part).lower())
    return handle[:MAX_HANDLE_BASE_LENGTH] or DEFAULT_HANDLE
