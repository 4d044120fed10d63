"""网络工具 — 制品 URL 拼接与协议校验"""

from __future__ import annotations

import re
from urllib.parse import urljoin, urlparse

from mason.core.exceptions import ValidationError

_ALLOWED_SCHEMES = frozenset(("http", "https"))
_WHITESPACE_RE = re.compile(r"\s+")


def strip_whitespace(value: str) -> str:
    """去掉字符串中所有空白字符（清单行尾的 \\r、误输入的空格等）"""
    return _WHITESPACE_RE.sub("", value)


def join_bucket_url(bucket_url: str, key: str) -> str:
    """把对象相对路径解析到 bucket 根地址下

    bucket_url 缺少结尾 "/" 时自动补齐，否则 urljoin 会丢掉最后一级路径。
    """
    base = strip_whitespace(bucket_url)
    if not base.endswith("/"):
        base += "/"
    return strip_whitespace(urljoin(base, key.lstrip("/")))


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验 URL 仅使用 http/https，防止 file:// 等非预期协议访问

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{parsed.scheme}'{label}，"
            f"仅支持 http/https: {url}"
        )
