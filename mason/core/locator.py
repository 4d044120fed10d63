"""包定位器

职责:
- 根据包类型和宿主平台计算远程对象路径 (remote_key)
- 计算下载地址 (source_url) 与本地解压目录 (dest_dir)

纯计算，不做任何 IO。
"""

from __future__ import annotations

import os
from functools import cached_property

from mason.core.config import Config
from mason.core.models import PackageDescriptor, PackageKind
from mason.core.platform import HostContext, detect_platform
from mason.utils.net import join_bucket_url, strip_whitespace

HEADERS_PREFIX = "headers"
ARCHIVE_SUFFIX = ".tar.gz"


class PackageLocator:
    """把 (name, version, kind) 映射为 PackageDescriptor"""

    def __init__(self, config: Config, host: HostContext) -> None:
        self.config = config
        self.host = host

    @cached_property
    def platform(self) -> str:
        """宿主平台标识，每个定位器只解析一次"""
        return self.host.platform or detect_platform()

    @property
    def cache_root(self) -> str:
        return os.path.join(self.host.root, self.config.packages_dir)

    @property
    def link_root(self) -> str:
        return os.path.join(self.cache_root, self.config.link_dir)

    def locate(self, name: str, version: str, kind: PackageKind) -> PackageDescriptor:
        if kind is PackageKind.HEADER:
            plat = ""
            prefix = HEADERS_PREFIX
        else:
            plat = self.platform
            prefix = plat

        # 只清理对象路径中的空白，工作目录本身允许包含空格
        remote_key = strip_whitespace(f"{prefix}/{name}/{version}{ARCHIVE_SUFFIX}")
        dest = os.path.join(self.cache_root, remote_key)
        return PackageDescriptor(
            name=name,
            version=version,
            kind=kind,
            platform=plat,
            remote_key=remote_key,
            source_url=join_bucket_url(self.config.bucket_url, remote_key),
            dest_dir=dest.removesuffix(ARCHIVE_SUFFIX),
        )
